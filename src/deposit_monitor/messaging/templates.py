"""HTML message templates for Telegram alerts."""

from __future__ import annotations

from datetime import datetime
from html import escape
from zoneinfo import ZoneInfo

from deposit_monitor.models.events import DepositEvent

TOKEN_SYMBOL = "USDT"
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def local_timestamp(timezone: str = "", now: datetime | None = None) -> str:
    """Format ``now`` (default: current time) in ``timezone`` or system local time."""
    if now is None:
        now = datetime.now().astimezone()
    if timezone:
        now = now.astimezone(ZoneInfo(timezone))
    return now.strftime(TIMESTAMP_FORMAT)


def tx_url(explorer_url: str, tx_hash: str) -> str:
    return f"{explorer_url.rstrip('/')}/tx/{tx_hash}"


def startup_message(block: int, contract: str, interval: float) -> str:
    return (
        "🤖 <b>Deposit monitor started</b>\n\n"
        f"📍 Current block: {block}\n"
        f"🎯 Contract: <code>{escape(contract)}</code>\n"
        f"💰 Token: {TOKEN_SYMBOL}\n"
        f"⏰ Check interval: {interval:g}s\n\n"
        "Watching for Deposit events..."
    )


def deposit_alert(
    event: DepositEvent,
    display_amount: str,
    explorer_url: str,
    timestamp: str,
) -> str:
    link = escape(tx_url(explorer_url, event.transaction_hash), quote=True)
    return (
        f"🚨 <b>{TOKEN_SYMBOL} deposit detected</b>\n\n"
        f"👤 <b>User:</b> <code>{escape(event.user)}</code>\n"
        f"💵 <b>Amount:</b> {display_amount} {TOKEN_SYMBOL}\n"
        f"📦 <b>Block:</b> {event.block_number}\n"
        f'🔗 <b>Tx:</b> <a href="{link}">View on Etherscan</a>\n\n'
        f"⏰ {timestamp}"
    )
