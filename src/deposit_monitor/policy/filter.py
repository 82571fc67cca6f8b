"""Deposit filter - keeps nonzero deposits of the configured token."""

from __future__ import annotations

import logging
from decimal import ROUND_HALF_UP, Decimal

from deposit_monitor.models.events import DepositEvent
from deposit_monitor.models.records import FilterResult

log = logging.getLogger(__name__)

# USDT is a 6-decimal token
USDT_DECIMALS = 6
_CENTS = Decimal("0.01")


def to_token_units(amount: int, decimals: int = USDT_DECIMALS) -> Decimal:
    """Convert a raw integer amount to token units."""
    return Decimal(amount) / (Decimal(10) ** decimals)


def format_token_amount(amount: int, decimals: int = USDT_DECIMALS) -> str:
    """Two fractional digits with thousands separators: 1234560000 -> "1,234.56"."""
    value = to_token_units(amount, decimals).quantize(_CENTS, rounding=ROUND_HALF_UP)
    return f"{value:,.2f}"


class DepositFilter:
    """Evaluates deposit events against the token policy.

    Checks:
    1. Token address matches the configured token (case-insensitive)
    2. Amount is greater than zero
    """

    def __init__(self, token_address: str) -> None:
        self._token = token_address.lower()

    @property
    def token_address(self) -> str:
        return self._token

    def evaluate(self, event: DepositEvent) -> FilterResult:
        if event.token.lower() != self._token:
            return FilterResult(accepted=False, reason="other_token", amount=event.amount)

        display = format_token_amount(event.amount)
        if to_token_units(event.amount) <= 0:
            return FilterResult(
                accepted=False, reason="zero_amount", amount=event.amount,
                display_amount=display,
            )

        return FilterResult(
            accepted=True, reason="accepted", amount=event.amount,
            display_amount=display,
        )
