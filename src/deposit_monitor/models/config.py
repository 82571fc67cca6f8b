"""Configuration model for the monitor."""

from __future__ import annotations

from dataclasses import dataclass
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

# Fixed monitoring targets (Ethereum mainnet)
TARGET_CONTRACT = "0x6503de9FE77d256d9d823f2D335Ce83EcE9E153f"
USDT_CONTRACT = "0xdac17f958d2ee523a2206206994597c13d831ec7"

LOG_LEVELS = ("debug", "info", "warning", "error", "critical")


class ConfigError(ValueError):
    """Raised when a required setting is missing or invalid."""


@dataclass(frozen=True)
class MonitorConfig:
    """Complete monitor configuration. Built once by load_config()."""

    # Monitor
    poll_interval: float = 15  # seconds
    log_level: str = "info"
    timezone: str = ""  # IANA name for alert timestamps; empty = system local

    # Ethereum
    rpc_url: str = ""  # loaded from env var ETH_RPC_URL
    target_contract: str = TARGET_CONTRACT
    token_contract: str = USDT_CONTRACT
    explorer_url: str = "https://etherscan.io"

    # Telegram
    bot_token: str = ""  # loaded from env var TELEGRAM_BOT_TOKEN
    chat_id: str = ""  # loaded from env var TELEGRAM_CHAT_ID

    def missing(self) -> list[str]:
        """Names of the environment variables for unset required values."""
        required = (
            ("ETH_RPC_URL", self.rpc_url),
            ("TELEGRAM_BOT_TOKEN", self.bot_token),
            ("TELEGRAM_CHAT_ID", self.chat_id),
        )
        return [name for name, value in required if not value]

    def validate(self) -> None:
        missing = self.missing()
        if missing:
            raise ConfigError(f"Missing required configuration: {', '.join(missing)}")
        if self.poll_interval <= 0:
            raise ConfigError(f"poll_interval must be positive, got {self.poll_interval}")
        if self.log_level.lower() not in LOG_LEVELS:
            raise ConfigError(
                f"log_level must be one of {', '.join(LOG_LEVELS)}, got {self.log_level!r}"
            )
        if self.timezone:
            try:
                ZoneInfo(self.timezone)
            except (ZoneInfoNotFoundError, ValueError) as exc:
                raise ConfigError(f"Unknown timezone {self.timezone!r}") from exc
