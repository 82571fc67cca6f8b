"""Data models for the deposit monitor."""

from deposit_monitor.models.events import DepositEvent
from deposit_monitor.models.records import FilterResult, PollReport
from deposit_monitor.models.config import (
    ConfigError,
    MonitorConfig,
    TARGET_CONTRACT,
    USDT_CONTRACT,
)

__all__ = [
    "DepositEvent",
    "FilterResult", "PollReport",
    "ConfigError", "MonitorConfig", "TARGET_CONTRACT", "USDT_CONTRACT",
]
