"""Ethereum integration components."""

from deposit_monitor.ethereum.source import (
    DEPOSIT_ABI,
    DEPOSIT_EVENT_NAMES,
    Web3DepositSource,
)

__all__ = ["DEPOSIT_ABI", "DEPOSIT_EVENT_NAMES", "Web3DepositSource"]
