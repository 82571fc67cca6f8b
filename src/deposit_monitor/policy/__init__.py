"""Deposit policy: token match and amount checks."""

from deposit_monitor.policy.filter import DepositFilter, format_token_amount

__all__ = ["DepositFilter", "format_token_amount"]
