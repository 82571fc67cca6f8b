"""USDT deposit monitor: polls an Ethereum contract and alerts Telegram."""

__version__ = "0.1.0"
