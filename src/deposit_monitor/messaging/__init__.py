"""Telegram delivery and message formatting."""

from deposit_monitor.messaging.notifier import TelegramNotifier
from deposit_monitor.messaging.templates import deposit_alert, startup_message

__all__ = ["TelegramNotifier", "deposit_alert", "startup_message"]
