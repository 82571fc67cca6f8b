"""Protocol interfaces for deposit_monitor components."""

from deposit_monitor.interfaces.chain import ChainSource, RawEvent
from deposit_monitor.interfaces.notifier import Notifier

__all__ = ["ChainSource", "RawEvent", "Notifier"]
