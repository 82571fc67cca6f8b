"""Notifier protocol - delivers formatted alerts to a chat."""

from __future__ import annotations

from typing import Protocol


class Notifier(Protocol):
    """Sends HTML messages to the configured chat."""

    async def send(self, text: str) -> bool:
        """Send a message. Returns False (after logging) if delivery failed."""
        ...
