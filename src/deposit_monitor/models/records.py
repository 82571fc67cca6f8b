"""Result records produced by the filter and the poll loop."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class FilterResult:
    """Outcome of evaluating one deposit against the token policy."""

    accepted: bool
    reason: str  # "accepted", "other_token", "zero_amount"
    amount: int  # raw units
    display_amount: str | None = None  # e.g. "1,234.56", only for USDT deposits
    delivered: bool = False  # alert reached the chat


@dataclass
class PollReport:
    """Summary of one poll cycle over [from_block, to_block]."""

    from_block: int
    to_block: int
    events_by_name: dict[str, int] = field(default_factory=dict)
    failed_queries: list[str] = field(default_factory=list)
    alerts_sent: int = 0

    @property
    def blocks_scanned(self) -> int:
        return self.to_block - self.from_block + 1

    @property
    def total_events(self) -> int:
        return sum(self.events_by_name.values())
