"""ChainSource protocol - reads block height and contract logs."""

from __future__ import annotations

from typing import Any, Mapping, Protocol, Sequence

# A web3 event record (AttributeDict) with "args", "blockNumber", "transactionHash"
RawEvent = Mapping[str, Any]


class ChainSource(Protocol):
    """Chain data provider addressed to one target contract."""

    async def get_current_height(self) -> int:
        """Latest block number known to the node."""
        ...

    async def query_logs(
        self, event_name: str, from_block: int, to_block: int,
    ) -> Sequence[RawEvent]:
        """Decoded logs for one event signature in [from_block, to_block]."""
        ...
