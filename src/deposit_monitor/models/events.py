"""Contract event models decoded from eth_getLogs results."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping


def _to_hex(value: object) -> str:
    """Render a HexBytes/bytes hash as 0x-prefixed hex; pass strings through."""
    if isinstance(value, (bytes, bytearray)):
        return "0x" + bytes(value).hex()
    text = str(value)
    return text if text.startswith("0x") else f"0x{text}"


@dataclass(frozen=True)
class DepositEvent:
    """A decoded Deposit/Deposited log from the target contract."""

    user: str  # depositor address
    token: str  # token contract address
    amount: int  # smallest unit (6 decimals for USDT)
    block_number: int
    transaction_hash: str  # 0x-prefixed
    event_name: str = "Deposit"
    log_index: int | None = None

    @classmethod
    def from_log(cls, raw: Mapping[str, Any]) -> DepositEvent:
        """Build from a web3 event record (AttributeDict or plain dict).

        Raises KeyError/TypeError/ValueError when the record is malformed.
        """
        args = raw["args"]
        log_index = raw.get("logIndex")
        return cls(
            user=str(args["user"]),
            token=str(args["token"]),
            amount=int(args["amount"]),
            block_number=int(raw["blockNumber"]),
            transaction_hash=_to_hex(raw["transactionHash"]),
            event_name=str(raw.get("event") or "Deposit"),
            log_index=int(log_index) if log_index is not None else None,
        )
