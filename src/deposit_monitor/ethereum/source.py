"""Web3 log source - queries the target contract for deposit events."""

from __future__ import annotations

import logging
from typing import Sequence

from web3 import AsyncHTTPProvider, AsyncWeb3

from deposit_monitor.interfaces.chain import RawEvent

log = logging.getLogger(__name__)

# Both aliases share one argument layout; a deployment may emit either.
DEPOSIT_EVENT_NAMES = ("Deposit", "Deposited")

_DEPOSIT_INPUTS = [
    {"indexed": True, "internalType": "address", "name": "user", "type": "address"},
    {"indexed": True, "internalType": "address", "name": "token", "type": "address"},
    {"indexed": False, "internalType": "uint256", "name": "amount", "type": "uint256"},
]

DEPOSIT_ABI = [
    {"anonymous": False, "inputs": _DEPOSIT_INPUTS, "name": name, "type": "event"}
    for name in DEPOSIT_EVENT_NAMES
] + [
    {
        "inputs": [
            {"internalType": "address", "name": "token", "type": "address"},
            {"internalType": "uint256", "name": "amount", "type": "uint256"},
        ],
        "name": "deposit",
        "outputs": [],
        "stateMutability": "nonpayable",
        "type": "function",
    },
]


class Web3DepositSource:
    """Reads block height and Deposit/Deposited logs over JSON-RPC.

    Uses AsyncWeb3 with an HTTP provider; log decoding is done by the
    contract's event ABI so each returned record carries decoded ``args``.
    """

    def __init__(self, rpc_url: str, contract_address: str) -> None:
        self._w3 = AsyncWeb3(AsyncHTTPProvider(rpc_url))
        self._address = AsyncWeb3.to_checksum_address(contract_address)
        self._contract = self._w3.eth.contract(address=self._address, abi=DEPOSIT_ABI)

    @property
    def contract_address(self) -> str:
        return self._address

    async def get_current_height(self) -> int:
        return await self._w3.eth.block_number

    async def query_logs(
        self, event_name: str, from_block: int, to_block: int,
    ) -> Sequence[RawEvent]:
        """Fetch decoded logs for one event name.

        Raises if the name is not in the ABI or the RPC call fails; the
        caller decides whether that is fatal.
        """
        event = getattr(self._contract.events, event_name)
        entries = await event.get_logs(from_block=from_block, to_block=to_block)
        log.debug(
            "%s logs %d-%d: %d entries", event_name, from_block, to_block, len(entries),
        )
        return list(entries)

    async def close(self) -> None:
        """Close the provider's cached HTTP sessions."""
        await self._w3.provider.disconnect()
