"""Reserve sources for UniswapV2-style pairs.

A reserve source answers "given a pair address on a platform, what are its
reserves?". ``None`` means the pair contract does not exist (or holds no
readable state); transport failures raise.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

import structlog
from eth_abi import decode  # type: ignore[attr-defined]
from eth_abi.exceptions import DecodingError

from ecorouter.errors import ReserveFetchError, RpcError

if TYPE_CHECKING:
    from ecorouter.chain.rpc import JsonRpcClient
    from ecorouter.models.platform import UniswapV2Platform

logger = structlog.get_logger()

# getReserves() returns (uint112 reserve0, uint112 reserve1, uint32 blockTimestampLast)
GET_RESERVES_SELECTOR = "0x0902f1ac"
GET_RESERVES_TYPES = ["uint112", "uint112", "uint32"]


@dataclass(frozen=True)
class Reserves:
    """Reserves of a pair in canonical (token0, token1) order."""

    reserve0: int
    reserve1: int
    block_timestamp_last: int = 0


class ReserveSource(Protocol):
    """Anything that can fetch pair reserves."""

    async def get_reserves(
        self, pair_address: str, platform: UniswapV2Platform
    ) -> Reserves | None: ...


class JsonRpcReserveSource:
    """Reads reserves with ``eth_call getReserves()`` on the pair contract."""

    def __init__(self, client: JsonRpcClient) -> None:
        self.client = client

    async def get_reserves(
        self, pair_address: str, platform: UniswapV2Platform
    ) -> Reserves | None:
        """Fetch reserves of one pair.

        Returns:
            Reserves, or None if the call reverts or returns no data

        Raises:
            ReserveFetchError: If the node could not be reached or answered with
                an error other than a revert
        """
        try:
            result = await self.client.eth_call({"to": pair_address, "data": GET_RESERVES_SELECTOR})
        except RpcError as e:
            if not e.is_revert:
                raise ReserveFetchError(f"getReserves({pair_address}) failed: {e}") from e
            # No pair deployed at this address
            logger.debug(
                "get_reserves_reverted",
                platform=platform.name,
                pair=pair_address,
                error=str(e),
            )
            return None

        try:
            data = bytes.fromhex(result[2:] if result.startswith("0x") else result)
        except ValueError as e:
            raise ReserveFetchError(f"Non-hex getReserves({pair_address}) result") from e
        if not data:
            return None
        try:
            reserve0, reserve1, timestamp = decode(GET_RESERVES_TYPES, data)
        except DecodingError as e:
            raise ReserveFetchError(f"Undecodable getReserves({pair_address}) result") from e
        return Reserves(reserve0=reserve0, reserve1=reserve1, block_timestamp_last=timestamp)


__all__ = [
    "GET_RESERVES_SELECTOR",
    "JsonRpcReserveSource",
    "ReserveSource",
    "Reserves",
]
