"""Routable platforms.

A platform is a source of trades: a UniswapV2-style AMM fork deployed on some
chains, or an off-chain quote aggregator. Platform instances are plain
configuration; the tables live in ``ecorouter.platforms``.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from eth_utils import keccak

from ecorouter.errors import PlatformUnsupportedError
from ecorouter.models.types import address_bytes, normalize_address

if TYPE_CHECKING:
    from ecorouter.models.currency import Token


@dataclass(frozen=True)
class Platform:
    """Base platform: a name and the chains it is available on."""

    name: str
    chain_ids: frozenset[int]

    def supports_chain(self, chain_id: int | None) -> bool:
        return chain_id is not None and chain_id in self.chain_ids

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class UniswapV2Platform(Platform):
    """A constant-product AMM fork with a UniswapV2-compatible router.

    Attributes:
        factories: Pair factory address per chain id
        routers: Router02-compatible router address per chain id
        init_code_hash: Pair contract init code hash used for CREATE2
        fee_bps: Swap fee in basis points (30 = 0.3%)
    """

    factories: Mapping[int, str] = field(default_factory=dict, compare=False)
    routers: Mapping[int, str] = field(default_factory=dict, compare=False)
    init_code_hash: str = field(default="0x" + "00" * 32, compare=False)
    fee_bps: int = field(default=30, compare=False)

    def supports_chain(self, chain_id: int | None) -> bool:
        return (
            super().supports_chain(chain_id)
            and chain_id in self.factories
            and chain_id in self.routers
        )

    @property
    def fee_multiplier(self) -> int:
        """Fee multiplier for AMM math (10000 - fee_bps)."""
        return 10000 - self.fee_bps

    def router_address(self, chain_id: int) -> str:
        if not self.supports_chain(chain_id):
            raise PlatformUnsupportedError(self.name, chain_id)
        return normalize_address(self.routers[chain_id])

    def pair_address(self, token_a: Token, token_b: Token, chain_id: int) -> str:
        """Compute the CREATE2 address of the pair contract for two tokens.

        Raises:
            PlatformUnsupportedError: If the platform is not deployed on the chain
            ValueError: If the tokens are identical or on different chains
        """
        if not self.supports_chain(chain_id):
            raise PlatformUnsupportedError(self.name, chain_id)
        token0, token1 = (token_a, token_b) if token_a.sorts_before(token_b) else (token_b, token_a)
        salt = keccak(address_bytes(token0.address) + address_bytes(token1.address))
        digest = keccak(
            b"\xff"
            + address_bytes(self.factories[chain_id])
            + salt
            + bytes.fromhex(self.init_code_hash[2:])
        )
        return "0x" + digest[12:].hex()


@dataclass(frozen=True)
class ZeroXPlatform(Platform):
    """The 0x off-chain aggregator.

    Attributes:
        api_urls: Swap API base URL per chain id
    """

    api_urls: Mapping[int, str] = field(default_factory=dict, compare=False)

    def supports_chain(self, chain_id: int | None) -> bool:
        return super().supports_chain(chain_id) and chain_id in self.api_urls

    def api_url(self, chain_id: int) -> str:
        if not self.supports_chain(chain_id):
            raise PlatformUnsupportedError(self.name, chain_id)
        return self.api_urls[chain_id].rstrip("/")


__all__ = ["Platform", "UniswapV2Platform", "ZeroXPlatform"]
