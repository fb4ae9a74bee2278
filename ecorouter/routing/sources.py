"""Per-platform trade sources.

A trade source turns a ``TradeRequest`` into that platform's best trade (or
None). AMM sources resolve pairs and run the path search; the 0x source asks
the off-chain API and is debounced by the poller.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Protocol

import structlog

from ecorouter.chains import CHAINS, ChainConfig
from ecorouter.config import DEFAULT_CONFIG, RouterConfig
from ecorouter.models.currency import wrapped_currency
from ecorouter.models.trade import Trade, TradeType
from ecorouter.pairs.resolver import resolve_common_pairs
from ecorouter.routing.search import best_trade_exact_in, best_trade_exact_out

if TYPE_CHECKING:
    from ecorouter.amm.uniswap_v2 import UniswapV2Trade
    from ecorouter.models.platform import Platform, UniswapV2Platform
    from ecorouter.offchain.zerox import ZeroXClient, ZeroXTrade
    from ecorouter.pairs.reserves import ReserveSource
    from ecorouter.routing.poller import TradeRequest

logger = structlog.get_logger()


class TradeSource(Protocol):
    """One platform able to quote a trade."""

    @property
    def platform(self) -> Platform: ...

    @property
    def debounce_seconds(self) -> float: ...

    def supports(self, chain_id: int) -> bool: ...

    async def best_trade(self, request: TradeRequest) -> Trade | None: ...


def _is_trivial(request: TradeRequest, chain: ChainConfig) -> bool:
    """True when there is nothing to route (zero amount or same wrapped token)."""
    if request.amount.raw == 0:
        return True
    return wrapped_currency(request.currency_in, chain) == wrapped_currency(
        request.currency_out, chain
    )


class UniswapV2TradeSource:
    """Best trade on one UniswapV2-style platform.

    Pairs are resolved from scratch on every request; nothing is cached
    between requests.
    """

    debounce_seconds: float = 0.0

    def __init__(
        self,
        platform: UniswapV2Platform,
        reserve_source: ReserveSource,
        chains: Mapping[int, ChainConfig] = CHAINS,
        config: RouterConfig = DEFAULT_CONFIG,
    ) -> None:
        self._platform = platform
        self.reserve_source = reserve_source
        self.chains = chains
        self.config = config

    @property
    def platform(self) -> UniswapV2Platform:
        return self._platform

    def supports(self, chain_id: int) -> bool:
        return chain_id in self.chains and self._platform.supports_chain(chain_id)

    async def best_trade(self, request: TradeRequest) -> UniswapV2Trade | None:
        """Resolve pairs and search them.

        Returns:
            The best trade, or None when no route exists
        """
        chain = self.chains[request.chain_id]
        if _is_trivial(request, chain):
            return None

        pairs = await resolve_common_pairs(
            request.currency_in,
            request.currency_out,
            chain.bases,
            self._platform,
            self.reserve_source,
            chain,
        )
        if not pairs:
            logger.debug("no_pairs", platform=self._platform.name, chain_id=chain.chain_id)
            return None

        max_hops = self.config.max_hops(request.multihop)
        max_results = self.config.max_results_per_platform
        if request.trade_type == TradeType.EXACT_INPUT:
            trades = best_trade_exact_in(
                pairs,
                request.amount,
                request.currency_out,
                self._platform,
                max_hops=max_hops,
                max_num_results=max_results,
                wrapped_native=chain.wrapped_native,
            )
        else:
            trades = best_trade_exact_out(
                pairs,
                request.currency_in,
                request.amount,
                self._platform,
                max_hops=max_hops,
                max_num_results=max_results,
                wrapped_native=chain.wrapped_native,
            )
        return trades[0] if trades else None


class ZeroXTradeSource:
    """Best trade from the 0x API."""

    def __init__(
        self,
        client: ZeroXClient,
        debounce_seconds: float = 0.5,
        chains: Mapping[int, ChainConfig] = CHAINS,
    ) -> None:
        self.client = client
        self.debounce_seconds = debounce_seconds
        self.chains = chains

    @property
    def platform(self) -> Platform:
        return self.client.platform

    def supports(self, chain_id: int) -> bool:
        return chain_id in self.chains and self.client.platform.supports_chain(chain_id)

    async def best_trade(self, request: TradeRequest) -> ZeroXTrade | None:
        if _is_trivial(request, self.chains[request.chain_id]):
            return None
        return await self.client.quote(
            request.chain_id,
            request.currency_in,
            request.currency_out,
            request.amount,
            request.trade_type,
            request.slippage_bps,
        )


__all__ = ["TradeSource", "UniswapV2TradeSource", "ZeroXTradeSource"]
