"""Aggregator facade.

The Aggregator is the entry point for quoting a swap across every platform
of a chain. It owns the trade sources of each chain and runs a fresh poller
per quote so concurrent callers never share request state.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING

import structlog

from ecorouter.chain.rpc import JsonRpcClient
from ecorouter.chains import CHAINS
from ecorouter.config import RouterConfig, rpc_url_for_chain
from ecorouter.execution.gas import JsonRpcGasEstimator, estimate_swap_gas
from ecorouter.offchain.zerox import ZeroXClient
from ecorouter.pairs.reserves import JsonRpcReserveSource
from ecorouter.platforms import UNISWAP_V2_PLATFORMS, ZEROX
from ecorouter.routing.poller import MultiPlatformPoller, UpdateCallback
from ecorouter.routing.sources import TradeSource, UniswapV2TradeSource, ZeroXTradeSource

if TYPE_CHECKING:
    from ecorouter.execution.gas import GasEstimator
    from ecorouter.models.trade import SwapOptions, Trade
    from ecorouter.routing.poller import TradeRequest

logger = structlog.get_logger()


class Aggregator:
    """Quotes swaps on every platform of a chain and ranks the results.

    Args:
        sources_by_chain: Trade sources per chain id, in platform enumeration order
        gas_estimators: Optional gas estimator per chain id
        clients: Network clients owned by the aggregator, closed by ``close``
    """

    def __init__(
        self,
        sources_by_chain: Mapping[int, Sequence[TradeSource]],
        gas_estimators: Mapping[int, GasEstimator] | None = None,
        clients: Sequence[JsonRpcClient | ZeroXClient] = (),
    ) -> None:
        self.sources_by_chain = {chain_id: list(s) for chain_id, s in sources_by_chain.items()}
        self.gas_estimators = dict(gas_estimators or {})
        self._clients = list(clients)

    def supports_chain(self, chain_id: int) -> bool:
        return bool(self.sources_by_chain.get(chain_id))

    def poller(
        self, chain_id: int, on_update: UpdateCallback | None = None
    ) -> MultiPlatformPoller:
        """A long-lived poller for interactive use (one per user session)."""
        return MultiPlatformPoller(self.sources_by_chain.get(chain_id, []), on_update=on_update)

    async def quote(self, request: TradeRequest) -> list[Trade]:
        """Best trade of every platform for a request, ranked best first.

        Failing platforms are logged and skipped; an unknown chain yields [].
        Source debounce delays do not apply to one-shot quotes.
        """
        sources = self.sources_by_chain.get(request.chain_id)
        if not sources:
            logger.warning("unsupported_chain", chain_id=request.chain_id)
            return []

        # One request, no keystroke burst to coalesce
        poller = MultiPlatformPoller(sources, debounce=False)
        try:
            trades = await poller.best_trades(request)
        finally:
            await poller.close()

        logger.info(
            "quote_ranked",
            chain_id=request.chain_id,
            trade_type=request.trade_type.value,
            platforms=len(sources),
            trades=len(trades),
            best=trades[0].platform.name if trades else None,
        )
        return trades

    async def estimate_gas(
        self, trades: Sequence[Trade], options: SwapOptions, sender: str, chain_id: int
    ) -> list[int | None]:
        """Padded gas limits for the swap transaction of each trade."""
        estimator = self.gas_estimators.get(chain_id)
        if estimator is None:
            return [None] * len(trades)
        return await estimate_swap_gas(trades, options, estimator, sender)

    async def close(self) -> None:
        for client in self._clients:
            await client.close()


def create_default_aggregator(config: RouterConfig | None = None) -> Aggregator:
    """Build an aggregator from environment configuration.

    AMM platforms of a chain are enabled when ``ECOROUTER_RPC_URL_<CHAIN_ID>``
    is set; 0x is enabled on the chains it supports regardless.
    """
    config = config or RouterConfig.from_env()
    zerox_client = ZeroXClient(
        ZEROX, api_key=config.zerox_api_key, timeout_seconds=config.request_timeout_seconds
    )
    clients: list[JsonRpcClient | ZeroXClient] = [zerox_client]
    sources_by_chain: dict[int, list[TradeSource]] = {}
    gas_estimators: dict[int, GasEstimator] = {}

    for chain_id, chain in CHAINS.items():
        sources: list[TradeSource] = []
        rpc_url = rpc_url_for_chain(chain_id)
        if rpc_url:
            rpc = JsonRpcClient(rpc_url, timeout_seconds=config.request_timeout_seconds)
            clients.append(rpc)
            reserve_source = JsonRpcReserveSource(rpc)
            gas_estimators[chain_id] = JsonRpcGasEstimator(rpc)
            sources.extend(
                UniswapV2TradeSource(platform, reserve_source, {chain_id: chain}, config)
                for platform in UNISWAP_V2_PLATFORMS
                if platform.supports_chain(chain_id)
            )
        else:
            logger.info("amm_platforms_disabled", chain_id=chain_id, reason="no RPC URL")

        if ZEROX.supports_chain(chain_id):
            sources.append(
                ZeroXTradeSource(
                    zerox_client, config.zerox_debounce_seconds, chains={chain_id: chain}
                )
            )
        if sources:
            sources_by_chain[chain_id] = sources

    return Aggregator(sources_by_chain, gas_estimators, clients)


_default_aggregator: Aggregator | None = None


def get_default_aggregator() -> Aggregator:
    """Process-wide aggregator, created on first use."""
    global _default_aggregator
    if _default_aggregator is None:
        _default_aggregator = create_default_aggregator()
    return _default_aggregator


__all__ = ["Aggregator", "create_default_aggregator", "get_default_aggregator"]
