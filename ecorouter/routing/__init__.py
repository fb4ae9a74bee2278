"""Trade routing: path search, per-platform sources, polling and ranking."""

from ecorouter.routing.pathfinding import TokenGraph
from ecorouter.routing.poller import (
    MultiPlatformPoller,
    PlatformState,
    PlatformStatus,
    TradeRequest,
)
from ecorouter.routing.ranking import describe_details, merge_and_rank
from ecorouter.routing.search import (
    best_trade_exact_in,
    best_trade_exact_out,
    sorted_insert,
    trade_comparator,
)
from ecorouter.routing.sources import TradeSource, UniswapV2TradeSource, ZeroXTradeSource

__all__ = [
    "MultiPlatformPoller",
    "PlatformState",
    "PlatformStatus",
    "TokenGraph",
    "TradeRequest",
    "TradeSource",
    "UniswapV2TradeSource",
    "ZeroXTradeSource",
    "best_trade_exact_in",
    "best_trade_exact_out",
    "describe_details",
    "merge_and_rank",
    "sorted_insert",
    "trade_comparator",
]
