"""Best-trade path search over the pairs of one platform.

Depth-bounded exhaustive search: from the input token (or backwards from the
output token for exact-output trades) every pair touching the frontier token
is simulated and the search recurses into the token on the other side, up to
``max_hops`` pairs. A pair is never used twice in the same route.

Completed trades go through ``sorted_insert`` into a result list bounded at
``max_num_results``; once it is full, a trade ranking below the worst kept
one is dropped immediately.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, TypeVar

import structlog

from ecorouter.amm.uniswap_v2 import UniswapV2Trade
from ecorouter.errors import InsufficientInputAmountError, InsufficientReservesError
from ecorouter.models.currency import Currency, CurrencyAmount, Token
from ecorouter.models.trade import Route, Trade, TradeType
from ecorouter.routing.pathfinding import TokenGraph

if TYPE_CHECKING:
    from ecorouter.amm.uniswap_v2 import Pair
    from ecorouter.models.platform import UniswapV2Platform

logger = structlog.get_logger()

T = TypeVar("T")


def input_output_comparator(a: Trade, b: Trade) -> int:
    """Order trades by output (larger first), then by input (smaller first).

    Trades of the same search share either their input (exact-in) or their
    output (exact-out), so this covers both directions.
    """
    if a.output_amount.raw == b.output_amount.raw:
        if a.input_amount.raw == b.input_amount.raw:
            return 0
        return -1 if a.input_amount.raw < b.input_amount.raw else 1
    return 1 if a.output_amount.raw < b.output_amount.raw else -1


def trade_comparator(a: UniswapV2Trade, b: UniswapV2Trade) -> int:
    """Rank trades: best amounts, then lower price impact, then fewer hops."""
    io = input_output_comparator(a, b)
    if io != 0:
        return io

    if a.price_impact < b.price_impact:
        return -1
    if a.price_impact > b.price_impact:
        return 1

    return a.route.hops - b.route.hops


def sorted_insert(
    items: list[T], add: T, max_size: int, comparator: Callable[[T, T], int]
) -> T | None:
    """Insert into a sorted list bounded at ``max_size``.

    Equal items are inserted after existing ones, so earlier discoveries win
    ties.

    Returns:
        The item evicted from (or rejected by) a full list, else None
    """
    if max_size <= 0:
        raise ValueError("max_size must be positive")
    if len(items) > max_size:
        raise ValueError("list is larger than max_size")

    is_full = len(items) == max_size
    if is_full and comparator(items[-1], add) <= 0:
        return add

    lo, hi = 0, len(items)
    while lo < hi:
        mid = (lo + hi) // 2
        if comparator(items[mid], add) <= 0:
            lo = mid + 1
        else:
            hi = mid
    items.insert(lo, add)
    return items.pop() if is_full else None


def _wrap(currency: Currency, wrapped_native: Token | None) -> Token:
    if isinstance(currency, Token):
        return currency
    if wrapped_native is None or wrapped_native.chain_id != currency.chain_id:
        raise ValueError(f"Native {currency.symbol} requires the chain's wrapped token")
    return wrapped_native


def _check_limits(max_hops: int, max_num_results: int, amount: CurrencyAmount) -> None:
    if max_hops < 1:
        raise ValueError("max_hops must be at least 1")
    if max_num_results < 1:
        raise ValueError("max_num_results must be at least 1")
    if amount.raw <= 0:
        raise ValueError("amount must be positive")


def best_trade_exact_in(
    pairs: list[Pair],
    amount_in: CurrencyAmount,
    currency_out: Currency,
    platform: UniswapV2Platform,
    *,
    max_hops: int = 3,
    max_num_results: int = 3,
    wrapped_native: Token | None = None,
) -> list[UniswapV2Trade]:
    """Find the best trades for an exact input amount.

    Args:
        pairs: Resolved pairs of ``platform``
        amount_in: Exact amount to sell (native or token)
        currency_out: Currency to buy (native or token)
        platform: Platform the pairs belong to
        max_hops: Maximum number of pairs in a route
        max_num_results: Maximum number of trades returned
        wrapped_native: Wrapped native token, required when a side is native

    Returns:
        Trades sorted best first (most output); empty if no route exists

    Raises:
        ValueError: On invalid limits, a zero amount or identical currencies
    """
    _check_limits(max_hops, max_num_results, amount_in)
    token_in = _wrap(amount_in.currency, wrapped_native)
    token_out = _wrap(currency_out, wrapped_native)
    if token_in == token_out:
        raise ValueError("Input and output currencies must differ")

    graph = TokenGraph.from_pairs(pairs)
    best: list[UniswapV2Trade] = []

    def visit(
        current: CurrencyAmount, route_pairs: tuple[Pair, ...], used: frozenset[int], hops: int
    ) -> None:
        for index in graph.edges(current.currency):  # type: ignore[arg-type]
            if index in used:
                continue
            pair = graph.pair_at(index)
            try:
                amount_out, _ = pair.get_output_amount(current)
            except (InsufficientInputAmountError, InsufficientReservesError):
                continue

            next_pairs = (*route_pairs, pair)
            if amount_out.currency == token_out:
                route = Route(next_pairs, amount_in.currency, currency_out, wrapped_native)
                trade = UniswapV2Trade.from_route(
                    route, amount_in, TradeType.EXACT_INPUT, platform
                )
                sorted_insert(best, trade, max_num_results, trade_comparator)
            elif hops > 1:
                visit(amount_out, next_pairs, used | {index}, hops - 1)

    visit(CurrencyAmount(token_in, amount_in.raw), (), frozenset(), max_hops)
    logger.debug(
        "best_trade_exact_in",
        platform=platform.name,
        pairs=graph.pair_count,
        max_hops=max_hops,
        found=len(best),
    )
    return best


def best_trade_exact_out(
    pairs: list[Pair],
    currency_in: Currency,
    amount_out: CurrencyAmount,
    platform: UniswapV2Platform,
    *,
    max_hops: int = 3,
    max_num_results: int = 3,
    wrapped_native: Token | None = None,
) -> list[UniswapV2Trade]:
    """Find the best trades for an exact output amount.

    The search runs backwards from the output token.

    Returns:
        Trades sorted best first (least input); empty if no route exists

    Raises:
        ValueError: On invalid limits, a zero amount or identical currencies
    """
    _check_limits(max_hops, max_num_results, amount_out)
    token_in = _wrap(currency_in, wrapped_native)
    token_out = _wrap(amount_out.currency, wrapped_native)
    if token_in == token_out:
        raise ValueError("Input and output currencies must differ")

    graph = TokenGraph.from_pairs(pairs)
    best: list[UniswapV2Trade] = []

    def visit(
        current: CurrencyAmount, route_pairs: tuple[Pair, ...], used: frozenset[int], hops: int
    ) -> None:
        for index in graph.edges(current.currency):  # type: ignore[arg-type]
            if index in used:
                continue
            pair = graph.pair_at(index)
            try:
                amount_in, _ = pair.get_input_amount(current)
            except (InsufficientInputAmountError, InsufficientReservesError):
                continue

            next_pairs = (pair, *route_pairs)
            if amount_in.currency == token_in:
                route = Route(next_pairs, currency_in, amount_out.currency, wrapped_native)
                trade = UniswapV2Trade.from_route(
                    route, amount_out, TradeType.EXACT_OUTPUT, platform
                )
                sorted_insert(best, trade, max_num_results, trade_comparator)
            elif hops > 1:
                visit(amount_in, next_pairs, used | {index}, hops - 1)

    visit(CurrencyAmount(token_out, amount_out.raw), (), frozenset(), max_hops)
    logger.debug(
        "best_trade_exact_out",
        platform=platform.name,
        pairs=graph.pair_count,
        max_hops=max_hops,
        found=len(best),
    )
    return best


__all__ = [
    "best_trade_exact_in",
    "best_trade_exact_out",
    "input_output_comparator",
    "sorted_insert",
    "trade_comparator",
]
