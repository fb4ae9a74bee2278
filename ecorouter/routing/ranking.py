"""Merging and ranking of trades from different platforms.

Each platform contributes at most one trade; the merger orders them by
execution price so the first entry is the one to execute.
"""

from __future__ import annotations

from collections.abc import Iterable
from fractions import Fraction

from ecorouter.models.trade import Trade, TradeType

# Breakdown fills shown to the user
MAX_DISPLAYED_FILLS = 3


def _price_key(trade: Trade) -> tuple[bool, Fraction]:
    # Input paid per unit of output; trades with no output go last
    output = trade.output_amount.raw
    if output == 0:
        return (True, Fraction(0))
    return (False, Fraction(trade.input_amount.raw, output))


def merge_and_rank(trades: Iterable[Trade | None], trade_type: TradeType) -> list[Trade]:
    """Merge per-platform trades into one list, best first.

    Missing trades (None) and trades of another type are dropped. The sort is
    stable: trades with the same price keep the order they were given in, so
    callers pass trades in platform enumeration order.

    Args:
        trades: One entry per platform, possibly None
        trade_type: Type of the request the trades answer

    Returns:
        Trades sorted by ascending input per unit of output
    """
    present = [
        trade for trade in trades if trade is not None and trade.trade_type == trade_type
    ]
    return sorted(present, key=_price_key)


def describe_details(trade: Trade) -> tuple[str, list[str]] | None:
    """Summarize a trade's details for display.

    Returns:
        ``("Route", symbols)`` or ``("Breakdown", ["name pct%", ...])`` with at
        most three fills; None when there is nothing to show

    Raises:
        TypeError: If the details are of an unknown kind
    """
    details = trade.details
    kind = getattr(details, "kind", None)
    if kind == "route":
        if not details.path:
            return None
        return "Route", [token.symbol or token.address for token in details.path]
    if kind == "breakdown":
        if not details.fills:
            return None
        return "Breakdown", [
            f"{fill.name} {fill.percentage:.2f}%" for fill in details.fills[:MAX_DISPLAYED_FILLS]
        ]
    raise TypeError(f"Unknown trade details kind: {kind!r}")


__all__ = ["MAX_DISPLAYED_FILLS", "describe_details", "merge_and_rank"]
