"""Token graph over a set of resolved pairs.

The search engine walks this graph: tokens are nodes, pairs are edges.
Edges keep the order of the pair list they were built from so that the
search explores candidates deterministically.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ecorouter.amm.uniswap_v2 import Pair
    from ecorouter.models.currency import Token


class TokenGraph:
    """Adjacency index from token address to the pairs touching it.

    This is a pure data structure with no caching; one graph is built per
    search since pair snapshots are recomputed on every input change.
    """

    def __init__(self) -> None:
        """Initialize an empty token graph."""
        self._pairs: list[Pair] = []
        self._adjacency: dict[str, list[int]] = {}

    @classmethod
    def from_pairs(cls, pairs: list[Pair]) -> TokenGraph:
        """Build a TokenGraph from a list of pairs.

        Args:
            pairs: Pairs of a single platform, in resolution order

        Returns:
            TokenGraph with one edge per pair
        """
        graph = cls()
        for pair in pairs:
            graph._add_edge(pair)
        return graph

    def _add_edge(self, pair: Pair) -> None:
        """Add a bidirectional edge for a pair."""
        index = len(self._pairs)
        self._pairs.append(pair)
        self._adjacency.setdefault(pair.token0.address, []).append(index)
        self._adjacency.setdefault(pair.token1.address, []).append(index)

    def pair_at(self, index: int) -> Pair:
        return self._pairs[index]

    def edges(self, token: Token) -> list[int]:
        """Indices of the pairs touching ``token``, in insertion order."""
        return self._adjacency.get(token.address, [])

    @property
    def pair_count(self) -> int:
        return len(self._pairs)


__all__ = ["TokenGraph"]
