"""Pair discovery: candidate enumeration and reserve resolution."""

from ecorouter.pairs.reserves import JsonRpcReserveSource, Reserves, ReserveSource
from ecorouter.pairs.resolver import (
    PairState,
    generate_candidate_pairs,
    resolve_common_pairs,
    resolve_pairs,
)

__all__ = [
    "JsonRpcReserveSource",
    "PairState",
    "ReserveSource",
    "Reserves",
    "generate_candidate_pairs",
    "resolve_common_pairs",
    "resolve_pairs",
]
