"""Pair graph resolution.

Given two currencies and the chain's base tokens, enumerate every pair that
could serve as a hop between them, resolve each candidate against a reserve
source concurrently and keep the pairs that exist.
"""

from __future__ import annotations

import asyncio
from enum import Enum
from itertools import product
from typing import TYPE_CHECKING

import structlog

from ecorouter.amm.uniswap_v2 import Pair
from ecorouter.errors import InvalidPairError, PlatformUnsupportedError
from ecorouter.models.currency import Currency, Token, wrapped_currency

if TYPE_CHECKING:
    from ecorouter.chains import ChainConfig
    from ecorouter.models.platform import UniswapV2Platform
    from ecorouter.pairs.reserves import ReserveSource

logger = structlog.get_logger()


class PairState(str, Enum):
    LOADING = "loading"
    EXISTS = "exists"
    NOT_EXISTS = "not_exists"
    INVALID = "invalid"


def generate_candidate_pairs(
    token_a: Token, token_b: Token, bases: tuple[Token, ...] | list[Token]
) -> list[tuple[Token, Token]]:
    """Enumerate candidate hop pairs between two tokens.

    Order: the direct pair, ``token_a`` with each base, ``token_b`` with each
    base, then every ordered pair of distinct bases. Candidates whose sides
    share an address are dropped.
    """
    candidates: list[tuple[Token, Token]] = [(token_a, token_b)]
    candidates.extend((token_a, base) for base in bases)
    candidates.extend((token_b, base) for base in bases)
    candidates.extend(
        (base, other) for base, other in product(bases, bases) if base.address != other.address
    )
    return [(a, b) for a, b in candidates if a.address != b.address]


async def _resolve_one(
    token_a: Token,
    token_b: Token,
    platform: UniswapV2Platform,
    reserve_source: ReserveSource,
    chain_id: int,
) -> tuple[PairState, Pair | None]:
    if token_a.chain_id != chain_id or token_b.chain_id != chain_id:
        return PairState.INVALID, None
    try:
        pair_address = platform.pair_address(token_a, token_b, chain_id)
    except (PlatformUnsupportedError, ValueError):
        return PairState.INVALID, None

    try:
        reserves = await reserve_source.get_reserves(pair_address, platform)
    except Exception as e:
        logger.warning(
            "reserve_fetch_failed",
            platform=platform.name,
            pair=pair_address,
            error=str(e),
        )
        return PairState.NOT_EXISTS, None

    if reserves is None:
        return PairState.NOT_EXISTS, None

    token0, token1 = (token_a, token_b) if token_a.sorts_before(token_b) else (token_b, token_a)
    try:
        pair = Pair(
            token0=token0,
            token1=token1,
            reserve0=reserves.reserve0,
            reserve1=reserves.reserve1,
            liquidity_token=pair_address,
            fee_bps=platform.fee_bps,
        )
    except InvalidPairError:
        return PairState.INVALID, None
    return PairState.EXISTS, pair


async def resolve_pairs(
    candidates: list[tuple[Token, Token]],
    platform: UniswapV2Platform,
    reserve_source: ReserveSource,
    chain: ChainConfig,
) -> list[tuple[PairState, Pair | None]]:
    """Resolve candidates concurrently, one state per candidate in order.

    Fetch failures degrade to NOT_EXISTS and are not retried.
    """
    if not platform.supports_chain(chain.chain_id):
        return [(PairState.INVALID, None) for _ in candidates]

    return list(
        await asyncio.gather(
            *(
                _resolve_one(token_a, token_b, platform, reserve_source, chain.chain_id)
                for token_a, token_b in candidates
            )
        )
    )


def _unique_pairs(candidates: list[tuple[Token, Token]]) -> list[tuple[Token, Token]]:
    """Drop candidates naming an already listed pair, whatever the token order."""
    seen: set[frozenset[str]] = set()
    unique: list[tuple[Token, Token]] = []
    for token_a, token_b in candidates:
        key = frozenset((token_a.address, token_b.address))
        if key not in seen:
            seen.add(key)
            unique.append((token_a, token_b))
    return unique


async def resolve_common_pairs(
    currency_a: Currency | None,
    currency_b: Currency | None,
    bases: tuple[Token, ...] | list[Token],
    platform: UniswapV2Platform,
    reserve_source: ReserveSource,
    chain: ChainConfig,
) -> list[Pair]:
    """Existing pairs usable to route between two currencies.

    Args:
        currency_a: One side of the swap (native currencies are wrapped)
        currency_b: The other side
        bases: Base tokens tried as intermediate hops
        platform: Platform whose pairs are resolved
        reserve_source: Where reserves are read from
        chain: Chain of the swap

    Returns:
        Pairs deduplicated by liquidity token, first occurrence wins; empty if
        either currency is missing
    """
    if currency_a is None or currency_b is None:
        return []

    try:
        token_a = wrapped_currency(currency_a, chain)
        token_b = wrapped_currency(currency_b, chain)
    except ValueError:
        logger.debug("currency_chain_mismatch", chain_id=chain.chain_id)
        return []

    candidates = _unique_pairs(generate_candidate_pairs(token_a, token_b, bases))
    states = await resolve_pairs(candidates, platform, reserve_source, chain)

    pairs: list[Pair] = []
    seen: set[str] = set()
    for state, pair in states:
        if state != PairState.EXISTS or pair is None:
            continue
        if pair.liquidity_token in seen:
            continue
        seen.add(pair.liquidity_token)
        pairs.append(pair)

    logger.debug(
        "pairs_resolved",
        platform=platform.name,
        candidates=len(candidates),
        existing=len(pairs),
    )
    return pairs


__all__ = [
    "PairState",
    "generate_candidate_pairs",
    "resolve_common_pairs",
    "resolve_pairs",
]
