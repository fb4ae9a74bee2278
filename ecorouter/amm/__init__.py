"""AMM (Automated Market Maker) implementations."""

from ecorouter.amm.base import AMM, SwapResult
from ecorouter.amm.uniswap_v2 import Pair, UniswapV2, UniswapV2Trade, uniswap_v2

__all__ = [
    # Base classes
    "AMM",
    "SwapResult",
    # UniswapV2
    "Pair",
    "UniswapV2",
    "UniswapV2Trade",
    "uniswap_v2",
]
