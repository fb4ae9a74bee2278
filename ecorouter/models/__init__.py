"""Domain models: currencies, platforms and trades."""

from ecorouter.models.currency import (
    Currency,
    CurrencyAmount,
    NativeCurrency,
    Token,
    currency_equals,
    wrapped_currency,
)
from ecorouter.models.platform import Platform, UniswapV2Platform, ZeroXPlatform
from ecorouter.models.trade import (
    Breakdown,
    BreakdownFill,
    Route,
    SwapOptions,
    Trade,
    TradeDetails,
    TradeType,
    UnsignedTransaction,
)
from ecorouter.models.types import Address, Bytes, Uint256, normalize_address

__all__ = [
    # Types
    "Address",
    "Bytes",
    "Uint256",
    "normalize_address",
    # Currencies
    "Currency",
    "CurrencyAmount",
    "NativeCurrency",
    "Token",
    "currency_equals",
    "wrapped_currency",
    # Platforms
    "Platform",
    "UniswapV2Platform",
    "ZeroXPlatform",
    # Trades
    "Breakdown",
    "BreakdownFill",
    "Route",
    "SwapOptions",
    "Trade",
    "TradeDetails",
    "TradeType",
    "UnsignedTransaction",
]
