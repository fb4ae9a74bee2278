"""Test helpers module for shared test utilities.

This module consolidates common test utilities to reduce duplication:
- constants: Tokens, chains and test platforms
- factories: Pair, request and trade factories plus fake collaborators
"""

from tests.helpers.constants import (
    DAI,
    ETH,
    MAINNET,
    OTHER_PLATFORM,
    RECIPIENT,
    SENDER,
    TEST_PLATFORM,
    TEST_ZEROX,
    TOKEN_A,
    TOKEN_B,
    TOKEN_C,
    TOKEN_D,
    TOKEN_E,
    TOKEN_X,
    TOKEN_Y,
    USDC,
    USDT,
    WBTC,
    WETH,
)
from tests.helpers.factories import (
    FakeReserveSource,
    FakeTradeSource,
    StubTrade,
    make_pair,
    make_platform,
    make_request,
    make_trade,
)

__all__ = [
    # Constants
    "WETH",
    "USDC",
    "DAI",
    "USDT",
    "WBTC",
    "ETH",
    "MAINNET",
    "TOKEN_A",
    "TOKEN_B",
    "TOKEN_C",
    "TOKEN_D",
    "TOKEN_E",
    "TOKEN_X",
    "TOKEN_Y",
    "RECIPIENT",
    "SENDER",
    "TEST_PLATFORM",
    "OTHER_PLATFORM",
    "TEST_ZEROX",
    # Factories
    "make_pair",
    "make_platform",
    "make_request",
    "make_trade",
    "StubTrade",
    "FakeReserveSource",
    "FakeTradeSource",
]
