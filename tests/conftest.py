"""Pytest configuration and fixtures."""

import pytest

from ecorouter.amm.uniswap_v2 import Pair
from tests.helpers import (
    TEST_PLATFORM,
    TOKEN_X,
    TOKEN_Y,
    USDC,
    WETH,
    FakeReserveSource,
    make_pair,
)


@pytest.fixture
def reserve_source() -> FakeReserveSource:
    """An empty in-memory reserve source."""
    return FakeReserveSource()


@pytest.fixture
def bridged_reserve_source() -> FakeReserveSource:
    """X and Y are only connected through WETH on the test platform.

    USDC/WETH also exists so that multihop searches have more than one branch.
    """
    source = FakeReserveSource()
    source.add_pair(TEST_PLATFORM, TOKEN_X, WETH, 1000 * 10**18, 1000 * 10**18)
    source.add_pair(TEST_PLATFORM, WETH, TOKEN_Y, 1000 * 10**18, 1000 * 10**18)
    source.add_pair(TEST_PLATFORM, WETH, USDC, 1000 * 10**18, 2_000_000 * 10**6)
    return source


@pytest.fixture
def weth_usdc_pair() -> Pair:
    """A WETH/USDC pair with 1,000 WETH and 2M USDC."""
    return make_pair(WETH, USDC, 1000 * 10**18, 2_000_000 * 10**6)
