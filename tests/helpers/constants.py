"""Shared token and platform constants for tests.

Usage:
    from tests.helpers import WETH, USDC, TOKEN_A
    # or
    from tests.helpers.constants import TEST_PLATFORM
"""

from ecorouter.chains import CHAINS, DAI, USDC, USDT, WBTC, WETH, WXDAI, ChainId
from ecorouter.models.currency import Token
from ecorouter.models.platform import UniswapV2Platform, ZeroXPlatform

# =============================================================================
# Chains
# =============================================================================

MAINNET = CHAINS[ChainId.MAINNET]
XDAI = CHAINS[ChainId.XDAI]
ETH = MAINNET.native

# =============================================================================
# Synthetic mainnet tokens (addresses sort in declaration order)
# =============================================================================

TOKEN_A = Token(1, "0x" + "aa" * 20, 18, "AAA")
TOKEN_B = Token(1, "0x" + "bb" * 20, 18, "BBB")
TOKEN_C = Token(1, "0x" + "cc" * 20, 18, "CCC")
TOKEN_D = Token(1, "0x" + "dd" * 20, 18, "DDD")
TOKEN_E = Token(1, "0x" + "ee" * 20, 18, "EEE")

# Tokens with no direct pair between them, routed through bases
TOKEN_X = Token(1, "0x" + "11" * 20, 18, "XXX")
TOKEN_Y = Token(1, "0x" + "22" * 20, 18, "YYY")

RECIPIENT = "0x" + "99" * 20
SENDER = "0x" + "98" * 20

# =============================================================================
# Platforms
# =============================================================================

TEST_PLATFORM = UniswapV2Platform(
    name="TestSwap",
    chain_ids=frozenset({ChainId.MAINNET}),
    factories={ChainId.MAINNET: "0x" + "f1" * 20},
    routers={ChainId.MAINNET: "0x" + "e1" * 20},
    init_code_hash="0x" + "ab" * 32,
    fee_bps=30,
)

OTHER_PLATFORM = UniswapV2Platform(
    name="OtherSwap",
    chain_ids=frozenset({ChainId.MAINNET}),
    factories={ChainId.MAINNET: "0x" + "f2" * 20},
    routers={ChainId.MAINNET: "0x" + "e2" * 20},
    init_code_hash="0x" + "cd" * 32,
    fee_bps=25,
)

TEST_ZEROX = ZeroXPlatform(
    name="0x",
    chain_ids=frozenset({ChainId.MAINNET}),
    api_urls={ChainId.MAINNET: "https://zerox.test"},
)

__all__ = [
    "DAI",
    "ETH",
    "MAINNET",
    "OTHER_PLATFORM",
    "RECIPIENT",
    "SENDER",
    "TEST_PLATFORM",
    "TEST_ZEROX",
    "TOKEN_A",
    "TOKEN_B",
    "TOKEN_C",
    "TOKEN_D",
    "TOKEN_E",
    "TOKEN_X",
    "TOKEN_Y",
    "USDC",
    "USDT",
    "WBTC",
    "WETH",
    "WXDAI",
    "XDAI",
]
