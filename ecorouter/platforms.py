"""Platform configuration table.

The enumeration order of ``PLATFORMS`` is the tie-break order of the ranking
merger: platforms quoting the same price keep this order.
"""

from ecorouter.chains import ChainId
from ecorouter.models.platform import Platform, UniswapV2Platform, ZeroXPlatform

SWAPR = UniswapV2Platform(
    name="Swapr",
    chain_ids=frozenset({ChainId.MAINNET, ChainId.XDAI, ChainId.ARBITRUM_ONE}),
    factories={
        ChainId.MAINNET: "0xd34971bab6e5e356fd250715f5de0492bb070452",
        ChainId.XDAI: "0x5d48c95adffd4b40c1aaadc4e08fec44e7e3de19",
        ChainId.ARBITRUM_ONE: "0x359f20ad0f42d75a5077e65f30274cabe6f4f01a",
    },
    routers={
        ChainId.MAINNET: "0xb9960d9bca016e9748be75dd52f02188b9d0829f",
        ChainId.XDAI: "0xe43e60736b1cb4a75ad25240e2f9a62bff65c0c0",
        ChainId.ARBITRUM_ONE: "0x530476d5583724a89c8841eb6da76e7af4c0f17e",
    },
    init_code_hash="0xd306a548755b9295ee49cc729e13ca4a45e00199bbd890fa146da43a50571776",
    fee_bps=25,
)

UNISWAP = UniswapV2Platform(
    name="Uniswap",
    chain_ids=frozenset({ChainId.MAINNET}),
    factories={ChainId.MAINNET: "0x5c69bee701ef814a2b6a3edd4b1652cb9cc5aa6f"},
    routers={ChainId.MAINNET: "0x7a250d5630b4cf539739df2c5dacb4c659f2488d"},
    init_code_hash="0x96e8ac4277198ff8b6f785478aa9a39f403cb768dd02cbee326c3e7da348845f",
    fee_bps=30,
)

SUSHISWAP = UniswapV2Platform(
    name="Sushiswap",
    chain_ids=frozenset({ChainId.MAINNET, ChainId.XDAI, ChainId.ARBITRUM_ONE}),
    factories={
        ChainId.MAINNET: "0xc0aee478e3658e2610c5f7a4a2e1777ce9e4f2ac",
        ChainId.XDAI: "0xc35dadb65012ec5796536bd9864ed8773abc74c4",
        ChainId.ARBITRUM_ONE: "0xc35dadb65012ec5796536bd9864ed8773abc74c4",
    },
    routers={
        ChainId.MAINNET: "0xd9e1ce17f2641f24ae83637ab66a2cca9c378b9f",
        ChainId.XDAI: "0x1b02da8cb0d097eb8d57a175b88c7d8b47997506",
        ChainId.ARBITRUM_ONE: "0x1b02da8cb0d097eb8d57a175b88c7d8b47997506",
    },
    init_code_hash="0xe18a34eb0e04b04f7a0ac29a6e80748dca96319b42c520ff0a6163c1f0c2f9b2",
    fee_bps=30,
)

HONEYSWAP = UniswapV2Platform(
    name="Honeyswap",
    chain_ids=frozenset({ChainId.XDAI}),
    factories={ChainId.XDAI: "0xa818b4f111ccac7aa31d0bcc0806d64f2e0737d7"},
    routers={ChainId.XDAI: "0x1c232f01118cb8b424793ae03f870aa7d0ac7f77"},
    init_code_hash="0x3f88503e8580ab941773b59034fb4b2a63e86dbc031b3633a925533ad3ed2b93",
    fee_bps=30,
)

ZEROX = ZeroXPlatform(
    name="0x",
    chain_ids=frozenset({ChainId.MAINNET}),
    api_urls={ChainId.MAINNET: "https://api.0x.org"},
)

# Enumeration order matters (see module docstring); further forks go before 0x
UNISWAP_V2_PLATFORMS: tuple[UniswapV2Platform, ...] = (SWAPR, UNISWAP, SUSHISWAP, HONEYSWAP)
PLATFORMS: tuple[Platform, ...] = (*UNISWAP_V2_PLATFORMS, ZEROX)


def platforms_for_chain(chain_id: int) -> list[Platform]:
    """Platforms enabled on a chain, in enumeration order."""
    return [platform for platform in PLATFORMS if platform.supports_chain(chain_id)]


__all__ = [
    "HONEYSWAP",
    "PLATFORMS",
    "SUSHISWAP",
    "SWAPR",
    "UNISWAP",
    "UNISWAP_V2_PLATFORMS",
    "ZEROX",
    "platforms_for_chain",
]
