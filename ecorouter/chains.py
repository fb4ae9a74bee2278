"""Per-chain configuration table.

Centralizes the wrapped native token and the base (bridge) currencies that
are tried as intermediate hops on every chain.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum

from ecorouter.models.currency import NativeCurrency, Token


class ChainId(IntEnum):
    MAINNET = 1
    XDAI = 100
    ARBITRUM_ONE = 42161


@dataclass(frozen=True)
class ChainConfig:
    """Static configuration for one chain.

    Attributes:
        chain_id: EIP-155 chain id
        name: Network name used by the API (e.g. "mainnet")
        native: The chain's native currency
        wrapped_native: Canonical wrapped token of the native currency
        bases: Bridge currencies checked as intermediate hops, in priority order
    """

    chain_id: int
    name: str
    native: NativeCurrency
    wrapped_native: Token
    bases: tuple[Token, ...] = field(default=())


# Mainnet tokens
WETH = Token(1, "0xc02aaa39b223fe8d0a0e5c4f27ead9083c756cc2", 18, "WETH", "Wrapped Ether")
DAI = Token(1, "0x6b175474e89094c44da98b954eedeac495271d0f", 18, "DAI", "Dai Stablecoin")
USDC = Token(1, "0xa0b86991c6218b36c1d19d4a2e9eb0ce3606eb48", 6, "USDC", "USD Coin")
USDT = Token(1, "0xdac17f958d2ee523a2206206994597c13d831ec7", 6, "USDT", "Tether USD")
WBTC = Token(1, "0x2260fac5e5542a773aa44fbcfedf7c193bc2c599", 8, "WBTC", "Wrapped BTC")

# Gnosis chain (xDai) tokens
WXDAI = Token(100, "0xe91d153e0b41518a2ce8dd3d7944fa863463a97d", 18, "WXDAI", "Wrapped XDAI")
WETH_XDAI = Token(100, "0x6a023ccd1ff6f2045c3309768ead9e68f978f6e1", 18, "WETH", "Wrapped Ether")
USDC_XDAI = Token(100, "0xddafbb505ad214d7b80b1f830fccc89b60fb7a83", 6, "USDC", "USD Coin")

# Arbitrum One tokens
WETH_ARBITRUM = Token(
    42161, "0x82af49447d8a07e3bd95bd0d56f35241523fbab1", 18, "WETH", "Wrapped Ether"
)
USDC_ARBITRUM = Token(42161, "0xff970a61a04b1ca14834a43f5de4533ebddb5cc8", 6, "USDC", "USD Coin")
WBTC_ARBITRUM = Token(42161, "0x2f2a2543b76a4166549f7aab2e75bef0aefc5b0f", 8, "WBTC", "Wrapped BTC")


CHAINS: dict[int, ChainConfig] = {
    ChainId.MAINNET: ChainConfig(
        chain_id=ChainId.MAINNET,
        name="mainnet",
        native=NativeCurrency(ChainId.MAINNET, "ETH", 18, "Ether"),
        wrapped_native=WETH,
        bases=(WETH, DAI, USDC, USDT, WBTC),
    ),
    ChainId.XDAI: ChainConfig(
        chain_id=ChainId.XDAI,
        name="xdai",
        native=NativeCurrency(ChainId.XDAI, "XDAI", 18, "xDai"),
        wrapped_native=WXDAI,
        bases=(WXDAI, WETH_XDAI, USDC_XDAI),
    ),
    ChainId.ARBITRUM_ONE: ChainConfig(
        chain_id=ChainId.ARBITRUM_ONE,
        name="arbitrum-one",
        native=NativeCurrency(ChainId.ARBITRUM_ONE, "ETH", 18, "Ether"),
        wrapped_native=WETH_ARBITRUM,
        bases=(WETH_ARBITRUM, USDC_ARBITRUM, WBTC_ARBITRUM),
    ),
}


__all__ = ["CHAINS", "ChainConfig", "ChainId"]
