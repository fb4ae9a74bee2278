"""Currencies and currency amounts.

A currency is either the chain-native asset or an ERC20 token. Pair lookups
always happen on tokens, so native currencies are wrapped with
``wrapped_currency`` before touching the pair graph.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import TYPE_CHECKING, Union

from ecorouter.models.types import address_bytes, normalize_address

if TYPE_CHECKING:
    from ecorouter.chains import ChainConfig


@dataclass(frozen=True)
class NativeCurrency:
    """The native asset of a chain (ETH, xDAI, ...)."""

    chain_id: int
    symbol: str = "ETH"
    decimals: int = 18
    name: str | None = field(default=None, compare=False)


@dataclass(frozen=True)
class Token:
    """An ERC20 token.

    Equality and hashing only consider ``(chain_id, address)`` so the same
    token loaded from different token lists compares equal.
    """

    chain_id: int
    address: str
    decimals: int = field(default=18, compare=False)
    symbol: str | None = field(default=None, compare=False)
    name: str | None = field(default=None, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "address", normalize_address(self.address, validate=True))
        if not 0 <= self.decimals <= 77:
            raise ValueError(f"Invalid decimals for {self.address}: {self.decimals}")

    def sorts_before(self, other: Token) -> bool:
        """Check if this token is token0 of a pair with ``other``.

        Raises:
            ValueError: If the tokens are on different chains or identical
        """
        if self.chain_id != other.chain_id:
            raise ValueError("Tokens are on different chains")
        if self.address == other.address:
            raise ValueError("Tokens have the same address")
        return address_bytes(self.address) < address_bytes(other.address)


Currency = Union[NativeCurrency, Token]


def wrapped_currency(currency: Currency, chain: ChainConfig) -> Token:
    """Return the token used for pair lookups.

    Tokens are returned as-is; the native currency maps to the chain's
    canonical wrapped token.

    Raises:
        ValueError: If the currency belongs to a different chain
    """
    if currency.chain_id != chain.chain_id:
        raise ValueError(f"Currency on chain {currency.chain_id}, expected {chain.chain_id}")
    if isinstance(currency, Token):
        return currency
    return chain.wrapped_native


def currency_equals(a: Currency | None, b: Currency | None) -> bool:
    """Compare currencies, treating native and tokens as distinct."""
    if a is None or b is None:
        return False
    if isinstance(a, NativeCurrency) and isinstance(b, NativeCurrency):
        return a.chain_id == b.chain_id
    return a == b


@dataclass(frozen=True)
class CurrencyAmount:
    """An amount of a currency in base units."""

    currency: Currency
    raw: int

    def __post_init__(self) -> None:
        if not isinstance(self.raw, int) or isinstance(self.raw, bool):
            raise TypeError("raw amount must be int")
        if self.raw < 0:
            raise ValueError("raw amount must be non-negative")

    def to_decimal(self) -> Decimal:
        """Human-readable amount (display only)."""
        return Decimal(self.raw) / (Decimal(10) ** self.currency.decimals)

    def with_raw(self, raw: int) -> CurrencyAmount:
        return CurrencyAmount(self.currency, raw)

    def __str__(self) -> str:
        return f"{self.to_decimal()} {self.currency.symbol or '?'}"


__all__ = [
    "Currency",
    "CurrencyAmount",
    "NativeCurrency",
    "Token",
    "currency_equals",
    "wrapped_currency",
]
