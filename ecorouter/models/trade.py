"""Trade value objects.

A Trade binds a platform, a trade type and its details together at
construction time and never changes afterwards. ``details`` is a tagged
union discriminated by ``kind``:

- ``Route``: ordered pairs of an on-chain multihop AMM trade
- ``Breakdown``: how an off-chain aggregator split a single fill
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from fractions import Fraction
from typing import TYPE_CHECKING, Literal, Union

from ecorouter.constants import BIPS_BASE, BREAKDOWN_PERCENTAGE_TOLERANCE
from ecorouter.models.currency import Currency, CurrencyAmount, Token
from ecorouter.models.types import is_valid_address, normalize_address

if TYPE_CHECKING:
    from ecorouter.amm.uniswap_v2 import Pair
    from ecorouter.models.platform import Platform


class TradeType(str, Enum):
    """Which side of the trade is fixed."""

    EXACT_INPUT = "exactInput"
    EXACT_OUTPUT = "exactOutput"


@dataclass(frozen=True)
class Route:
    """A path through one or more pairs of a single platform.

    ``path`` is derived from the pairs starting at the (wrapped) input
    currency, so ``len(path) == len(pairs) + 1``. Routes starting or ending
    at the native currency need ``wrapped_native`` to locate it in the pairs.
    """

    pairs: tuple[Pair, ...]
    input: Currency
    output: Currency
    wrapped_native: Token | None = field(default=None, compare=False, repr=False)
    path: tuple[Token, ...] = field(init=False)
    kind: Literal["route"] = field(default="route", init=False)

    def __post_init__(self) -> None:
        if not self.pairs:
            raise ValueError("Route requires at least one pair")
        chain_id = self.pairs[0].chain_id
        if any(pair.chain_id != chain_id for pair in self.pairs):
            raise ValueError("All pairs of a route must be on the same chain")

        start = self._wrapped(self.input)
        if not self.pairs[0].involves_token(start):
            raise ValueError("Route input is not in the first pair")

        path = [start]
        for pair in self.pairs:
            current = path[-1]
            if not pair.involves_token(current):
                raise ValueError(
                    f"Pair {pair.liquidity_token} does not connect to {current.address}"
                )
            path.append(pair.other_token(current))

        if path[-1] != self._wrapped(self.output):
            raise ValueError("Route output is not in the last pair")
        object.__setattr__(self, "path", tuple(path))

    def _wrapped(self, currency: Currency) -> Token:
        if isinstance(currency, Token):
            return currency
        if self.wrapped_native is None or self.wrapped_native.chain_id != currency.chain_id:
            raise ValueError(f"Native {currency.symbol} route needs the wrapped native token")
        return self.wrapped_native

    @property
    def hops(self) -> int:
        return len(self.pairs)

    @property
    def chain_id(self) -> int:
        return self.pairs[0].chain_id

    @property
    def mid_price(self) -> Fraction:
        """Marginal price of output per input (no trade size), exact."""
        price = Fraction(1)
        for token, pair in zip(self.path, self.pairs):
            price *= pair.price_of(token)
        return price


@dataclass(frozen=True)
class BreakdownFill:
    """One platform's share of an off-chain fill."""

    name: str
    percentage: Decimal


@dataclass(frozen=True)
class Breakdown:
    """Decomposition of an off-chain fill; opaque to the hop search."""

    fills: tuple[BreakdownFill, ...]
    kind: Literal["breakdown"] = field(default="breakdown", init=False)

    def __post_init__(self) -> None:
        if not self.fills:
            return
        total = sum((fill.percentage for fill in self.fills), Decimal(0))
        if abs(total - 100) > Decimal(BREAKDOWN_PERCENTAGE_TOLERANCE):
            raise ValueError(f"Breakdown percentages sum to {total}, expected 100")


TradeDetails = Union[Route, Breakdown]


@dataclass(frozen=True)
class SwapOptions:
    """Caller-supplied parameters to build a swap transaction.

    Attributes:
        allowed_slippage_bps: Slippage tolerance in basis points
        recipient: Address receiving the output
        deadline: Unix timestamp after which the swap reverts
    """

    allowed_slippage_bps: int
    recipient: str
    deadline: int

    def __post_init__(self) -> None:
        if not 0 <= self.allowed_slippage_bps < BIPS_BASE:
            raise ValueError("allowed_slippage_bps must be in [0, 10000)")
        if not is_valid_address(self.recipient):
            raise ValueError(f"Invalid recipient address: {self.recipient}")
        if self.deadline <= 0:
            raise ValueError("deadline must be positive")
        object.__setattr__(self, "recipient", normalize_address(self.recipient))


@dataclass(frozen=True)
class UnsignedTransaction:
    """Transaction ready to be estimated, signed and submitted by a wallet."""

    chain_id: int
    to: str
    data: str
    value: int = 0

    def to_rpc(self, sender: str | None = None) -> dict[str, str]:
        """Call object accepted by ``eth_call`` / ``eth_estimateGas``."""
        call = {"to": self.to, "data": self.data, "value": hex(self.value)}
        if sender is not None:
            call["from"] = normalize_address(sender)
        return call


@dataclass(frozen=True)
class Trade(ABC):
    """Best-price result of one platform for a swap."""

    platform: Platform
    trade_type: TradeType
    input_amount: CurrencyAmount
    output_amount: CurrencyAmount
    details: TradeDetails

    @property
    def execution_price(self) -> Fraction:
        """Output per unit input in base units."""
        if self.input_amount.raw == 0:
            return Fraction(0)
        return Fraction(self.output_amount.raw, self.input_amount.raw)

    def minimum_amount_out(self, slippage_bps: int) -> CurrencyAmount:
        """Worst acceptable output under the slippage tolerance."""
        if self.trade_type == TradeType.EXACT_OUTPUT:
            return self.output_amount
        raw = self.output_amount.raw * BIPS_BASE // (BIPS_BASE + slippage_bps)
        return self.output_amount.with_raw(raw)

    def maximum_amount_in(self, slippage_bps: int) -> CurrencyAmount:
        """Worst acceptable input under the slippage tolerance."""
        if self.trade_type == TradeType.EXACT_INPUT:
            return self.input_amount
        raw = self.input_amount.raw * (BIPS_BASE + slippage_bps) // BIPS_BASE
        return self.input_amount.with_raw(raw)

    @abstractmethod
    def swap_transaction(self, options: SwapOptions) -> UnsignedTransaction:
        """Build the unsigned on-chain call executing this trade."""
        ...


__all__ = [
    "Breakdown",
    "BreakdownFill",
    "Route",
    "SwapOptions",
    "Trade",
    "TradeDetails",
    "TradeType",
    "UnsignedTransaction",
]
