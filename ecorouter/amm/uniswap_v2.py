"""UniswapV2 AMM implementation.

UniswapV2 and its forks use the constant product formula: x * y = k
with a fee taken on input amounts (0.3% for Uniswap, fork-specific otherwise).

This module holds the pair snapshot, the integer swap math, router calldata
encoding, and the ``UniswapV2Trade`` produced by the path search.
"""

from __future__ import annotations

from dataclasses import dataclass
from fractions import Fraction
from typing import TYPE_CHECKING, ClassVar

import structlog
from eth_abi import encode  # type: ignore[attr-defined]

from ecorouter.amm.base import AMM, SwapResult
from ecorouter.constants import BIPS_BASE
from ecorouter.errors import (
    InsufficientInputAmountError,
    InsufficientReservesError,
    InvalidPairError,
)
from ecorouter.models.currency import CurrencyAmount, NativeCurrency, Token
from ecorouter.models.trade import (
    Route,
    SwapOptions,
    Trade,
    TradeType,
    UnsignedTransaction,
)
from ecorouter.models.types import address_bytes, is_valid_address, normalize_address

if TYPE_CHECKING:
    from ecorouter.models.platform import UniswapV2Platform

logger = structlog.get_logger()


class UniswapV2(AMM):
    """UniswapV2 AMM math and router encoding.

    Formula: amount_out = (amount_in * fee * reserve_out) / (reserve_in * 10000 + amount_in * fee)

    ``fee`` is the fee multiplier (10000 - fee_bps), 9970 for a 0.3% fee.
    """

    # Router02 methods: name -> (selector, argument types)
    ROUTER_METHODS: ClassVar[dict[str, tuple[str, list[str]]]] = {
        "swapExactTokensForTokens": (
            "0x38ed1739",
            ["uint256", "uint256", "address[]", "address", "uint256"],
        ),
        "swapTokensForExactTokens": (
            "0x8803dbee",
            ["uint256", "uint256", "address[]", "address", "uint256"],
        ),
        "swapExactETHForTokens": ("0x7ff36ab5", ["uint256", "address[]", "address", "uint256"]),
        "swapTokensForExactETH": (
            "0x4a25d94a",
            ["uint256", "uint256", "address[]", "address", "uint256"],
        ),
        "swapExactTokensForETH": (
            "0x18cbafe5",
            ["uint256", "uint256", "address[]", "address", "uint256"],
        ),
        "swapETHForExactTokens": ("0xfb3bdb41", ["uint256", "address[]", "address", "uint256"]),
    }

    def get_amount_out(
        self,
        amount_in: int,
        reserve_in: int,
        reserve_out: int,
        fee_multiplier: int = 9970,
    ) -> int:
        """Calculate output amount using constant product formula.

        Formula: amount_out = (in * fee * res_out) / (res_in * 10000 + in * fee)

        Args:
            amount_in: Input token amount
            reserve_in: Reserve of input token in pool
            reserve_out: Reserve of output token in pool
            fee_multiplier: Fee multiplier (default 9970 for 0.3% fee, 9975 for 0.25%)

        Returns:
            Output token amount, 0 for degenerate inputs
        """
        if amount_in <= 0:
            return 0
        if reserve_in <= 0 or reserve_out <= 0:
            return 0

        amount_in_with_fee = amount_in * fee_multiplier
        numerator = amount_in_with_fee * reserve_out
        denominator = reserve_in * BIPS_BASE + amount_in_with_fee
        return numerator // denominator

    def get_amount_in(
        self,
        amount_out: int,
        reserve_in: int,
        reserve_out: int,
        fee_multiplier: int = 9970,
    ) -> int:
        """Calculate required input for desired output.

        Formula: amount_in = (res_in * out * 10000) / ((res_out - out) * fee) + 1

        Args:
            amount_out: Desired output token amount
            reserve_in: Reserve of input token in pool
            reserve_out: Reserve of output token in pool
            fee_multiplier: Fee multiplier (default 9970 for 0.3% fee)

        Returns:
            Required input token amount, 0 for degenerate inputs

        Raises:
            InsufficientReservesError: If amount_out drains the output reserve
        """
        if amount_out <= 0:
            return 0
        if reserve_in <= 0 or reserve_out <= 0:
            return 0
        if amount_out >= reserve_out:
            raise InsufficientReservesError(f"Output {amount_out} >= reserve {reserve_out}")

        numerator = reserve_in * amount_out * BIPS_BASE
        denominator = (reserve_out - amount_out) * fee_multiplier
        return numerator // denominator + 1

    def encode_router_call(self, method: str, args: list[object]) -> str:
        """Encode a Router02 swap call.

        Args:
            method: Router method name (see ROUTER_METHODS)
            args: Positional arguments; addresses as 0x-prefixed hex strings

        Returns:
            0x-prefixed calldata

        Raises:
            ValueError: If the method is unknown or an address is invalid
        """
        try:
            selector, types = self.ROUTER_METHODS[method]
        except KeyError:
            raise ValueError(f"Unknown router method: {method}") from None

        values: list[object] = []
        for abi_type, value in zip(types, args, strict=True):
            if abi_type == "address":
                values.append(self._address_arg(value))
            elif abi_type == "address[]":
                if not isinstance(value, (list, tuple)):
                    raise ValueError(f"Expected an address list, got {value!r}")
                values.append([self._address_arg(item) for item in value])
            else:
                values.append(value)

        return selector + encode(types, values).hex()

    @staticmethod
    def _address_arg(value: object) -> bytes:
        if not isinstance(value, str) or not is_valid_address(value):
            raise ValueError(f"Invalid address argument: {value}")
        return address_bytes(value)


# Singleton instance
uniswap_v2 = UniswapV2()


@dataclass(frozen=True)
class Pair:
    """Reserve snapshot of one UniswapV2-style pair.

    Tokens are canonically ordered (token0 address < token1 address) so that
    deduplication by liquidity token address is stable. A price change
    produces a new Pair; instances are never mutated.
    """

    token0: Token
    token1: Token
    reserve0: int
    reserve1: int
    liquidity_token: str
    # Fee in basis points (30 = 0.3%); forks may use different fees
    fee_bps: int = 30

    def __post_init__(self) -> None:
        if self.token0 == self.token1:
            raise InvalidPairError("token0 and token1 must be different")
        if self.token0.chain_id != self.token1.chain_id:
            raise InvalidPairError("token0 and token1 must be on the same chain")
        if not self.token0.sorts_before(self.token1):
            raise InvalidPairError("token0 must sort before token1")
        for reserve in (self.reserve0, self.reserve1):
            if not isinstance(reserve, int) or isinstance(reserve, bool):
                raise TypeError("reserves must be int")
            if reserve < 0:
                raise ValueError("reserves must be non-negative")
        if not 0 <= self.fee_bps < BIPS_BASE:
            raise ValueError("fee_bps must be in [0, 10000)")
        object.__setattr__(
            self, "liquidity_token", normalize_address(self.liquidity_token, validate=True)
        )

    @classmethod
    def from_reserves(
        cls,
        token_a: Token,
        token_b: Token,
        reserve_a: int,
        reserve_b: int,
        liquidity_token: str,
        fee_bps: int = 30,
    ) -> Pair:
        """Build a pair from tokens in any order.

        Raises:
            InvalidPairError: If the tokens are identical or on different chains
        """
        try:
            a_first = token_a.sorts_before(token_b)
        except ValueError as err:
            raise InvalidPairError(str(err)) from err
        if a_first:
            return cls(token_a, token_b, reserve_a, reserve_b, liquidity_token, fee_bps)
        return cls(token_b, token_a, reserve_b, reserve_a, liquidity_token, fee_bps)

    @property
    def chain_id(self) -> int:
        return self.token0.chain_id

    @property
    def fee_multiplier(self) -> int:
        """Fee multiplier for AMM math (10000 - fee_bps)."""
        return BIPS_BASE - self.fee_bps

    def involves_token(self, token: Token) -> bool:
        return token == self.token0 or token == self.token1

    def other_token(self, token: Token) -> Token:
        if token == self.token0:
            return self.token1
        if token == self.token1:
            return self.token0
        raise ValueError(f"Token {token.address} not in pair {self.liquidity_token}")

    def reserve_of(self, token: Token) -> int:
        if token == self.token0:
            return self.reserve0
        if token == self.token1:
            return self.reserve1
        raise ValueError(f"Token {token.address} not in pair {self.liquidity_token}")

    def price_of(self, token: Token) -> Fraction:
        """Spot price of ``token`` in units of the other token (exact).

        Raises:
            InsufficientReservesError: If the token's reserve is empty
        """
        reserve = self.reserve_of(token)
        if reserve == 0:
            raise InsufficientReservesError(f"Empty reserve in {self.liquidity_token}")
        return Fraction(self.reserve_of(self.other_token(token)), reserve)

    def _with_reserves(self, reserve0: int, reserve1: int) -> Pair:
        return Pair(
            token0=self.token0,
            token1=self.token1,
            reserve0=reserve0,
            reserve1=reserve1,
            liquidity_token=self.liquidity_token,
            fee_bps=self.fee_bps,
        )

    def simulate_swap(self, token_in: Token, amount_in: int) -> SwapResult:
        """Simulate an exact-input swap.

        Raises:
            InsufficientReservesError: If either reserve is empty
            InsufficientInputAmountError: If the input is too small to yield output
        """
        if self.reserve0 == 0 or self.reserve1 == 0:
            raise InsufficientReservesError(f"Empty reserves in {self.liquidity_token}")
        reserve_in = self.reserve_of(token_in)
        reserve_out = self.reserve_of(self.other_token(token_in))
        amount_out = uniswap_v2.get_amount_out(
            amount_in, reserve_in, reserve_out, self.fee_multiplier
        )
        if amount_out == 0:
            raise InsufficientInputAmountError(f"Input {amount_in} yields no output")

        if token_in == self.token0:
            after = self._with_reserves(self.reserve0 + amount_in, self.reserve1 - amount_out)
        else:
            after = self._with_reserves(self.reserve0 - amount_out, self.reserve1 + amount_in)
        return SwapResult(amount_in=amount_in, amount_out=amount_out, pair_after=after)

    def simulate_swap_exact_output(self, token_out: Token, amount_out: int) -> SwapResult:
        """Simulate a swap producing exactly ``amount_out``.

        Raises:
            InsufficientReservesError: If reserves are empty or cannot cover the output
        """
        if self.reserve0 == 0 or self.reserve1 == 0:
            raise InsufficientReservesError(f"Empty reserves in {self.liquidity_token}")
        reserve_out = self.reserve_of(token_out)
        reserve_in = self.reserve_of(self.other_token(token_out))
        amount_in = uniswap_v2.get_amount_in(
            amount_out, reserve_in, reserve_out, self.fee_multiplier
        )

        if token_out == self.token0:
            after = self._with_reserves(self.reserve0 - amount_out, self.reserve1 + amount_in)
        else:
            after = self._with_reserves(self.reserve0 + amount_in, self.reserve1 - amount_out)
        return SwapResult(amount_in=amount_in, amount_out=amount_out, pair_after=after)

    def get_output_amount(self, amount_in: CurrencyAmount) -> tuple[CurrencyAmount, Pair]:
        """Output amount for an exact input, and the pair after the swap."""
        token_in = _as_token(amount_in)
        result = self.simulate_swap(token_in, amount_in.raw)
        return CurrencyAmount(self.other_token(token_in), result.amount_out), result.pair_after

    def get_input_amount(self, amount_out: CurrencyAmount) -> tuple[CurrencyAmount, Pair]:
        """Input amount required for an exact output, and the pair after the swap."""
        token_out = _as_token(amount_out)
        result = self.simulate_swap_exact_output(token_out, amount_out.raw)
        return CurrencyAmount(self.other_token(token_out), result.amount_in), result.pair_after


def _as_token(amount: CurrencyAmount) -> Token:
    if not isinstance(amount.currency, Token):
        raise TypeError("Pair math requires wrapped token amounts")
    return amount.currency


@dataclass(frozen=True)
class UniswapV2Trade(Trade):
    """Trade through a Route of one UniswapV2-style platform."""

    details: Route
    platform: UniswapV2Platform

    @classmethod
    def from_route(
        cls,
        route: Route,
        amount: CurrencyAmount,
        trade_type: TradeType,
        platform: UniswapV2Platform,
    ) -> UniswapV2Trade:
        """Compute the amounts of a trade along a route.

        ``amount`` is the input for EXACT_INPUT and the output for
        EXACT_OUTPUT; it may be given in the native or the wrapped currency.

        Raises:
            InsufficientReservesError: If a pair cannot cover the swap
            InsufficientInputAmountError: If an intermediate swap yields nothing
        """
        if trade_type == TradeType.EXACT_INPUT:
            current = CurrencyAmount(route.path[0], amount.raw)
            for pair in route.pairs:
                current, _ = pair.get_output_amount(current)
            input_raw, output_raw = amount.raw, current.raw
        else:
            current = CurrencyAmount(route.path[-1], amount.raw)
            for pair in reversed(route.pairs):
                current, _ = pair.get_input_amount(current)
            input_raw, output_raw = current.raw, amount.raw

        return cls(
            platform=platform,
            trade_type=trade_type,
            input_amount=CurrencyAmount(route.input, input_raw),
            output_amount=CurrencyAmount(route.output, output_raw),
            details=route,
        )

    @property
    def route(self) -> Route:
        return self.details

    @property
    def price_impact(self) -> Fraction:
        """Relative shortfall of the execution versus the route's mid price."""
        quoted = self.details.mid_price * self.input_amount.raw
        if quoted == 0:
            return Fraction(0)
        return (quoted - self.output_amount.raw) / quoted

    def swap_transaction(self, options: SwapOptions) -> UnsignedTransaction:
        """Encode the Router02 call for this trade.

        Raises:
            PlatformUnsupportedError: If the platform has no router on the route's chain
        """
        chain_id = self.details.chain_id
        router = self.platform.router_address(chain_id)
        path = [token.address for token in self.details.path]
        eth_in = isinstance(self.input_amount.currency, NativeCurrency)
        eth_out = isinstance(self.output_amount.currency, NativeCurrency)
        slippage = options.allowed_slippage_bps
        recipient = options.recipient
        deadline = options.deadline
        value = 0

        if self.trade_type == TradeType.EXACT_INPUT:
            amount_in = self.input_amount.raw
            amount_out_min = self.minimum_amount_out(slippage).raw
            if eth_in:
                method = "swapExactETHForTokens"
                args: list[object] = [amount_out_min, path, recipient, deadline]
                value = amount_in
            elif eth_out:
                method = "swapExactTokensForETH"
                args = [amount_in, amount_out_min, path, recipient, deadline]
            else:
                method = "swapExactTokensForTokens"
                args = [amount_in, amount_out_min, path, recipient, deadline]
        else:
            amount_out = self.output_amount.raw
            amount_in_max = self.maximum_amount_in(slippage).raw
            if eth_in:
                method = "swapETHForExactTokens"
                args = [amount_out, path, recipient, deadline]
                value = amount_in_max
            elif eth_out:
                method = "swapTokensForExactETH"
                args = [amount_out, amount_in_max, path, recipient, deadline]
            else:
                method = "swapTokensForExactTokens"
                args = [amount_out, amount_in_max, path, recipient, deadline]

        logger.debug(
            "swap_transaction_built",
            platform=self.platform.name,
            method=method,
            hops=self.details.hops,
        )
        return UnsignedTransaction(
            chain_id=chain_id,
            to=router,
            data=uniswap_v2.encode_router_call(method, args),
            value=value,
        )


__all__ = [
    "Pair",
    "UniswapV2",
    "UniswapV2Trade",
    "uniswap_v2",
]
