"""Tests for the UniswapV2 pair math, pair snapshots and router encoding."""

import pytest
from eth_abi import decode  # type: ignore[attr-defined]

from ecorouter.amm.uniswap_v2 import Pair, UniswapV2, UniswapV2Trade, uniswap_v2
from ecorouter.errors import (
    InsufficientInputAmountError,
    InsufficientReservesError,
    InvalidPairError,
)
from ecorouter.models.currency import CurrencyAmount
from ecorouter.models.trade import Route, SwapOptions, TradeType
from tests.helpers import (
    ETH,
    RECIPIENT,
    TEST_PLATFORM,
    TOKEN_A,
    TOKEN_B,
    USDC,
    WETH,
    make_pair,
)

DEADLINE = 1_700_000_000


class TestUniswapV2Math:
    """Tests for UniswapV2 constant product math."""

    def test_get_amount_out_exact(self):
        # 1000 * 9970 * 10000 // (10000 * 10000 + 1000 * 9970)
        assert uniswap_v2.get_amount_out(1000, 10_000, 10_000) == 906

    def test_get_amount_out_basic(self):
        """1 ETH into 100 ETH / 250K USDC gives roughly 2467 USDC."""
        amount_out = uniswap_v2.get_amount_out(10**18, 100 * 10**18, 250_000 * 10**6)

        expected = 2467 * 10**6
        assert amount_out < 250_000 * 10**6
        assert abs(amount_out - expected) < expected * 0.01

    def test_fee_multiplier_changes_output(self):
        amm = UniswapV2()
        low_fee = amm.get_amount_out(1000, 10_000, 10_000, fee_multiplier=9975)
        assert low_fee > amm.get_amount_out(1000, 10_000, 10_000, fee_multiplier=9970)

    def test_get_amount_out_degenerate_inputs(self):
        assert uniswap_v2.get_amount_out(0, 100, 100) == 0
        assert uniswap_v2.get_amount_out(100, 0, 100) == 0
        assert uniswap_v2.get_amount_out(100, 100, 0) == 0

    def test_get_amount_in_inverts_amount_out(self):
        # 10000 * 906 * 10000 // ((10000 - 906) * 9970) + 1
        assert uniswap_v2.get_amount_in(906, 10_000, 10_000) == 1000

    def test_get_amount_in_exceeds_reserve(self):
        with pytest.raises(InsufficientReservesError):
            uniswap_v2.get_amount_in(10_000, 10_000, 10_000)

    def test_large_amounts_stay_exact(self):
        """Reserves beyond 2**112 do not lose precision."""
        reserve = 2**120
        amount_out = uniswap_v2.get_amount_out(2**100, reserve, reserve)
        assert amount_out == (2**100 * 9970 * reserve) // (reserve * 10000 + 2**100 * 9970)


class TestPair:
    def test_from_reserves_orders_tokens(self):
        pair = make_pair(TOKEN_B, TOKEN_A, 5, 7)
        assert pair.token0 == TOKEN_A
        assert pair.reserve0 == 7
        assert pair.reserve_of(TOKEN_B) == 5

    def test_unordered_tokens_rejected(self):
        with pytest.raises(InvalidPairError):
            Pair(TOKEN_B, TOKEN_A, 1, 1, "0x" + "01" * 20)

    def test_identical_tokens_rejected(self):
        with pytest.raises(InvalidPairError):
            make_pair(TOKEN_A, TOKEN_A)

    def test_negative_reserve_rejected(self):
        with pytest.raises(ValueError):
            make_pair(TOKEN_A, TOKEN_B, -1, 1)

    def test_liquidity_token_is_normalized(self):
        pair = make_pair(TOKEN_A, TOKEN_B, liquidity_token="0x" + "AB" * 20)
        assert pair.liquidity_token == "0x" + "ab" * 20

    def test_other_token_outside_pair_raises(self):
        with pytest.raises(ValueError):
            make_pair(TOKEN_A, TOKEN_B).other_token(WETH)


class TestSimulateSwap:
    def test_exact_input_returns_new_snapshot(self):
        pair = make_pair(TOKEN_A, TOKEN_B, 10_000, 10_000)
        result = pair.simulate_swap(TOKEN_A, 1000)

        assert result.amount_out == 906
        assert result.pair_after.reserve0 == 11_000
        assert result.pair_after.reserve1 == 10_000 - 906
        # The original snapshot is unchanged
        assert pair.reserve0 == 10_000

    def test_dust_input_raises(self):
        pair = make_pair(TOKEN_A, TOKEN_B)
        with pytest.raises(InsufficientInputAmountError):
            pair.simulate_swap(TOKEN_A, 1)

    def test_empty_reserves_raise(self):
        pair = make_pair(TOKEN_A, TOKEN_B, 0, 10_000)
        with pytest.raises(InsufficientReservesError):
            pair.simulate_swap(TOKEN_B, 1000)

    def test_exact_output(self):
        pair = make_pair(TOKEN_A, TOKEN_B, 10_000, 10_000)
        result = pair.simulate_swap_exact_output(TOKEN_B, 906)
        assert result.amount_in == 1000

    def test_exact_output_draining_reserve_raises(self):
        pair = make_pair(TOKEN_A, TOKEN_B, 10_000, 10_000)
        with pytest.raises(InsufficientReservesError):
            pair.simulate_swap_exact_output(TOKEN_B, 10_000)

    def test_currency_amount_requires_token(self):
        pair = make_pair(WETH, USDC)
        with pytest.raises(TypeError):
            pair.get_output_amount(CurrencyAmount(ETH, 10**18))


class TestEncodeRouterCall:
    def test_swap_exact_tokens_for_tokens(self):
        path = [WETH.address, USDC.address]
        data = uniswap_v2.encode_router_call(
            "swapExactTokensForTokens", [100, 90, path, RECIPIENT, DEADLINE]
        )

        assert data.startswith("0x38ed1739")
        decoded = decode(
            ["uint256", "uint256", "address[]", "address", "uint256"], bytes.fromhex(data[10:])
        )
        assert decoded[0] == 100
        assert decoded[1] == 90
        assert [a.lower() for a in decoded[2]] == path
        assert decoded[3].lower() == RECIPIENT
        assert decoded[4] == DEADLINE

    def test_unknown_method_raises(self):
        with pytest.raises(ValueError, match="Unknown router method"):
            uniswap_v2.encode_router_call("swapEverything", [])

    def test_invalid_address_raises(self):
        with pytest.raises(ValueError, match="Invalid address"):
            uniswap_v2.encode_router_call(
                "swapExactTokensForTokens", [1, 1, ["0x1234"], RECIPIENT, DEADLINE]
            )

    def test_path_must_be_a_list(self):
        with pytest.raises(ValueError, match="address list"):
            uniswap_v2.encode_router_call(
                "swapExactTokensForTokens", [1, 1, WETH.address, RECIPIENT, DEADLINE]
            )


class TestUniswapV2Trade:
    def _trade(self, currency_in, currency_out, amount, trade_type):
        pair = make_pair(WETH, USDC, 1000 * 10**18, 2_000_000 * 10**6)
        route = Route((pair,), currency_in, currency_out, wrapped_native=WETH)
        return UniswapV2Trade.from_route(route, amount, trade_type, TEST_PLATFORM)

    def test_exact_input_amounts(self):
        trade = self._trade(WETH, USDC, CurrencyAmount(WETH, 10**18), TradeType.EXACT_INPUT)

        expected = uniswap_v2.get_amount_out(10**18, 1000 * 10**18, 2_000_000 * 10**6)
        assert trade.input_amount == CurrencyAmount(WETH, 10**18)
        assert trade.output_amount == CurrencyAmount(USDC, expected)
        assert trade.route.hops == 1

    def test_exact_output_amounts(self):
        trade = self._trade(
            WETH, USDC, CurrencyAmount(USDC, 1000 * 10**6), TradeType.EXACT_OUTPUT
        )
        expected = uniswap_v2.get_amount_in(1000 * 10**6, 1000 * 10**18, 2_000_000 * 10**6)
        assert trade.input_amount.raw == expected
        assert trade.output_amount.raw == 1000 * 10**6

    def test_native_input_keeps_native_currency(self):
        trade = self._trade(ETH, USDC, CurrencyAmount(ETH, 10**18), TradeType.EXACT_INPUT)
        assert trade.input_amount.currency == ETH
        assert trade.route.path == (WETH, USDC)

    def test_price_impact_grows_with_size(self):
        small = self._trade(WETH, USDC, CurrencyAmount(WETH, 10**16), TradeType.EXACT_INPUT)
        large = self._trade(WETH, USDC, CurrencyAmount(WETH, 10**20), TradeType.EXACT_INPUT)
        assert 0 < small.price_impact < large.price_impact < 1

    def test_swap_transaction_tokens_for_tokens(self):
        trade = self._trade(WETH, USDC, CurrencyAmount(WETH, 10**18), TradeType.EXACT_INPUT)
        tx = trade.swap_transaction(SwapOptions(50, RECIPIENT, DEADLINE))

        assert tx.to == "0x" + "e1" * 20
        assert tx.data.startswith("0x38ed1739")
        assert tx.value == 0
        assert tx.chain_id == 1

    def test_swap_transaction_native_in_sends_value(self):
        trade = self._trade(ETH, USDC, CurrencyAmount(ETH, 10**18), TradeType.EXACT_INPUT)
        tx = trade.swap_transaction(SwapOptions(50, RECIPIENT, DEADLINE))

        assert tx.data.startswith("0x7ff36ab5")
        assert tx.value == 10**18

    def test_swap_transaction_native_in_exact_output_sends_max_input(self):
        trade = self._trade(
            ETH, USDC, CurrencyAmount(USDC, 1000 * 10**6), TradeType.EXACT_OUTPUT
        )
        tx = trade.swap_transaction(SwapOptions(100, RECIPIENT, DEADLINE))

        assert tx.data.startswith("0xfb3bdb41")
        assert tx.value == trade.maximum_amount_in(100).raw
        assert tx.value > trade.input_amount.raw

    def test_swap_transaction_native_out(self):
        trade = self._trade(USDC, ETH, CurrencyAmount(USDC, 1000 * 10**6), TradeType.EXACT_INPUT)
        tx = trade.swap_transaction(SwapOptions(50, RECIPIENT, DEADLINE))

        assert tx.data.startswith("0x18cbafe5")
        assert tx.value == 0

    def test_swap_transaction_exact_output_native_out(self):
        trade = self._trade(USDC, ETH, CurrencyAmount(ETH, 10**17), TradeType.EXACT_OUTPUT)
        tx = trade.swap_transaction(SwapOptions(50, RECIPIENT, DEADLINE))
        assert tx.data.startswith("0x4a25d94a")
