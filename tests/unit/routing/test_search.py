"""Tests for the best-trade path search."""

import pytest

from ecorouter.models.currency import CurrencyAmount
from ecorouter.models.trade import TradeType
from ecorouter.routing.search import (
    best_trade_exact_in,
    best_trade_exact_out,
    input_output_comparator,
    sorted_insert,
)
from tests.helpers import (
    ETH,
    TEST_PLATFORM,
    TOKEN_A,
    TOKEN_B,
    TOKEN_C,
    TOKEN_D,
    TOKEN_E,
    TOKEN_X,
    TOKEN_Y,
    USDC,
    WETH,
    make_pair,
    make_trade,
)

DEEP = 10**24


def _cmp(a: int, b: int) -> int:
    return a - b


class TestSortedInsert:
    def test_inserts_in_order(self):
        items = [1, 3]
        assert sorted_insert(items, 2, 3, _cmp) is None
        assert items == [1, 2, 3]

    def test_full_list_rejects_worse_item(self):
        items = [1, 2, 3]
        assert sorted_insert(items, 4, 3, _cmp) == 4
        assert items == [1, 2, 3]

    def test_full_list_evicts_worst(self):
        items = [1, 2, 3]
        assert sorted_insert(items, 0, 3, _cmp) == 3
        assert items == [0, 1, 2]

    def test_ties_go_after_existing_items(self):
        items = [(1, "first")]
        sorted_insert(items, (1, "second"), 2, lambda a, b: a[0] - b[0])
        assert items == [(1, "first"), (1, "second")]

    def test_full_list_rejects_tie(self):
        items = [1, 2]
        assert sorted_insert(items, 2, 2, _cmp) == 2
        assert items == [1, 2]

    def test_invalid_sizes(self):
        with pytest.raises(ValueError):
            sorted_insert([], 1, 0, _cmp)
        with pytest.raises(ValueError):
            sorted_insert([1, 2, 3], 1, 2, _cmp)


class TestInputOutputComparator:
    def test_more_output_first(self):
        better = make_trade("P", 100, 98)
        worse = make_trade("P", 100, 95)
        assert input_output_comparator(better, worse) < 0
        assert input_output_comparator(worse, better) > 0

    def test_same_output_less_input_first(self):
        cheaper = make_trade("P", 99, 100, TradeType.EXACT_OUTPUT)
        dearer = make_trade("P", 101, 100, TradeType.EXACT_OUTPUT)
        assert input_output_comparator(cheaper, dearer) < 0

    def test_equal(self):
        assert input_output_comparator(make_trade("P", 1, 2), make_trade("Q", 1, 2)) == 0


class TestBestTradeExactIn:
    """Exact-input search over a single platform's pairs."""

    def test_routes_through_bridge_token(self):
        pairs = [make_pair(TOKEN_X, WETH), make_pair(WETH, TOKEN_Y)]

        trades = best_trade_exact_in(
            pairs, CurrencyAmount(TOKEN_X, 10**18), TOKEN_Y, TEST_PLATFORM
        )

        assert len(trades) == 1
        assert trades[0].route.path == (TOKEN_X, WETH, TOKEN_Y)
        assert trades[0].trade_type == TradeType.EXACT_INPUT
        assert trades[0].input_amount.raw == 10**18
        assert trades[0].output_amount.raw > 0

    def test_single_hop_limit_skips_bridged_route(self):
        pairs = [make_pair(TOKEN_X, WETH), make_pair(WETH, TOKEN_Y)]
        trades = best_trade_exact_in(
            pairs, CurrencyAmount(TOKEN_X, 10**18), TOKEN_Y, TEST_PLATFORM, max_hops=1
        )
        assert trades == []

    def test_hop_limit_bounds_route_length(self):
        chain = [
            make_pair(TOKEN_A, TOKEN_B),
            make_pair(TOKEN_B, TOKEN_C),
            make_pair(TOKEN_C, TOKEN_D),
            make_pair(TOKEN_D, TOKEN_E),
        ]
        amount = CurrencyAmount(TOKEN_A, 10**18)

        assert best_trade_exact_in(chain, amount, TOKEN_E, TEST_PLATFORM, max_hops=3) == []
        trades = best_trade_exact_in(chain, amount, TOKEN_E, TEST_PLATFORM, max_hops=4)
        assert trades[0].route.hops == 4

    def test_never_reuses_a_pair(self):
        pairs = [make_pair(TOKEN_A, TOKEN_B), make_pair(TOKEN_B, TOKEN_C)]
        trades = best_trade_exact_in(
            pairs,
            CurrencyAmount(TOKEN_A, 10**18),
            TOKEN_C,
            TEST_PLATFORM,
            max_hops=5,
            max_num_results=5,
        )

        assert len(trades) == 1
        assert trades[0].route.path == (TOKEN_A, TOKEN_B, TOKEN_C)

    def test_deep_two_hop_beats_shallow_direct(self):
        shallow_direct = make_pair(TOKEN_A, TOKEN_C, 10 * 10**18, 10 * 10**18)
        pairs = [
            shallow_direct,
            make_pair(TOKEN_A, TOKEN_B, DEEP, DEEP),
            make_pair(TOKEN_B, TOKEN_C, DEEP, DEEP),
        ]

        trades = best_trade_exact_in(
            pairs, CurrencyAmount(TOKEN_A, 10**18), TOKEN_C, TEST_PLATFORM, max_num_results=2
        )

        assert [t.route.hops for t in trades] == [2, 1]
        assert trades[0].output_amount.raw > trades[1].output_amount.raw

    def test_results_are_bounded(self):
        pairs = [
            make_pair(TOKEN_A, TOKEN_C),
            make_pair(TOKEN_A, TOKEN_B),
            make_pair(TOKEN_B, TOKEN_C),
            make_pair(TOKEN_A, TOKEN_D),
            make_pair(TOKEN_D, TOKEN_C),
        ]
        trades = best_trade_exact_in(
            pairs, CurrencyAmount(TOKEN_A, 10**18), TOKEN_C, TEST_PLATFORM, max_num_results=2
        )
        assert len(trades) == 2
        # Equal reserves everywhere: the direct route keeps the most output
        assert trades[0].route.hops == 1

    def test_dust_input_yields_no_trade(self):
        pairs = [make_pair(TOKEN_A, TOKEN_B)]
        assert best_trade_exact_in(pairs, CurrencyAmount(TOKEN_A, 1), TOKEN_B, TEST_PLATFORM) == []

    def test_native_input_uses_wrapped_pairs(self):
        pairs = [make_pair(WETH, USDC, 1000 * 10**18, 2_000_000 * 10**6)]
        trades = best_trade_exact_in(
            pairs, CurrencyAmount(ETH, 10**18), USDC, TEST_PLATFORM, wrapped_native=WETH
        )

        assert trades[0].input_amount.currency == ETH
        assert trades[0].route.path == (WETH, USDC)

    def test_native_without_wrapped_token_raises(self):
        with pytest.raises(ValueError):
            best_trade_exact_in([], CurrencyAmount(ETH, 10**18), USDC, TEST_PLATFORM)

    def test_identical_currencies_raise(self):
        with pytest.raises(ValueError, match="differ"):
            best_trade_exact_in(
                [], CurrencyAmount(ETH, 10**18), WETH, TEST_PLATFORM, wrapped_native=WETH
            )

    @pytest.mark.parametrize(
        "kwargs", [{"max_hops": 0}, {"max_num_results": 0}], ids=["hops", "results"]
    )
    def test_invalid_limits_raise(self, kwargs):
        with pytest.raises(ValueError):
            best_trade_exact_in([], CurrencyAmount(TOKEN_A, 1), TOKEN_B, TEST_PLATFORM, **kwargs)

    def test_zero_amount_raises(self):
        with pytest.raises(ValueError, match="positive"):
            best_trade_exact_in([], CurrencyAmount(TOKEN_A, 0), TOKEN_B, TEST_PLATFORM)


class TestBestTradeExactOut:
    def test_routes_backwards_through_bridge(self):
        pairs = [make_pair(TOKEN_X, WETH), make_pair(WETH, TOKEN_Y)]

        trades = best_trade_exact_out(
            pairs, TOKEN_X, CurrencyAmount(TOKEN_Y, 10**17), TEST_PLATFORM
        )

        assert len(trades) == 1
        trade = trades[0]
        assert trade.route.path == (TOKEN_X, WETH, TOKEN_Y)
        assert trade.output_amount.raw == 10**17
        assert trade.input_amount.raw > 10**17
        assert trade.trade_type == TradeType.EXACT_OUTPUT

    def test_prefers_least_input(self):
        pairs = [
            make_pair(TOKEN_A, TOKEN_C, 10 * 10**18, 10 * 10**18),
            make_pair(TOKEN_A, TOKEN_B, DEEP, DEEP),
            make_pair(TOKEN_B, TOKEN_C, DEEP, DEEP),
        ]
        trades = best_trade_exact_out(
            pairs, TOKEN_A, CurrencyAmount(TOKEN_C, 10**18), TEST_PLATFORM, max_num_results=2
        )

        assert trades[0].route.hops == 2
        assert trades[0].input_amount.raw < trades[1].input_amount.raw

    def test_output_beyond_reserves_yields_no_trade(self):
        pairs = [make_pair(TOKEN_A, TOKEN_B, 10**18, 10**18)]
        trades = best_trade_exact_out(
            pairs, TOKEN_A, CurrencyAmount(TOKEN_B, 2 * 10**18), TEST_PLATFORM
        )
        assert trades == []

    def test_native_output(self):
        pairs = [make_pair(WETH, USDC, 1000 * 10**18, 2_000_000 * 10**6)]
        trades = best_trade_exact_out(
            pairs, USDC, CurrencyAmount(ETH, 10**17), TEST_PLATFORM, wrapped_native=WETH
        )
        assert trades[0].output_amount.currency == ETH
