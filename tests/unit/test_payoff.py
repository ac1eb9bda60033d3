"""
Unit tests for the payoff curve generator and breakeven solver.
"""

import pytest

from data.schemas import OptionLeg, OptionType, PLDataPoint, PositionSide
from structures.errors import DegenerateRange, EmptyStrategy, InvalidParameter
from structures.legs import leg_entry_price
from structures.payoff import (
    find_breakevens,
    generate_payoff_curve,
    leg_value_at_expiration,
    price_grid,
    strategy_pnl_at_expiration,
)


def curve_of(*pairs):
    return [PLDataPoint(price=p, pnl=v) for p, v in pairs]


class TestPriceGrid:

    def test_inclusive_evenly_spaced(self):
        grid = price_grid(100.0, point_count=101, range_factor=0.5)
        assert len(grid) == 101
        assert grid[0] == pytest.approx(50.0)
        assert grid[-1] == pytest.approx(150.0)
        assert grid[1] - grid[0] == pytest.approx(1.0)

    def test_low_end_floored_at_zero(self):
        grid = price_grid(100.0, point_count=11, range_factor=1.5)
        assert grid[0] == 0.0
        assert grid[-1] == pytest.approx(250.0)

    @pytest.mark.parametrize("point_count", [0, 1])
    def test_too_few_points(self, point_count):
        with pytest.raises(DegenerateRange):
            price_grid(100.0, point_count=point_count)

    @pytest.mark.parametrize("range_factor", [0.0, -0.2])
    def test_zero_width_range(self, range_factor):
        with pytest.raises(DegenerateRange):
            price_grid(100.0, range_factor=range_factor)


class TestLegValue:

    def test_expiration_values(self):
        call = OptionLeg(option_type=OptionType.CALL, strike=100)
        put = OptionLeg(option_type=OptionType.PUT, strike=100)
        stock = OptionLeg(option_type=OptionType.STOCK)

        assert leg_value_at_expiration(call, 120) == 20
        assert leg_value_at_expiration(call, 80) == 0
        assert leg_value_at_expiration(put, 80) == 20
        assert leg_value_at_expiration(put, 120) == 0
        assert leg_value_at_expiration(stock, 87.5) == 87.5

    def test_short_leg_pnl_is_mirrored(self):
        long_put = OptionLeg(option_type=OptionType.PUT, position=PositionSide.LONG, strike=100)
        short_put = long_put.model_copy(update={'position': PositionSide.SHORT})
        long_pnl = strategy_pnl_at_expiration([long_put], [3.0], 90.0)
        short_pnl = strategy_pnl_at_expiration([short_put], [3.0], 90.0)
        assert long_pnl == pytest.approx(700.0)
        assert short_pnl == pytest.approx(-700.0)


class TestGenerateCurve:

    def test_point_count_and_ordering(self, market, bull_call_spread):
        curve = generate_payoff_curve(bull_call_spread, market, point_count=101)
        assert len(curve) == 101
        prices = [p.price for p in curve]
        assert all(b > a for a, b in zip(prices, prices[1:]))

    def test_custom_point_count(self, market, long_call):
        curve = generate_payoff_curve([long_call], market, point_count=7, range_factor=0.4)
        assert len(curve) == 7
        assert curve[0].price == pytest.approx(60.0)
        assert curve[-1].price == pytest.approx(140.0)

    def test_long_call_high_end_matches_pricer(self, market, long_call):
        entry = leg_entry_price(long_call, market)
        curve = generate_payoff_curve([long_call], market)
        high = curve[-1]
        assert high.pnl == pytest.approx((high.price - 100.0 - entry) * 100)

    def test_long_call_low_end_loses_premium(self, market, long_call):
        entry = leg_entry_price(long_call, market)
        curve = generate_payoff_curve([long_call], market)
        assert curve[0].pnl == pytest.approx(-entry * 100)

    def test_quantity_scales_pnl(self, market, long_call):
        single = generate_payoff_curve([long_call], market)
        triple = generate_payoff_curve(
            [long_call.model_copy(update={'quantity': 3})], market
        )
        for one, three in zip(single, triple):
            assert three.pnl == pytest.approx(one.pnl * 3)

    def test_stock_leg_pnl_is_linear(self, market):
        stock = OptionLeg(option_type=OptionType.STOCK, position=PositionSide.LONG)
        curve = generate_payoff_curve([stock], market)
        for point in curve:
            assert point.pnl == pytest.approx((point.price - 100.0) * 100)

    def test_before_expiration_curve_is_flat_at_spot(self, market, long_call):
        curve = generate_payoff_curve(
            [long_call], market, evaluation_time=market.time_to_expiry
        )
        at_spot = curve[50]
        assert at_spot.price == pytest.approx(100.0)
        assert at_spot.pnl == pytest.approx(0.0, abs=1e-9)

    def test_before_expiration_above_expiration_for_long_option(self, market, long_call):
        at_exp = generate_payoff_curve([long_call], market)
        before = generate_payoff_curve([long_call], market, evaluation_time=0.05)
        for exp_point, early_point in zip(at_exp, before):
            assert early_point.pnl >= exp_point.pnl - 1e-9

    def test_before_expiration_handles_zero_price(self, market):
        put = OptionLeg(option_type=OptionType.PUT, strike=100)
        curve = generate_payoff_curve([put], market, range_factor=1.0, evaluation_time=0.1)
        assert curve[0].price == 0.0
        assert curve[0].pnl > 0

    def test_negative_evaluation_time_rejected(self, market, long_call):
        with pytest.raises(InvalidParameter):
            generate_payoff_curve([long_call], market, evaluation_time=-0.1)

    def test_empty_strategy(self, market):
        with pytest.raises(EmptyStrategy):
            generate_payoff_curve([], market)

    def test_degenerate_range(self, market, long_call):
        with pytest.raises(DegenerateRange):
            generate_payoff_curve([long_call], market, point_count=1)


class TestFindBreakevens:

    def test_single_crossing_interpolated(self):
        curve = curve_of((1.0, -2.0), (2.0, 2.0), (3.0, 4.0))
        assert find_breakevens(curve) == [pytest.approx(1.5)]

    def test_single_crossing_between_bracketing_points(self, market, long_call):
        entry = leg_entry_price(long_call, market)
        curve = generate_payoff_curve([long_call], market)
        breakevens = find_breakevens(curve)
        assert len(breakevens) == 1
        assert 103.0 < breakevens[0] < 104.0
        assert breakevens[0] == pytest.approx(100.0 + entry, abs=1e-9)

    def test_downward_crossing(self):
        curve = curve_of((10.0, 3.0), (20.0, -1.0))
        assert find_breakevens(curve) == [pytest.approx(17.5)]

    def test_two_crossings_ascending(self):
        curve = curve_of((1.0, 1.0), (2.0, -1.0), (3.0, -1.0), (4.0, 1.0))
        assert find_breakevens(curve) == [pytest.approx(1.5), pytest.approx(3.5)]

    def test_exact_zero_point_reported_once(self):
        curve = curve_of((1.0, -1.0), (2.0, 0.0), (3.0, 1.0))
        assert find_breakevens(curve) == [2.0]

    def test_zero_touch_without_crossing(self):
        curve = curve_of((1.0, 1.0), (2.0, 0.0), (3.0, 1.0))
        assert find_breakevens(curve) == [2.0]

    def test_zero_plateau_not_divided(self):
        curve = curve_of((1.0, -1.0), (2.0, 0.0), (3.0, 0.0), (4.0, 1.0))
        assert find_breakevens(curve) == [3.0]

    def test_all_zero_curve(self):
        curve = curve_of((1.0, 0.0), (2.0, 0.0), (3.0, 0.0))
        assert find_breakevens(curve) == []

    def test_near_duplicate_crossings_deduped(self):
        curve = curve_of((0.0, -1.0), (1.0, 1e-9), (1.0000001, -1.0))
        breakevens = find_breakevens(curve)
        assert len(breakevens) == 1
        assert breakevens[0] == pytest.approx(1.0, abs=1e-6)

    def test_no_crossing(self):
        curve = curve_of((1.0, 5.0), (2.0, 6.0))
        assert find_breakevens(curve) == []

    def test_short_curves(self):
        assert find_breakevens([]) == []
        assert find_breakevens(curve_of((1.0, 0.0))) == []

    def test_unordered_curve_rejected(self):
        curve = curve_of((2.0, -1.0), (1.0, 1.0))
        with pytest.raises(InvalidParameter):
            find_breakevens(curve)

    def test_duplicate_price_rejected(self):
        curve = curve_of((1.0, -1.0), (1.0, 1.0))
        with pytest.raises(InvalidParameter):
            find_breakevens(curve)
