"""
Payoff Modeling for Option Strategies.

Calculates the P&L curve at expiration (or at a point before expiration)
across a range of underlying prices, and locates breakeven prices on it.
"""

import logging
import math
from typing import Optional, Sequence

import numpy as np

from data.schemas import MarketParameters, OptionLeg, OptionType, PLDataPoint
from structures.errors import DegenerateRange, InvalidParameter
from structures.legs import CONTRACT_MULTIPLIER, ensure_legs, leg_entry_prices
from structures.pricing import bs_price, intrinsic_value


logger = logging.getLogger(__name__)

DEFAULT_POINT_COUNT = 101
DEFAULT_RANGE_FACTOR = 0.5


def leg_value_at_expiration(leg: OptionLeg, underlying_price: float) -> float:
    """
    Per-share value of a leg at expiration, before direction is applied.

    Args:
        leg: Strategy leg
        underlying_price: Price of underlying at expiration

    Returns:
        Intrinsic value for options, the price itself for stock
    """
    if leg.option_type == OptionType.STOCK:
        return underlying_price
    return intrinsic_value(leg.option_type, underlying_price, leg.strike)


def leg_value_before_expiration(
    leg: OptionLeg,
    underlying_price: float,
    market: MarketParameters,
    time_remaining: float,
) -> float:
    """Per-share Black-Scholes value of a leg with time_remaining years left."""
    if leg.option_type == OptionType.STOCK:
        return underlying_price
    if underlying_price <= 0:
        # Worthless underlying: call is 0, put is the discounted strike
        if leg.option_type == OptionType.CALL:
            return 0.0
        return leg.strike * math.exp(-market.risk_free_rate * time_remaining)
    return bs_price(
        leg.option_type,
        underlying_price,
        leg.strike,
        time_remaining,
        market.risk_free_rate,
        market.volatility,
        market.dividend_yield,
    )


def strategy_pnl_at_expiration(
    legs: Sequence[OptionLeg],
    entry_prices: Sequence[float],
    underlying_price: float,
    multiplier: int = CONTRACT_MULTIPLIER,
) -> float:
    """
    Total P&L of a strategy at one expiration price.

    Args:
        legs: Strategy legs
        entry_prices: Per-share entry price of each leg (same order)
        underlying_price: Underlying price at expiration
        multiplier: Shares per contract

    Returns:
        Sum over legs of (value - entry) * quantity * sign * multiplier
    """
    total = 0.0
    for leg, entry in zip(legs, entry_prices):
        value = leg_value_at_expiration(leg, underlying_price)
        total += (value - entry) * leg.quantity * leg.sign * multiplier
    return total


def price_grid(
    spot: float,
    point_count: int = DEFAULT_POINT_COUNT,
    range_factor: float = DEFAULT_RANGE_FACTOR,
) -> list[float]:
    """
    Evenly spaced prices centred on spot, both ends inclusive.

    The low end is floored at zero.

    Raises:
        DegenerateRange: fewer than two points or a zero-width range
    """
    if point_count < 2:
        raise DegenerateRange(f"point_count must be >= 2, got {point_count}")
    if not range_factor > 0:
        raise DegenerateRange(f"range_factor must be > 0, got {range_factor}")

    low = max(0.0, spot - spot * range_factor)
    high = spot + spot * range_factor
    if not high > low:
        raise DegenerateRange(f"Price range [{low}, {high}] has zero width")

    return np.linspace(low, high, point_count).tolist()


def generate_payoff_curve(
    legs: Sequence[OptionLeg],
    market: MarketParameters,
    point_count: int = DEFAULT_POINT_COUNT,
    range_factor: float = DEFAULT_RANGE_FACTOR,
    multiplier: int = CONTRACT_MULTIPLIER,
    evaluation_time: float = 0.0,
    entry_prices: Optional[Sequence[float]] = None,
) -> list[PLDataPoint]:
    """
    Calculate the P&L curve for a strategy.

    Entry prices are computed once at the current market; they are not
    re-priced at each sampled price.

    Args:
        legs: Strategy legs
        market: Current market parameters
        point_count: Number of price points
        range_factor: Half-width of the range as a fraction of spot
        multiplier: Shares per contract
        evaluation_time: Years left at evaluation. 0 means at expiration;
            a positive value revalues option legs with Black-Scholes.
        entry_prices: Precomputed per-leg entry prices (optional)

    Returns:
        PLDataPoints strictly ascending in price
    """
    legs = ensure_legs(legs)
    if evaluation_time < 0 or not math.isfinite(evaluation_time):
        raise InvalidParameter(f"evaluation_time must be >= 0, got {evaluation_time}")

    if entry_prices is None:
        entry_prices = leg_entry_prices(legs, market)

    prices = price_grid(market.spot, point_count, range_factor)

    curve = []
    for price in prices:
        if evaluation_time == 0:
            pnl = strategy_pnl_at_expiration(legs, entry_prices, price, multiplier)
        else:
            pnl = 0.0
            for leg, entry in zip(legs, entry_prices):
                value = leg_value_before_expiration(leg, price, market, evaluation_time)
                pnl += (value - entry) * leg.quantity * leg.sign * multiplier
        curve.append(PLDataPoint(price=price, pnl=pnl))

    logger.debug(
        "payoff curve: %d points over [%.4f, %.4f], %d legs",
        len(curve), prices[0], prices[-1], len(legs),
    )
    return curve


def _is_crossing(pnl1: float, pnl2: float) -> bool:
    return (pnl1 <= 0 and pnl2 > 0) or (pnl1 >= 0 and pnl2 < 0)


def find_breakevens(
    curve: Sequence[PLDataPoint],
    tolerance: float = 1e-6,
) -> list[float]:
    """
    Find breakeven prices where the P&L curve crosses zero.

    Adjacent points are tested with an inclusive sign check and the crossing
    is linearly interpolated. A point exactly at zero followed by a non-zero
    point yields that point's price. Breakevens closer than `tolerance` to
    the previous one are dropped.

    Args:
        curve: PLDataPoints strictly ascending in price
        tolerance: Minimum separation between reported breakevens

    Returns:
        Ascending breakeven prices
    """
    for p1, p2 in zip(curve, curve[1:]):
        if not p2.price > p1.price:
            raise InvalidParameter(
                f"Curve must be strictly ascending in price ({p1.price} then {p2.price})"
            )

    breakevens: list[float] = []
    for p1, p2 in zip(curve, curve[1:]):
        if not _is_crossing(p1.pnl, p2.pnl):
            continue

        denominator = abs(p1.pnl) + abs(p2.pnl)
        if denominator == 0:
            # Flat at zero: no crossing
            continue

        fraction = abs(p1.pnl) / denominator
        be_price = p1.price + fraction * (p2.price - p1.price)

        if breakevens and abs(be_price - breakevens[-1]) <= tolerance:
            continue
        breakevens.append(be_price)

    return breakevens
