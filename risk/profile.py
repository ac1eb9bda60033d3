"""
Strategy Risk Profile.

Derives max profit, max loss and breakevens for a strategy at expiration.

The expiration payoff is piecewise linear in the underlying price with kinks
only at strikes, and the underlying cannot go below zero. So the finite
extremes sit at P = 0 or at a strike, and the payoff is unbounded only if
its slope above the highest strike is non-zero. That slope is the net
long/short count of calls plus stock.
"""

import logging
from typing import Optional, Sequence

from data.schemas import MarketParameters, OptionLeg, OptionType, PLDataPoint, RiskProfile
from structures.errors import DegenerateRange
from structures.legs import CONTRACT_MULTIPLIER, ensure_legs, leg_entry_prices
from structures.payoff import find_breakevens, strategy_pnl_at_expiration


logger = logging.getLogger(__name__)

UNLIMITED_THRESHOLD = 1_000_000.0


def upside_slope(legs: Sequence[OptionLeg], multiplier: int = CONTRACT_MULTIPLIER) -> float:
    """
    P&L change per $1 of underlying above the highest strike.

    > 0 means profit grows without bound, < 0 means loss does.
    """
    return float(sum(
        leg.quantity * leg.sign * multiplier
        for leg in legs
        if leg.option_type in (OptionType.CALL, OptionType.STOCK)
    ))


def critical_prices(legs: Sequence[OptionLeg], curve: Sequence[PLDataPoint] = ()) -> list[float]:
    """Prices at which the expiration payoff can take an extreme."""
    prices = {0.0}
    prices.update(leg.strike for leg in legs if leg.option_type.is_option)
    prices.update(point.price for point in curve)
    return sorted(prices)


def summarize_risk(
    curve: Sequence[PLDataPoint],
    legs: Sequence[OptionLeg],
    market: MarketParameters,
    multiplier: int = CONTRACT_MULTIPLIER,
    entry_prices: Optional[Sequence[float]] = None,
    breakeven_tolerance: float = 1e-6,
) -> RiskProfile:
    """
    Build the risk profile of a strategy.

    Args:
        curve: Expiration P&L curve (source of the breakevens)
        legs: Strategy legs
        market: Market parameters the legs were entered at
        multiplier: Shares per contract
        entry_prices: Precomputed per-leg entry prices (optional)
        breakeven_tolerance: Dedupe distance for breakevens

    Returns:
        RiskProfile with None for unlimited bounds
    """
    legs = ensure_legs(legs)
    if entry_prices is None:
        entry_prices = leg_entry_prices(legs, market)

    values = [
        strategy_pnl_at_expiration(legs, entry_prices, price, multiplier)
        for price in critical_prices(legs, curve)
    ]
    slope = upside_slope(legs, multiplier)

    max_profit = None if slope > 0 else max(values)
    max_loss = None if slope < 0 else -min(values)

    profile = RiskProfile(
        max_profit=max_profit,
        max_loss=max_loss,
        breakevens=tuple(find_breakevens(curve, breakeven_tolerance)),
    )
    logger.debug(
        "risk profile: slope=%s max_profit=%s max_loss=%s breakevens=%s",
        slope, profile.max_profit, profile.max_loss, profile.breakevens,
    )
    return profile


def summarize_curve(
    curve: Sequence[PLDataPoint],
    unlimited_threshold: float = UNLIMITED_THRESHOLD,
    breakeven_tolerance: float = 1e-6,
) -> RiskProfile:
    """
    Curve-only risk profile.

    Uses the sampled extremes and treats anything beyond
    `unlimited_threshold` as unlimited. A finite grid cannot prove
    unboundedness, so prefer summarize_risk when the legs are known.
    """
    if not curve:
        raise DegenerateRange("Curve has no points")

    pnls = [point.pnl for point in curve]
    highest = max(pnls)
    lowest = min(pnls)

    return RiskProfile(
        max_profit=None if highest > unlimited_threshold else highest,
        max_loss=None if lowest < -unlimited_threshold else -lowest,
        breakevens=tuple(find_breakevens(curve, breakeven_tolerance)),
    )
