"""
Leg Pricing and Strategy Aggregation.

Entry prices for each leg and the net debit/credit of a strategy.
All functions are pure: legs and market parameters in, numbers out.
"""

from typing import Optional, Sequence

from data.schemas import MarketParameters, OptionLeg, OptionType
from structures.errors import EmptyStrategy, InvalidParameter
from structures.pricing import price_option


CONTRACT_MULTIPLIER = 100  # Shares per contract


def ensure_legs(legs: Sequence[OptionLeg]) -> tuple[OptionLeg, ...]:
    """Freeze a leg sequence, rejecting an empty strategy."""
    legs = tuple(legs)
    if not legs:
        raise EmptyStrategy("Strategy has no legs")
    return legs


def leg_entry_price(leg: OptionLeg, market: MarketParameters) -> float:
    """
    Per-share theoretical entry price of a leg.

    Stock legs cost the spot price; options are priced with Black-Scholes.
    """
    if leg.option_type == OptionType.STOCK:
        return market.spot
    return price_option(leg.option_type, market, leg.strike)


def leg_entry_prices(
    legs: Sequence[OptionLeg],
    market: MarketParameters,
) -> tuple[float, ...]:
    """Entry price of every leg, in leg order."""
    return tuple(leg_entry_price(leg, market) for leg in ensure_legs(legs))


def net_entry_cost(
    legs: Sequence[OptionLeg],
    market: MarketParameters,
    entry_prices: Optional[Sequence[float]] = None,
) -> float:
    """
    Net per-share entry cost of a strategy.

    Sum of price * quantity * sign over legs. Positive = debit.
    Pass entry_prices to reuse prices already computed for these legs.
    """
    legs = ensure_legs(legs)
    if entry_prices is None:
        entry_prices = leg_entry_prices(legs, market)
    elif len(entry_prices) != len(legs):
        raise InvalidParameter(
            f"got {len(entry_prices)} entry prices for {len(legs)} legs"
        )
    return sum(
        price * leg.quantity * leg.sign
        for leg, price in zip(legs, entry_prices)
    )


def net_debit(
    legs: Sequence[OptionLeg],
    market: MarketParameters,
    multiplier: int = CONTRACT_MULTIPLIER,
) -> float:
    """
    Total cash to enter the strategy.

    Positive is a debit paid, negative a credit received.
    """
    return net_entry_cost(legs, market) * multiplier
