"""
Greeks Calculation and Aggregation.

Provides position Greeks for individual legs and aggregation for strategies.
"""

from dataclasses import dataclass
from typing import Sequence

from data.schemas import Greeks, MarketParameters, OptionLeg, OptionType
from structures.legs import CONTRACT_MULTIPLIER, ensure_legs
from structures.pricing import calculate_greeks


@dataclass(frozen=True)
class PositionGreeks:
    """Greeks for a position (per-share Greeks * quantity * sign * multiplier)."""
    delta: float
    gamma: float
    theta: float  # Per day
    vega: float   # Per 1% IV change
    rho: float    # Per 1% rate change

    @classmethod
    def zero(cls) -> 'PositionGreeks':
        return cls(delta=0.0, gamma=0.0, theta=0.0, vega=0.0, rho=0.0)

    @classmethod
    def from_greeks(
        cls,
        greeks: Greeks,
        quantity: int,
        sign: int = 1,
        multiplier: int = CONTRACT_MULTIPLIER,
    ) -> 'PositionGreeks':
        """Scale contract Greeks up to a position."""
        scale = quantity * sign * multiplier
        return cls(
            delta=greeks.delta * scale,
            gamma=greeks.gamma * scale,
            theta=greeks.theta * scale,
            vega=greeks.vega * scale,
            rho=greeks.rho * scale,
        )

    def __add__(self, other: 'PositionGreeks') -> 'PositionGreeks':
        """Add two PositionGreeks together."""
        return PositionGreeks(
            delta=self.delta + other.delta,
            gamma=self.gamma + other.gamma,
            theta=self.theta + other.theta,
            vega=self.vega + other.vega,
            rho=self.rho + other.rho,
        )

    def to_dict(self) -> dict:
        return {
            'delta': self.delta,
            'gamma': self.gamma,
            'theta': self.theta,
            'vega': self.vega,
            'rho': self.rho,
        }


def calculate_leg_greeks(
    leg: OptionLeg,
    market: MarketParameters,
    multiplier: int = CONTRACT_MULTIPLIER,
) -> PositionGreeks:
    """
    Calculate position Greeks for a leg.

    A stock leg carries delta 1 per share and nothing else.

    Raises:
        UndefinedAtExpiration: option leg with no time or volatility left
    """
    if leg.option_type == OptionType.STOCK:
        return PositionGreeks(
            delta=float(leg.quantity * leg.sign * multiplier),
            gamma=0.0,
            theta=0.0,
            vega=0.0,
            rho=0.0,
        )

    greeks = calculate_greeks(leg.option_type, market, leg.strike)
    return PositionGreeks.from_greeks(greeks, leg.quantity, leg.sign, multiplier)


def calculate_strategy_greeks(
    legs: Sequence[OptionLeg],
    market: MarketParameters,
    multiplier: int = CONTRACT_MULTIPLIER,
) -> PositionGreeks:
    """
    Calculate aggregate Greeks for a strategy.

    Returns:
        Sum of the position Greeks of every leg
    """
    total = PositionGreeks.zero()
    for leg in ensure_legs(legs):
        total = total + calculate_leg_greeks(leg, market, multiplier)
    return total
