"""
Black-Scholes Option Pricing.

Implements the Black-Scholes-Merton model for European options with a
continuous dividend yield. Provides the normal distribution primitives,
the closed-form price and the analytic Greeks.
"""

import math
from datetime import date
from typing import Optional

from scipy import special

from data.schemas import Greeks, MarketParameters, OptionType
from structures.errors import InvalidParameter, UndefinedAtExpiration


_SQRT_2 = math.sqrt(2.0)
_SQRT_2PI = math.sqrt(2.0 * math.pi)

DAYS_PER_YEAR = 365.0


# ============================================================================
# Normal Distribution
# ============================================================================

def normal_pdf(x: float) -> float:
    """Standard normal density. Underflows to 0 for large |x|."""
    return math.exp(-0.5 * x * x) / _SQRT_2PI


def normal_cdf(x: float) -> float:
    """Standard normal cumulative distribution via the library erf."""
    return float(0.5 * (1.0 + special.erf(x / _SQRT_2)))


# ============================================================================
# Core Model
# ============================================================================

def _check_inputs(
    option_type: OptionType,
    spot: float,
    strike: float,
    time_to_expiry: float,
    risk_free_rate: float,
    volatility: float,
    dividend_yield: float,
) -> None:
    """Reject inputs that would otherwise surface as NaN/Inf."""
    if option_type not in (OptionType.CALL, OptionType.PUT):
        raise InvalidParameter(f"Cannot price {option_type!r} as an option")
    values = {
        'spot': spot,
        'strike': strike,
        'time_to_expiry': time_to_expiry,
        'risk_free_rate': risk_free_rate,
        'volatility': volatility,
        'dividend_yield': dividend_yield,
    }
    for name, value in values.items():
        if not math.isfinite(value):
            raise InvalidParameter(f"{name} must be finite, got {value}")
    if spot <= 0:
        raise InvalidParameter(f"spot must be > 0, got {spot}")
    if strike <= 0:
        raise InvalidParameter(f"strike must be > 0, got {strike}")


def _d1(s: float, k: float, t: float, r: float, v: float, q: float = 0) -> float:
    """Calculate d1 parameter. Requires t > 0 and v > 0."""
    return (math.log(s / k) + (r - q + 0.5 * v ** 2) * t) / (v * math.sqrt(t))


def _d2(d1: float, v: float, t: float) -> float:
    """Calculate d2 parameter."""
    return d1 - v * math.sqrt(t)


def intrinsic_value(option_type: OptionType, spot: float, strike: float) -> float:
    """Value of an option exercised immediately."""
    if option_type == OptionType.CALL:
        return max(spot - strike, 0.0)
    return max(strike - spot, 0.0)


def bs_price(
    option_type: OptionType,
    spot: float,
    strike: float,
    time_to_expiry: float,
    risk_free_rate: float,
    volatility: float,
    dividend_yield: float = 0.0
) -> float:
    """
    Calculate Black-Scholes option price.

    Args:
        option_type: CALL or PUT
        spot: Current underlying price
        strike: Strike price
        time_to_expiry: Time to expiry in years
        risk_free_rate: Risk-free rate (annualized, e.g., 0.05 for 5%)
        volatility: Volatility (annualized, e.g., 0.20 for 20%)
        dividend_yield: Continuous dividend yield

    Returns:
        Theoretical option price. With no time or no volatility left this
        is the intrinsic value.

    Raises:
        InvalidParameter: spot or strike not positive, or a non-finite input
    """
    _check_inputs(
        option_type, spot, strike, time_to_expiry,
        risk_free_rate, volatility, dividend_yield,
    )

    if time_to_expiry <= 0 or volatility <= 0:
        return intrinsic_value(option_type, spot, strike)

    d1 = _d1(spot, strike, time_to_expiry, risk_free_rate, volatility, dividend_yield)
    d2 = _d2(d1, volatility, time_to_expiry)

    discount = math.exp(-risk_free_rate * time_to_expiry)
    dividend_discount = math.exp(-dividend_yield * time_to_expiry)

    if option_type == OptionType.CALL:
        return (
            spot * dividend_discount * normal_cdf(d1) -
            strike * discount * normal_cdf(d2)
        )
    return (
        strike * discount * normal_cdf(-d2) -
        spot * dividend_discount * normal_cdf(-d1)
    )


def bs_greeks(
    option_type: OptionType,
    spot: float,
    strike: float,
    time_to_expiry: float,
    risk_free_rate: float,
    volatility: float,
    dividend_yield: float = 0.0
) -> Greeks:
    """
    Calculate Black-Scholes Greeks.

    Theta is per calendar day, vega and rho per 1 percentage point.
    With dividend_yield=0 these are the plain Black-Scholes Greeks.

    Raises:
        InvalidParameter: spot or strike not positive, or a non-finite input
        UndefinedAtExpiration: time_to_expiry or volatility not positive
    """
    _check_inputs(
        option_type, spot, strike, time_to_expiry,
        risk_free_rate, volatility, dividend_yield,
    )

    if time_to_expiry <= 0 or volatility <= 0:
        raise UndefinedAtExpiration(
            f"Greeks need T > 0 and vol > 0 (T={time_to_expiry}, vol={volatility})"
        )

    sqrt_t = math.sqrt(time_to_expiry)
    d1 = _d1(spot, strike, time_to_expiry, risk_free_rate, volatility, dividend_yield)
    d2 = _d2(d1, volatility, time_to_expiry)

    n_d1 = normal_cdf(d1)
    n_d2 = normal_cdf(d2)
    pdf_d1 = normal_pdf(d1)

    discount = math.exp(-risk_free_rate * time_to_expiry)
    dividend_discount = math.exp(-dividend_yield * time_to_expiry)

    # Delta
    if option_type == OptionType.CALL:
        delta = dividend_discount * n_d1
    else:
        delta = dividend_discount * (n_d1 - 1)

    # Gamma (same for calls and puts)
    gamma = (dividend_discount * pdf_d1) / (spot * volatility * sqrt_t)

    # Theta (per day)
    term1 = -(spot * dividend_discount * pdf_d1 * volatility) / (2 * sqrt_t)
    if option_type == OptionType.CALL:
        term2 = -risk_free_rate * strike * discount * n_d2
        term3 = dividend_yield * spot * dividend_discount * n_d1
    else:
        term2 = risk_free_rate * strike * discount * (1 - n_d2)
        term3 = -dividend_yield * spot * dividend_discount * (1 - n_d1)

    theta = (term1 + term2 + term3) / DAYS_PER_YEAR

    # Vega (per 1% vol change)
    vega = spot * dividend_discount * pdf_d1 * sqrt_t / 100

    # Rho (per 1% rate change)
    if option_type == OptionType.CALL:
        rho = strike * time_to_expiry * discount * n_d2 / 100
    else:
        rho = -strike * time_to_expiry * discount * (1 - n_d2) / 100

    return Greeks(
        delta=delta,
        gamma=gamma,
        theta=theta,
        vega=vega,
        rho=rho,
    )


# ============================================================================
# Convenience Functions
# ============================================================================

def time_to_expiry_years(expiration: date, as_of: Optional[date] = None) -> float:
    """
    Calculate time to expiry in years (calendar days / 365).

    Expired contracts return 0.0.
    """
    if as_of is None:
        as_of = date.today()

    days = (expiration - as_of).days
    if days <= 0:
        return 0.0
    return days / DAYS_PER_YEAR


def price_option(
    option_type: OptionType,
    market: MarketParameters,
    strike: float,
) -> float:
    """Price an option against a MarketParameters bundle."""
    return bs_price(
        option_type,
        market.spot,
        strike,
        market.time_to_expiry,
        market.risk_free_rate,
        market.volatility,
        market.dividend_yield,
    )


def calculate_greeks(
    option_type: OptionType,
    market: MarketParameters,
    strike: float,
) -> Greeks:
    """Greeks for an option against a MarketParameters bundle."""
    return bs_greeks(
        option_type,
        market.spot,
        strike,
        market.time_to_expiry,
        market.risk_free_rate,
        market.volatility,
        market.dividend_yield,
    )
