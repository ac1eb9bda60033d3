"""
Structures package - Option pricing, strategy aggregation and payoff analysis.
"""

from structures.errors import (
    PricingError,
    InvalidParameter,
    UndefinedAtExpiration,
    EmptyStrategy,
    DegenerateRange,
)
from structures.pricing import (
    normal_pdf,
    normal_cdf,
    intrinsic_value,
    bs_price,
    bs_greeks,
    time_to_expiry_years,
    price_option,
    calculate_greeks,
)
from structures.legs import (
    CONTRACT_MULTIPLIER,
    leg_entry_price,
    leg_entry_prices,
    net_entry_cost,
    net_debit,
)
from structures.greeks import (
    PositionGreeks,
    calculate_leg_greeks,
    calculate_strategy_greeks,
)
from structures.payoff import (
    leg_value_at_expiration,
    strategy_pnl_at_expiration,
    price_grid,
    generate_payoff_curve,
    find_breakevens,
)
from structures.builders import (
    BuilderConfig,
    STRATEGY_TEMPLATES,
    resolve_strike,
    build_legs,
    get_template,
    list_templates,
)


__all__ = [
    # Errors
    'PricingError',
    'InvalidParameter',
    'UndefinedAtExpiration',
    'EmptyStrategy',
    'DegenerateRange',
    # Pricing
    'normal_pdf',
    'normal_cdf',
    'intrinsic_value',
    'bs_price',
    'bs_greeks',
    'time_to_expiry_years',
    'price_option',
    'calculate_greeks',
    # Legs
    'CONTRACT_MULTIPLIER',
    'leg_entry_price',
    'leg_entry_prices',
    'net_entry_cost',
    'net_debit',
    # Greeks
    'PositionGreeks',
    'calculate_leg_greeks',
    'calculate_strategy_greeks',
    # Payoff
    'leg_value_at_expiration',
    'strategy_pnl_at_expiration',
    'price_grid',
    'generate_payoff_curve',
    'find_breakevens',
    # Builders
    'BuilderConfig',
    'STRATEGY_TEMPLATES',
    'resolve_strike',
    'build_legs',
    'get_template',
    'list_templates',
]
