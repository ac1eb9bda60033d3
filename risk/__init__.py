"""
Risk package - Max profit, max loss and breakeven summary.
"""

from risk.profile import (
    UNLIMITED_THRESHOLD,
    upside_slope,
    critical_prices,
    summarize_risk,
    summarize_curve,
)


__all__ = [
    'UNLIMITED_THRESHOLD',
    'upside_slope',
    'critical_prices',
    'summarize_risk',
    'summarize_curve',
]
