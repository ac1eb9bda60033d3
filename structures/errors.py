"""
Pricing and payoff errors.

All are local validation failures raised before any floating-point work.
None are retryable.
"""


class PricingError(ValueError):
    """Base class for engine validation failures."""
    pass


class InvalidParameter(PricingError):
    """Non-positive spot/strike or otherwise unusable model input."""
    pass


class UndefinedAtExpiration(PricingError):
    """Greeks requested with no time or no volatility left."""
    pass


class EmptyStrategy(PricingError):
    """No legs supplied."""
    pass


class DegenerateRange(PricingError):
    """Price range or point count collapses to fewer than two distinct points."""
    pass
