"""
Data Schemas - Pydantic models for all data structures.

These provide type safety, validation, and serialization for the entire system.
Every model is frozen: an edit produces a new object, never a mutation.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


# ============================================================================
# Enums
# ============================================================================

class OptionType(str, Enum):
    """Leg instrument: call, put, or the underlying stock itself."""
    CALL = "call"
    PUT = "put"
    STOCK = "stock"

    @property
    def is_option(self) -> bool:
        return self is not OptionType.STOCK


class PositionSide(str, Enum):
    """Position direction."""
    LONG = "long"
    SHORT = "short"

    @property
    def sign(self) -> int:
        """+1 for long, -1 for short."""
        return 1 if self is PositionSide.LONG else -1


class StrikeRelation(str, Enum):
    """Strike placement relative to spot, as used by strategy templates."""
    AT_THE_MONEY = "ATM"
    IN_THE_MONEY = "ITM"
    OUT_OF_THE_MONEY = "OTM"
    CUSTOM = "custom"


class StrategyCategory(str, Enum):
    """Strategy catalogue categories."""
    BULLISH = "bullish"
    BEARISH = "bearish"
    NEUTRAL = "neutral"
    VOLATILE = "volatile"
    INCOME = "income"
    HEDGING = "hedging"


# ============================================================================
# Market Data Models
# ============================================================================

class MarketParameters(BaseModel):
    """Market inputs shared by every leg of one calculation."""
    model_config = ConfigDict(frozen=True)

    spot: float = Field(gt=0, allow_inf_nan=False)
    time_to_expiry: float = Field(ge=0, allow_inf_nan=False)  # Years
    volatility: float = Field(ge=0, allow_inf_nan=False)      # Annualized, 0.30 = 30%
    risk_free_rate: float = Field(allow_inf_nan=False)        # Annualized, 0.05 = 5%
    dividend_yield: float = Field(default=0.0, allow_inf_nan=False)  # Continuous

    @classmethod
    def from_ui_inputs(
        cls,
        stock_price: float,
        days_to_expiration: float,
        volatility_pct: float,
        rate_pct: float,
        dividend_pct: float = 0.0,
    ) -> 'MarketParameters':
        """
        Build parameters from calculator-style inputs.

        Days are converted with a 365-day year; percentages are divided by 100.
        """
        return cls(
            spot=stock_price,
            time_to_expiry=days_to_expiration / 365.0,
            volatility=volatility_pct / 100.0,
            risk_free_rate=rate_pct / 100.0,
            dividend_yield=dividend_pct / 100.0,
        )

    def with_spot(self, spot: float) -> 'MarketParameters':
        """Return a copy with a new spot price (e.g. a freshly fetched quote)."""
        return MarketParameters(**{**self.model_dump(), 'spot': spot})


class Greeks(BaseModel):
    """Option Greeks for a single contract (per share)."""
    model_config = ConfigDict(frozen=True)

    delta: float  # Within +/- e^(-qT); +/-1 without a dividend yield
    gamma: float = Field(ge=0)
    theta: float  # Per calendar day
    vega: float = Field(ge=0)  # Per 1 vol point
    rho: float    # Per 1 rate point


# ============================================================================
# Strategy Models
# ============================================================================

class OptionLeg(BaseModel):
    """
    One position within a strategy.

    Quantity is in contracts of 100 shares. A stock leg's quantity is in
    100-share lots so the same contract multiplier applies to every leg.
    """
    model_config = ConfigDict(frozen=True)

    option_type: OptionType
    position: PositionSide = PositionSide.LONG
    strike: Optional[float] = Field(default=None, allow_inf_nan=False, validate_default=True)
    quantity: int = Field(default=1, ge=1)
    expiration_label: str = ""

    @field_validator('strike')
    @classmethod
    def strike_positive_for_options(cls, v, info):
        option_type = info.data.get('option_type')
        if option_type is not None and option_type != OptionType.STOCK:
            if v is None or v <= 0:
                raise ValueError('option legs require a strike > 0')
        elif v is not None and v <= 0:
            raise ValueError('strike must be > 0 when given')
        return v

    @property
    def sign(self) -> int:
        return self.position.sign

    @property
    def description(self) -> str:
        """Short human label, e.g. 'Long 1x 100 call'."""
        side = self.position.value.capitalize()
        if self.option_type == OptionType.STOCK:
            return f"{side} {self.quantity * 100} shares"
        return f"{side} {self.quantity}x {self.strike:g} {self.option_type.value}"


class PLDataPoint(BaseModel):
    """Profit/loss of a strategy at one underlying price at expiration."""
    model_config = ConfigDict(frozen=True)

    price: float = Field(ge=0)
    pnl: float


class RiskProfile(BaseModel):
    """
    Risk and reward of a strategy.

    max_profit / max_loss are None when unlimited. max_loss is a positive
    magnitude (money lost in the worst case).
    """
    model_config = ConfigDict(frozen=True)

    max_profit: Optional[float] = None
    max_loss: Optional[float] = None
    breakevens: tuple[float, ...] = ()

    @property
    def has_unlimited_profit(self) -> bool:
        return self.max_profit is None

    @property
    def has_unlimited_risk(self) -> bool:
        return self.max_loss is None


class StrategyComponent(BaseModel):
    """Template leg: strike expressed relative to spot instead of a price."""
    model_config = ConfigDict(frozen=True)

    option_type: OptionType
    position: PositionSide
    strike_relation: StrikeRelation = StrikeRelation.AT_THE_MONEY
    offset_steps: int = Field(default=1, ge=1)  # How far ITM/OTM, in offset units
    quantity: int = Field(default=1, ge=1)  # Contracts, or shares for stock
    expiration: str = "30 days"
    custom_strike: Optional[float] = Field(default=None, gt=0)


class StrategyTemplate(BaseModel):
    """Catalogue entry describing a named multi-leg strategy."""
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    category: StrategyCategory
    short_description: str = ""
    components: tuple[StrategyComponent, ...]

    @property
    def is_multi_leg(self) -> bool:
        return len(self.components) > 1
