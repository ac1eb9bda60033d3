"""
Strategy Builders.

Turns catalogue templates (strikes relative to spot) into concrete legs,
and holds the built-in strategy catalogue.

Strike placement follows the calculator convention:
- ATM: spot rounded to the strike increment
- OTM: calls above spot, puts below, by otm_offset per step
- ITM: the mirror image
"""

from dataclasses import dataclass
from typing import Optional

from data.schemas import (
    OptionLeg,
    OptionType,
    PositionSide,
    StrategyCategory,
    StrategyComponent,
    StrategyTemplate,
    StrikeRelation,
)
from structures.errors import InvalidParameter
from structures.legs import CONTRACT_MULTIPLIER


@dataclass
class BuilderConfig:
    """Configuration for template leg building."""

    otm_offset: float = 0.05       # 5% of spot per step
    strike_increment: float = 1.0  # Strikes rounded to whole dollars


def _round_strike(value: float, increment: float) -> float:
    rounded = round(value / increment) * increment
    # Very low-priced underlyings can round to zero
    return rounded if rounded > 0 else value


def resolve_strike(
    component: StrategyComponent,
    spot: float,
    config: Optional[BuilderConfig] = None,
) -> float:
    """
    Strike price for a template component at a given spot.

    Args:
        component: Template leg
        spot: Current underlying price
        config: Builder configuration

    Returns:
        Concrete strike price
    """
    if config is None:
        config = BuilderConfig()

    relation = component.strike_relation
    if relation == StrikeRelation.CUSTOM:
        if component.custom_strike is None:
            raise InvalidParameter("Custom strike relation needs custom_strike")
        return component.custom_strike
    if relation == StrikeRelation.AT_THE_MONEY:
        return _round_strike(spot, config.strike_increment)

    offset = config.otm_offset * component.offset_steps
    above = component.option_type == OptionType.CALL
    if relation == StrikeRelation.IN_THE_MONEY:
        above = not above
    factor = 1 + offset if above else 1 - offset
    return _round_strike(spot * factor, config.strike_increment)


def build_legs(
    template: StrategyTemplate,
    spot: float,
    config: Optional[BuilderConfig] = None,
) -> tuple[OptionLeg, ...]:
    """
    Build concrete legs for a template.

    Stock components are quoted in shares and become 100-share lots.

    Args:
        template: Strategy template
        spot: Current underlying price
        config: Builder configuration

    Returns:
        Legs in template order
    """
    if spot <= 0:
        raise InvalidParameter(f"spot must be > 0, got {spot}")

    legs = []
    for component in template.components:
        if component.option_type == OptionType.STOCK:
            lots = max(1, round(component.quantity / CONTRACT_MULTIPLIER))
            legs.append(OptionLeg(
                option_type=OptionType.STOCK,
                position=component.position,
                quantity=lots,
                expiration_label=component.expiration,
            ))
            continue

        legs.append(OptionLeg(
            option_type=component.option_type,
            position=component.position,
            strike=resolve_strike(component, spot, config),
            quantity=component.quantity,
            expiration_label=component.expiration,
        ))
    return tuple(legs)


# ============================================================================
# Built-in Catalogue
# ============================================================================

def _leg(option_type, position, relation=StrikeRelation.AT_THE_MONEY, steps=1, quantity=1):
    return StrategyComponent(
        option_type=option_type,
        position=position,
        strike_relation=relation,
        offset_steps=steps,
        quantity=quantity,
        expiration="Current" if option_type == OptionType.STOCK else "30 days",
    )


CALL, PUT, STOCK = OptionType.CALL, OptionType.PUT, OptionType.STOCK
LONG, SHORT = PositionSide.LONG, PositionSide.SHORT
ATM = StrikeRelation.AT_THE_MONEY
ITM = StrikeRelation.IN_THE_MONEY
OTM = StrikeRelation.OUT_OF_THE_MONEY


STRATEGY_TEMPLATES: dict[str, StrategyTemplate] = {
    t.id: t for t in [
        StrategyTemplate(
            id="long-call",
            name="Long Call",
            category=StrategyCategory.BULLISH,
            short_description="Buy a call to profit from a rise in the stock.",
            components=(_leg(CALL, LONG),),
        ),
        StrategyTemplate(
            id="long-put",
            name="Long Put",
            category=StrategyCategory.BEARISH,
            short_description="Buy a put to profit from a fall in the stock.",
            components=(_leg(PUT, LONG),),
        ),
        StrategyTemplate(
            id="covered-call",
            name="Covered Call",
            category=StrategyCategory.INCOME,
            short_description="Own shares and sell an out-of-the-money call against them.",
            components=(
                _leg(STOCK, LONG, quantity=100),
                _leg(CALL, SHORT, OTM),
            ),
        ),
        StrategyTemplate(
            id="cash-secured-put",
            name="Cash-Secured Put",
            category=StrategyCategory.INCOME,
            short_description="Sell an out-of-the-money put, holding cash for assignment.",
            components=(_leg(PUT, SHORT, OTM),),
        ),
        StrategyTemplate(
            id="bull-call-spread",
            name="Bull Call Spread",
            category=StrategyCategory.BULLISH,
            short_description="Buy a call and sell a higher-strike call.",
            components=(
                _leg(CALL, LONG),
                _leg(CALL, SHORT, OTM),
            ),
        ),
        StrategyTemplate(
            id="bear-put-spread",
            name="Bear Put Spread",
            category=StrategyCategory.BEARISH,
            short_description="Buy a put and sell a lower-strike put.",
            components=(
                _leg(PUT, LONG),
                _leg(PUT, SHORT, OTM),
            ),
        ),
        StrategyTemplate(
            id="iron-condor",
            name="Iron Condor",
            category=StrategyCategory.NEUTRAL,
            short_description="Sell a put spread and a call spread around the current price.",
            components=(
                _leg(PUT, LONG, OTM, steps=2),
                _leg(PUT, SHORT, OTM),
                _leg(CALL, SHORT, OTM),
                _leg(CALL, LONG, OTM, steps=2),
            ),
        ),
        StrategyTemplate(
            id="straddle",
            name="Long Straddle",
            category=StrategyCategory.VOLATILE,
            short_description="Buy a call and a put at the same strike.",
            components=(
                _leg(CALL, LONG),
                _leg(PUT, LONG),
            ),
        ),
        StrategyTemplate(
            id="strangle",
            name="Long Strangle",
            category=StrategyCategory.VOLATILE,
            short_description="Buy an out-of-the-money call and put.",
            components=(
                _leg(CALL, LONG, OTM),
                _leg(PUT, LONG, OTM),
            ),
        ),
        StrategyTemplate(
            id="butterfly-spread",
            name="Butterfly Spread",
            category=StrategyCategory.NEUTRAL,
            short_description="Long the wings, short two calls at the middle strike.",
            components=(
                _leg(CALL, LONG, OTM),
                _leg(CALL, SHORT, ATM, quantity=2),
                _leg(CALL, LONG, ITM),
            ),
        ),
        StrategyTemplate(
            id="protective-put",
            name="Protective Put",
            category=StrategyCategory.HEDGING,
            short_description="Own shares and buy a put as insurance.",
            components=(
                _leg(STOCK, LONG, quantity=100),
                _leg(PUT, LONG),
            ),
        ),
        StrategyTemplate(
            id="iron-butterfly",
            name="Iron Butterfly",
            category=StrategyCategory.NEUTRAL,
            short_description="Sell an at-the-money straddle and buy protective wings.",
            components=(
                _leg(PUT, LONG, OTM),
                _leg(PUT, SHORT),
                _leg(CALL, SHORT),
                _leg(CALL, LONG, OTM),
            ),
        ),
    ]
}


def get_template(template_id: str) -> StrategyTemplate:
    """Look up a catalogue template. Unknown ids raise KeyError."""
    try:
        return STRATEGY_TEMPLATES[template_id]
    except KeyError:
        raise KeyError(f"Unknown strategy template: {template_id}") from None


def list_templates(category: Optional[StrategyCategory] = None) -> list[StrategyTemplate]:
    """Catalogue templates, optionally filtered by category."""
    return [
        t for t in STRATEGY_TEMPLATES.values()
        if category is None or t.category == category
    ]
