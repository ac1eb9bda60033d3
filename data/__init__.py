"""
Data package - Value types shared by pricing, payoff and risk.
"""

from data.schemas import (
    OptionType,
    PositionSide,
    StrikeRelation,
    StrategyCategory,
    MarketParameters,
    Greeks,
    OptionLeg,
    PLDataPoint,
    RiskProfile,
    StrategyComponent,
    StrategyTemplate,
)


__all__ = [
    'OptionType',
    'PositionSide',
    'StrikeRelation',
    'StrategyCategory',
    'MarketParameters',
    'Greeks',
    'OptionLeg',
    'PLDataPoint',
    'RiskProfile',
    'StrategyComponent',
    'StrategyTemplate',
]
