"""
Strategy Analysis Orchestrator.

Runs one full calculation for a leg list:
1. Price every leg at the current market
2. Aggregate the net debit/credit
3. Sample the expiration P&L curve
4. Derive breakevens and the risk profile
5. Compute per-leg and strategy Greeks (when defined)

Each call is independent; the analyzer holds configuration only.
"""

from dataclasses import dataclass
from typing import Optional, Sequence

from data.schemas import MarketParameters, OptionLeg, PLDataPoint, RiskProfile
from engine.config import AnalysisConfig
from engine.logger import StructuredLogger, get_logger
from risk.profile import summarize_risk
from structures.builders import BuilderConfig, build_legs, get_template
from structures.errors import PricingError
from structures.greeks import PositionGreeks, calculate_leg_greeks
from structures.legs import ensure_legs, leg_entry_prices, net_entry_cost
from structures.payoff import generate_payoff_curve


@dataclass(frozen=True)
class StrategyAnalysis:
    """Everything computed for one strategy at one market snapshot."""

    strategy_name: str
    market: MarketParameters
    legs: tuple[OptionLeg, ...]
    entry_prices: tuple[float, ...]

    net_entry_cost: float   # Per share, positive = debit
    net_debit: float        # Cash, positive = debit, negative = credit

    curve: tuple[PLDataPoint, ...]
    risk: RiskProfile

    # None when Greeks are undefined (no time or volatility left)
    leg_greeks: Optional[tuple[PositionGreeks, ...]]
    position_greeks: Optional[PositionGreeks]

    @property
    def is_credit(self) -> bool:
        return self.net_debit < 0


class StrategyAnalyzer:
    """
    Main entry point for pricing and risk analysis of a strategy.

    Coordinates:
    - Leg pricing and aggregation
    - Payoff curve generation
    - Breakeven and risk summary
    - Greeks
    """

    def __init__(
        self,
        config: Optional[AnalysisConfig] = None,
        logger: Optional[StructuredLogger] = None,
    ):
        self.config = config or AnalysisConfig()
        self.logger = logger or get_logger(
            log_dir=self.config.log_directory,
            level=self.config.log_level_value,
        )

    @classmethod
    def from_yaml(cls, path: str = './config/settings.yaml') -> 'StrategyAnalyzer':
        return cls(AnalysisConfig.from_yaml(path))

    @property
    def builder_config(self) -> BuilderConfig:
        return BuilderConfig(
            otm_offset=self.config.otm_offset,
            strike_increment=self.config.strike_increment,
        )

    def analyze(
        self,
        legs: Sequence[OptionLeg],
        market: MarketParameters,
        strategy_name: Optional[str] = None,
    ) -> StrategyAnalysis:
        """
        Analyze a strategy.

        Args:
            legs: Strategy legs (not modified)
            market: Current market parameters
            strategy_name: Display name (defaults to "Custom Strategy")

        Returns:
            StrategyAnalysis

        Raises:
            PricingError: on invalid input; logged and re-raised
        """
        name = strategy_name or "Custom Strategy"
        multiplier = self.config.contract_multiplier

        try:
            legs = ensure_legs(legs)
            entry_prices = leg_entry_prices(legs, market)
            net_cost = net_entry_cost(legs, market, entry_prices)

            curve = generate_payoff_curve(
                legs,
                market,
                point_count=self.config.point_count,
                range_factor=self.config.range_factor,
                multiplier=multiplier,
                entry_prices=entry_prices,
            )
            risk = summarize_risk(
                curve,
                legs,
                market,
                multiplier=multiplier,
                entry_prices=entry_prices,
                breakeven_tolerance=self.config.breakeven_tolerance,
            )

            leg_greeks = None
            position_greeks = None
            if market.time_to_expiry > 0 and market.volatility > 0:
                leg_greeks = tuple(
                    calculate_leg_greeks(leg, market, multiplier) for leg in legs
                )
                position_greeks = PositionGreeks.zero()
                for greeks in leg_greeks:
                    position_greeks = position_greeks + greeks
        except PricingError as e:
            self.logger.log_rejected(
                type(e).__name__, strategy=name, error=str(e), leg_count=len(legs),
            )
            raise

        analysis = StrategyAnalysis(
            strategy_name=name,
            market=market,
            legs=legs,
            entry_prices=entry_prices,
            net_entry_cost=net_cost,
            net_debit=net_cost * multiplier,
            curve=tuple(curve),
            risk=risk,
            leg_greeks=leg_greeks,
            position_greeks=position_greeks,
        )

        self.logger.log_analysis({
            'strategy': name,
            'legs': [leg.description for leg in legs],
            'net_debit': analysis.net_debit,
            'max_profit': risk.max_profit,
            'max_loss': risk.max_loss,
            'breakevens': list(risk.breakevens),
        })
        return analysis

    def analyze_template(
        self,
        template_id: str,
        market: MarketParameters,
    ) -> StrategyAnalysis:
        """Build a catalogue strategy at the current spot and analyze it."""
        template = get_template(template_id)
        legs = build_legs(template, market.spot, self.builder_config)
        return self.analyze(legs, market, strategy_name=template.name)


def analysis_to_dict(analysis: StrategyAnalysis, include_curve: bool = True) -> dict:
    """Convert an analysis to a JSON-ready dict."""
    result = {
        'strategy': analysis.strategy_name,
        'market': analysis.market.model_dump(),
        'legs': [
            {**leg.model_dump(mode='json'), 'entry_price': price}
            for leg, price in zip(analysis.legs, analysis.entry_prices)
        ],
        'net_entry_cost': analysis.net_entry_cost,
        'net_debit': analysis.net_debit,
        'risk': {
            'max_profit': analysis.risk.max_profit,
            'max_loss': analysis.risk.max_loss,
            'breakevens': list(analysis.risk.breakevens),
        },
        'leg_greeks': (
            [g.to_dict() for g in analysis.leg_greeks]
            if analysis.leg_greeks is not None else None
        ),
        'position_greeks': (
            analysis.position_greeks.to_dict()
            if analysis.position_greeks is not None else None
        ),
    }
    if include_curve:
        result['curve'] = [
            {'price': point.price, 'pnl': point.pnl} for point in analysis.curve
        ]
    return result
