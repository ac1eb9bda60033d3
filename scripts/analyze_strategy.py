#!/usr/bin/env python3
"""
Analyze an Option Strategy.

Prices a catalogue strategy or a hand-entered leg list and prints the
analysis as JSON.

Usage:
    python scripts/analyze_strategy.py --template bull-call-spread --spot 100
    python scripts/analyze_strategy.py --leg call:long:100:1 --leg call:short:110:1 \
        --spot 100 --days 30 --vol 30 --rate 5
"""

import argparse
import json
import sys
from pathlib import Path

import yaml
from pydantic import ValidationError

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from data.schemas import MarketParameters, OptionLeg, OptionType, PositionSide
from engine.config import AnalysisConfig
from engine.engine import StrategyAnalyzer, analysis_to_dict
from engine.explain import explain_risk
from engine.logger import get_logger
from structures.builders import list_templates
from structures.errors import PricingError


def parse_leg(text: str) -> OptionLeg:
    """
    Parse TYPE:SIDE[:STRIKE[:QTY]], e.g. call:long:100:1 or stock:long.
    """
    parts = text.split(':')
    if len(parts) < 2:
        raise argparse.ArgumentTypeError(f"Leg must be TYPE:SIDE[:STRIKE[:QTY]], got {text!r}")

    try:
        option_type = OptionType(parts[0].lower())
        position = PositionSide(parts[1].lower())
        strike = float(parts[2]) if len(parts) > 2 and parts[2] else None
        quantity = int(parts[3]) if len(parts) > 3 else 1
        return OptionLeg(
            option_type=option_type,
            position=position,
            strike=strike,
            quantity=quantity,
        )
    except (ValueError, ValidationError) as e:
        raise argparse.ArgumentTypeError(f"Invalid leg {text!r}: {e}") from e


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Price an option strategy and report its risk profile"
    )
    source = parser.add_mutually_exclusive_group()
    source.add_argument(
        "--template",
        help="Catalogue strategy id (see --list)"
    )
    source.add_argument(
        "--leg",
        action="append",
        type=parse_leg,
        help="Leg as TYPE:SIDE[:STRIKE[:QTY]] (repeatable)"
    )
    source.add_argument(
        "--list",
        action="store_true",
        help="List catalogue strategies and exit"
    )
    parser.add_argument("--spot", type=float, default=100.0, help="Underlying price")
    parser.add_argument("--days", type=float, default=30.0, help="Days to expiration")
    parser.add_argument("--vol", type=float, default=30.0, help="Volatility in percent")
    parser.add_argument("--rate", type=float, default=5.0, help="Risk-free rate in percent")
    parser.add_argument("--dividend", type=float, default=0.0, help="Dividend yield in percent")
    parser.add_argument(
        "--config",
        default="./config/settings.yaml",
        help="Path to settings.yaml"
    )
    parser.add_argument(
        "--no-curve",
        action="store_true",
        help="Omit the P&L curve from the output"
    )
    parser.add_argument(
        "--explain",
        action="store_true",
        help="Include plain-language risk explanation"
    )

    args = parser.parse_args(argv)

    if args.list:
        for template in list_templates():
            print(f"{template.id:20s} {template.name:20s} {template.category.value}")
        return 0

    if not args.template and not args.leg:
        parser.error("one of --template, --leg or --list is required")

    analyzer = None
    try:
        analyzer = StrategyAnalyzer(AnalysisConfig.from_yaml(args.config))
        market = MarketParameters.from_ui_inputs(
            stock_price=args.spot,
            days_to_expiration=args.days,
            volatility_pct=args.vol,
            rate_pct=args.rate,
            dividend_pct=args.dividend,
        )
        if args.template:
            analysis = analyzer.analyze_template(args.template, market)
        else:
            analysis = analyzer.analyze(args.leg, market)
    except (PricingError, ValidationError, KeyError, yaml.YAMLError) as e:
        logger = analyzer.logger if analyzer is not None else get_logger()
        logger.error('analysis_failed', error=str(e))
        print(f"Error: {e}", file=sys.stderr)
        return 1

    output = analysis_to_dict(analysis, include_curve=not args.no_curve)
    if args.explain:
        explanation = explain_risk(analysis.risk, market.spot, analysis.strategy_name)
        output['explanation'] = {
            'max_profit': explanation.max_profit,
            'max_loss': explanation.max_loss,
            'breakeven': explanation.breakeven,
            'summary': explanation.summary,
        }

    print(json.dumps(output, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
