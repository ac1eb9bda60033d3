"""
Unit tests for configuration, the analyzer, explanations and logging.
"""

import json
import logging

import pytest

from data.schemas import MarketParameters, OptionLeg, OptionType, PositionSide, RiskProfile
from engine.config import AnalysisConfig
from engine.engine import StrategyAnalyzer, analysis_to_dict
from engine.explain import explain_breakevens, explain_risk
import engine.logger as logger_module
from engine.logger import StructuredLogger, get_logger
from structures.errors import DegenerateRange, EmptyStrategy, InvalidParameter
from structures.legs import net_debit, net_entry_cost


class TestAnalysisConfig:

    def test_defaults(self):
        config = AnalysisConfig()
        assert config.point_count == 101
        assert config.range_factor == 0.5
        assert config.contract_multiplier == 100
        assert config.unlimited_threshold == 1_000_000.0

    def test_missing_file_gives_defaults(self, tmp_path):
        assert AnalysisConfig.from_yaml(str(tmp_path / "missing.yaml")) == AnalysisConfig()

    def test_from_yaml(self, tmp_path):
        path = tmp_path / "settings.yaml"
        path.write_text(
            "contract_multiplier: 10\n"
            "curve:\n"
            "  point_count: 51\n"
            "  range_factor: 0.4\n"
            "builders:\n"
            "  otm_offset: 0.10\n"
        )
        config = AnalysisConfig.from_yaml(str(path))
        assert config.point_count == 51
        assert config.range_factor == 0.4
        assert config.contract_multiplier == 10
        assert config.otm_offset == 0.10
        assert config.breakeven_tolerance == 1e-6

    def test_empty_yaml(self, tmp_path):
        path = tmp_path / "settings.yaml"
        path.write_text("")
        assert AnalysisConfig.from_yaml(str(path)) == AnalysisConfig()

    def test_null_sections_use_defaults(self, tmp_path):
        path = tmp_path / "settings.yaml"
        path.write_text("curve:\nrisk:\nlogging:\n  level: DEBUG\n")
        config = AnalysisConfig.from_yaml(str(path))
        assert config.point_count == 101
        assert config.log_level_value == logging.DEBUG

    def test_unknown_log_level(self):
        with pytest.raises(InvalidParameter):
            AnalysisConfig(log_level="LOUD")

    def test_validation(self):
        with pytest.raises(DegenerateRange):
            AnalysisConfig(point_count=1)
        with pytest.raises(DegenerateRange):
            AnalysisConfig(range_factor=0)
        with pytest.raises(InvalidParameter):
            AnalysisConfig(contract_multiplier=0)


class TestStrategyAnalyzer:

    @pytest.fixture
    def analyzer(self, quiet_logger):
        return StrategyAnalyzer(AnalysisConfig(), logger=quiet_logger)

    def test_bull_call_spread(self, analyzer, market, bull_call_spread):
        analysis = analyzer.analyze(bull_call_spread, market, strategy_name="Bull Call Spread")

        debit = net_debit(bull_call_spread, market)
        assert analysis.net_debit == pytest.approx(debit)
        assert analysis.net_entry_cost == pytest.approx(debit / 100)
        assert not analysis.is_credit
        assert len(analysis.curve) == 101
        assert analysis.risk.max_loss == pytest.approx(debit)
        assert analysis.risk.max_profit == pytest.approx(1000 - debit)
        assert len(analysis.leg_greeks) == 2
        assert analysis.position_greeks.delta == pytest.approx(
            analysis.leg_greeks[0].delta + analysis.leg_greeks[1].delta
        )

    def test_default_name(self, analyzer, market, long_call):
        assert analyzer.analyze([long_call], market).strategy_name == "Custom Strategy"

    def test_greeks_omitted_at_expiration(self, analyzer, long_call):
        expired = MarketParameters(spot=100, time_to_expiry=0, volatility=0.3, risk_free_rate=0.05)
        analysis = analyzer.analyze([long_call], expired)
        assert analysis.leg_greeks is None
        assert analysis.position_greeks is None
        assert analysis.net_debit == 0.0

    def test_negative_dividend_yield(self, analyzer):
        market = MarketParameters(
            spot=100, time_to_expiry=1.0, volatility=0.3,
            risk_free_rate=0.05, dividend_yield=-0.2,
        )
        put = OptionLeg(option_type=OptionType.PUT, position=PositionSide.LONG, strike=200)
        analysis = analyzer.analyze([put], market)
        assert analysis.leg_greeks[0].delta < -100
        assert analysis.position_greeks.delta == pytest.approx(analysis.leg_greeks[0].delta)

    def test_net_entry_cost_matches_aggregator(self, analyzer, market, bull_call_spread):
        analysis = analyzer.analyze(bull_call_spread, market)
        assert analysis.net_entry_cost == net_entry_cost(bull_call_spread, market)

    def test_config_drives_curve(self, quiet_logger, market, long_call):
        analyzer = StrategyAnalyzer(
            AnalysisConfig(point_count=21, range_factor=0.2), logger=quiet_logger
        )
        analysis = analyzer.analyze([long_call], market)
        assert len(analysis.curve) == 21
        assert analysis.curve[0].price == pytest.approx(80.0)

    def test_empty_strategy_propagates(self, analyzer, market):
        with pytest.raises(EmptyStrategy):
            analyzer.analyze([], market)

    def test_analyze_template(self, analyzer, market):
        analysis = analyzer.analyze_template("iron-condor", market)
        assert analysis.strategy_name == "Iron Condor"
        assert analysis.is_credit
        assert analysis.risk.max_loss is not None
        assert analysis.risk.max_profit is not None

    def test_naked_short_call_template_free(self, analyzer, market):
        leg = OptionLeg(option_type=OptionType.CALL, position=PositionSide.SHORT, strike=100)
        assert analyzer.analyze([leg], market).risk.max_loss is None

    def test_analysis_to_dict_is_json_ready(self, analyzer, market):
        analysis = analyzer.analyze_template("covered-call", market)
        data = analysis_to_dict(analysis)
        encoded = json.loads(json.dumps(data))

        assert encoded['strategy'] == "Covered Call"
        assert encoded['legs'][0]['option_type'] == "stock"
        assert encoded['legs'][0]['entry_price'] == 100.0
        assert len(encoded['curve']) == 101
        assert encoded['risk']['max_loss'] == pytest.approx(analysis.risk.max_loss)

        assert 'curve' not in analysis_to_dict(analysis, include_curve=False)


class TestExplainRisk:

    def test_defined_risk(self):
        profile = RiskProfile(max_profit=650.0, max_loss=350.0, breakevens=(103.5,))
        explanation = explain_risk(profile, 100.0, "Bull Call Spread")
        assert "$650.00" in explanation.max_profit
        assert "$350.00" in explanation.max_loss
        assert "above $103.50" in explanation.breakeven
        assert "Bull Call Spread" in explanation.as_markdown()

    def test_unlimited(self):
        profile = RiskProfile(max_profit=None, max_loss=None, breakevens=())
        explanation = explain_risk(profile, 100.0)
        assert "unlimited" in explanation.max_profit
        assert "unlimited" in explanation.max_loss
        assert "not profitable" in explanation.breakeven
        assert "Unlimited risk" in explanation.summary

    def test_breakeven_below_spot(self):
        profile = RiskProfile(max_profit=500.0, max_loss=300.0, breakevens=(97.0,))
        assert "below $97.00" in explain_breakevens(profile, 100.0)

    def test_two_breakevens(self):
        profile = RiskProfile(max_profit=None, max_loss=700.0, breakevens=(106.85, 93.15))
        text = explain_breakevens(profile, 100.0)
        assert text.index("$93.15") < text.index("$106.85")


class TestStructuredLogger:

    def test_writes_json_lines(self, tmp_path):
        logger = StructuredLogger(log_dir=str(tmp_path), level=logging.INFO, console=False)
        logger.log_analysis({'strategy': 'Long Call', 'max_profit': None})
        for handler in logger.logger.handlers:
            handler.flush()

        files = list(tmp_path.glob("analysis_*.jsonl"))
        assert len(files) == 1
        record = json.loads(files[0].read_text().strip().splitlines()[-1])
        assert record['event'] == 'strategy_analyzed'
        assert record['level'] == 'INFO'
        assert record['data'] == {'strategy': 'Long Call', 'max_profit': None}

    def test_serializes_models(self, tmp_path):
        logger = StructuredLogger(log_dir=str(tmp_path), console=False)
        logger.info('market', market=MarketParameters(
            spot=100, time_to_expiry=0.1, volatility=0.2, risk_free_rate=0.05,
        ))
        for handler in logger.logger.handlers:
            handler.flush()

        record = json.loads(next(tmp_path.glob("*.jsonl")).read_text().strip())
        assert record['data']['market']['spot'] == 100

    def test_serializes_enums_and_dates(self, tmp_path):
        from datetime import date

        logger = StructuredLogger(log_dir=str(tmp_path), console=False)
        logger.info('leg', side=PositionSide.SHORT, expires=date(2025, 3, 21), strikes=(100, 110))
        for handler in logger.logger.handlers:
            handler.flush()

        record = json.loads(next(tmp_path.glob("*.jsonl")).read_text().strip())
        assert record['data'] == {'side': 'short', 'expires': '2025-03-21', 'strikes': [100, 110]}


class TestGetLogger:

    @pytest.fixture(autouse=True)
    def fresh_global(self, monkeypatch):
        monkeypatch.setattr(logger_module, '_logger', None)

    def test_reuses_instance_for_same_settings(self):
        assert get_logger() is get_logger()

    def test_new_settings_replace_instance(self, tmp_path):
        console_only = get_logger()
        with_file = get_logger(log_dir=str(tmp_path), level=logging.DEBUG)

        assert with_file is not console_only
        assert with_file.log_dir == tmp_path
        assert with_file.level == logging.DEBUG

    def test_analyzer_writes_configured_log_file(self, tmp_path, market, long_call):
        StrategyAnalyzer(AnalysisConfig())
        analyzer = StrategyAnalyzer(AnalysisConfig(log_directory=str(tmp_path)))
        analyzer.analyze([long_call], market)
        for handler in analyzer.logger.logger.handlers:
            handler.flush()

        lines = next(tmp_path.glob("analysis_*.jsonl")).read_text().strip().splitlines()
        assert json.loads(lines[-1])['event'] == 'strategy_analyzed'
