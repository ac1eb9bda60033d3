"""
Engine package - Analysis orchestration, configuration and reporting.
"""

from engine.config import AnalysisConfig
from engine.engine import StrategyAnalyzer, StrategyAnalysis, analysis_to_dict
from engine.explain import RiskExplanation, explain_risk
from engine.logger import StructuredLogger, get_logger


__all__ = [
    'AnalysisConfig',
    'StrategyAnalyzer',
    'StrategyAnalysis',
    'analysis_to_dict',
    'RiskExplanation',
    'explain_risk',
    'StructuredLogger',
    'get_logger',
]
