"""Shared fixtures for the analyzer tests."""

import pytest

from data.schemas import MarketParameters, OptionLeg, OptionType, PositionSide
from engine.logger import StructuredLogger


@pytest.fixture
def market():
    """S=100, 30 days, 30% vol, 5% rate, no dividend."""
    return MarketParameters(
        spot=100.0,
        time_to_expiry=30 / 365,
        volatility=0.30,
        risk_free_rate=0.05,
    )


@pytest.fixture
def long_call():
    return OptionLeg(option_type=OptionType.CALL, position=PositionSide.LONG, strike=100.0)


@pytest.fixture
def bull_call_spread():
    return (
        OptionLeg(option_type=OptionType.CALL, position=PositionSide.LONG, strike=100.0),
        OptionLeg(option_type=OptionType.CALL, position=PositionSide.SHORT, strike=110.0),
    )


@pytest.fixture
def quiet_logger():
    return StructuredLogger(console=False)
