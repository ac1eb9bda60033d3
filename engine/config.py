"""
Analysis Configuration.

Defaults for curve sampling, contract size and risk classification,
optionally overridden from config/settings.yaml.
"""

import logging
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Optional

import yaml

from structures.errors import DegenerateRange, InvalidParameter


DEFAULT_CONFIG_PATH = './config/settings.yaml'


@dataclass
class AnalysisConfig:
    """Configuration for one strategy analysis."""

    # Payoff curve sampling
    point_count: int = 101
    range_factor: float = 0.5          # Curve spans spot * (1 +/- range_factor)

    # Contract size
    contract_multiplier: int = 100     # Shares per contract

    # Risk summary
    breakeven_tolerance: float = 1e-6
    unlimited_threshold: float = 1_000_000.0  # Curve-only heuristic

    # Template building
    otm_offset: float = 0.05
    strike_increment: float = 1.0

    # Logging
    log_directory: Optional[str] = None  # None = console only
    log_level: str = "INFO"

    def __post_init__(self):
        """Validate config on creation."""
        if self.point_count < 2:
            raise DegenerateRange(f"point_count must be >= 2, got {self.point_count}")
        if self.range_factor <= 0:
            raise DegenerateRange(f"range_factor must be > 0, got {self.range_factor}")
        if self.contract_multiplier <= 0:
            raise InvalidParameter(
                f"contract_multiplier must be > 0, got {self.contract_multiplier}"
            )
        if self.otm_offset <= 0 or self.strike_increment <= 0:
            raise InvalidParameter("otm_offset and strike_increment must be > 0")
        if not isinstance(logging.getLevelName(str(self.log_level).upper()), int):
            raise InvalidParameter(f"unknown log_level {self.log_level!r}")

    @classmethod
    def from_dict(cls, config: dict[str, Any]) -> 'AnalysisConfig':
        """Build from a settings dict laid out like settings.yaml."""
        curve = config.get('curve') or {}
        risk = config.get('risk') or {}
        builders = config.get('builders') or {}
        logging_config = config.get('logging') or {}

        return cls(
            point_count=curve.get('point_count', 101),
            range_factor=curve.get('range_factor', 0.5),
            contract_multiplier=config.get('contract_multiplier', 100),
            breakeven_tolerance=risk.get('breakeven_tolerance', 1e-6),
            unlimited_threshold=risk.get('unlimited_threshold', 1_000_000.0),
            otm_offset=builders.get('otm_offset', 0.05),
            strike_increment=builders.get('strike_increment', 1.0),
            log_directory=logging_config.get('log_directory'),
            log_level=logging_config.get('level', 'INFO'),
        )

    @classmethod
    def from_yaml(cls, path: str = DEFAULT_CONFIG_PATH) -> 'AnalysisConfig':
        """Load from YAML config. A missing file gives the defaults."""
        config_path = Path(path)
        if not config_path.exists():
            return cls()

        with open(config_path, 'r') as f:
            config = yaml.safe_load(f) or {}

        return cls.from_dict(config)

    @property
    def log_level_value(self) -> int:
        """Numeric logging level for log_level."""
        return logging.getLevelName(self.log_level.upper())

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
