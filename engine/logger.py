"""
Structured JSON Logging.

Provides structured logging for analysis runs.
"""

import json
import logging
from datetime import date, datetime
from enum import Enum
from pathlib import Path
from typing import Any, Optional


LOGGER_NAME = "strategy_analyzer"


class StructuredLogger:
    """
    Structured JSON logger for the analyzer.

    Logs to the console and, when a log directory is given, to a daily
    JSON-lines file.
    """

    def __init__(
        self,
        log_dir: Optional[str] = None,
        level: int = logging.INFO,
        console: bool = True,
    ):
        self.log_dir = Path(log_dir) if log_dir else None
        self.level = level
        self.console = console

        # Set up logger
        self.logger = logging.getLogger(LOGGER_NAME)
        self.logger.setLevel(level)
        for handler in list(self.logger.handlers):
            handler.close()
        self.logger.handlers = []  # Clear existing handlers

        if self.log_dir is not None:
            self.log_dir.mkdir(parents=True, exist_ok=True)
            self._setup_file_handler()

        if console:
            console_handler = logging.StreamHandler()
            console_handler.setLevel(level)
            console_handler.setFormatter(logging.Formatter(
                '%(asctime)s - %(levelname)s - %(message)s'
            ))
            self.logger.addHandler(console_handler)

    def _setup_file_handler(self):
        """Set up file handler for today's log."""
        today = date.today()
        log_file = self.log_dir / f"analysis_{today.isoformat()}.jsonl"

        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(self.level)
        file_handler.setFormatter(logging.Formatter('%(message)s'))
        self.logger.addHandler(file_handler)

    def _serialize(self, obj: Any) -> Any:
        """Serialize object for JSON."""
        if isinstance(obj, (datetime, date)):
            return obj.isoformat()
        elif isinstance(obj, Enum):
            return obj.value
        elif hasattr(obj, 'model_dump'):
            return obj.model_dump(mode='json')
        elif isinstance(obj, dict):
            return {k: self._serialize(v) for k, v in obj.items()}
        elif isinstance(obj, (list, tuple)):
            return [self._serialize(v) for v in obj]
        return obj

    def _log(self, level: int, event: str, data: Optional[dict] = None):
        """Internal log method."""
        record = {
            'timestamp': datetime.now().isoformat(),
            'level': logging.getLevelName(level),
            'event': event,
        }

        if data:
            record['data'] = self._serialize(data)

        self.logger.log(level, json.dumps(record, default=str))

    # Public logging methods

    def debug(self, event: str, **data):
        """Log debug message."""
        self._log(logging.DEBUG, event, data if data else None)

    def info(self, event: str, **data):
        """Log info message."""
        self._log(logging.INFO, event, data if data else None)

    def warning(self, event: str, **data):
        """Log warning message."""
        self._log(logging.WARNING, event, data if data else None)

    def error(self, event: str, **data):
        """Log error message."""
        self._log(logging.ERROR, event, data if data else None)

    # Specialized log methods

    def log_analysis(self, analysis_data: dict):
        """Log a completed strategy analysis."""
        self.info('strategy_analyzed', **analysis_data)

    def log_rejected(self, reason: str, **data):
        """Log a calculation rejected by validation."""
        self.warning('analysis_rejected', reason=reason, **data)


# Global logger instance
_logger: Optional[StructuredLogger] = None


def get_logger(
    log_dir: Optional[str] = None,
    level: int = logging.INFO,
) -> StructuredLogger:
    """
    Get or create the global logger instance.

    A call with a different log_dir or level replaces the instance, so the
    most recent settings win.
    """
    global _logger

    wanted_dir = Path(log_dir) if log_dir else None
    if _logger is None or _logger.log_dir != wanted_dir or _logger.level != level:
        _logger = StructuredLogger(log_dir=log_dir, level=level)

    return _logger
