"""
Log manager for docgate.

Holds the process-wide logging configuration. The ``logging`` section of the
YAML configuration is handed to ``logging.config.dictConfig`` once; any file
handler directory is created first.
"""

from __future__ import annotations

import logging
import logging.config
import os


class LogManager:
    """
    Singleton that applies the logging configuration and hands out loggers.

    Attributes:
        _instance (LogManager | None): Singleton instance
        logger_settings (dict): dictConfig-style logging configuration
    """

    _instance: LogManager | None = None

    def __init__(self, logger_settings: dict | None):
        """
        Apply the logging settings.

        Args:
            logger_settings: dictConfig-style dictionary (may be empty)
        """
        self.logger_settings = dict(logger_settings or {})
        if not self._has_handlers():
            return

        self.logger_settings.setdefault('version', 1)

        for handler in self.logger_settings.get('handlers', {}).values():
            log_path = handler.get('filename') if isinstance(
                handler, dict) else None
            if log_path and os.path.dirname(log_path):
                os.makedirs(os.path.dirname(log_path), exist_ok=True)

        try:
            logging.config.dictConfig(self.logger_settings)
        except ValueError as e:
            logging.basicConfig(level=logging.INFO)
            logging.warning(
                f"Failed to configure logging with provided settings: {e}")

    def _has_handlers(self) -> bool:
        return bool(self.logger_settings.get('handlers'))

    @classmethod
    def get_instance(cls, logger_settings: dict | None = None) -> LogManager:
        """Return the singleton, creating it from ``logger_settings`` on first use."""
        if cls._instance is None:
            cls._instance = cls(logger_settings)
        return cls._instance

    @classmethod
    def reset_instance(cls) -> None:
        """Forget the singleton (tests)."""
        cls._instance = None

    def get_logger(self, name: str) -> logging.Logger:
        return logging.getLogger(name)
