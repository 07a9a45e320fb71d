"""
Logging setup for docgate.

Logging is initialised after configuration has been loaded, so the config
module never depends on a configured logger.

Usage:
    from docgate.config.settings import get_config_manager
    from docgate.logging.setup import setup_logging, get_logger

    config_manager = get_config_manager()
    config_manager.load()
    setup_logging(config_manager.logging_config)

    logger = get_logger(__name__)
"""

from __future__ import annotations

import logging
from typing import Any

from docgate.logging.log_manager import LogManager


_logging_configured = False
_log_manager: LogManager | None = None


def setup_logging(logging_config: dict[str, Any]) -> None:
    """
    Initialise logging from the ``logging`` configuration section.

    Calling it twice keeps the first configuration.

    Args:
        logging_config: dictConfig-style dictionary
    """
    global _logging_configured, _log_manager

    if _logging_configured:
        logging.getLogger(__name__).debug(
            "Logging already configured, skipping re-initialization")
        return

    _log_manager = LogManager.get_instance(logging_config)
    _logging_configured = True

    logging.getLogger(__name__).info("Logging system initialized")


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger.

    Before setup_logging() the logger is returned without handlers of its own;
    records propagate to whatever the root logger has once it is configured.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Logger instance
    """
    if _logging_configured and _log_manager is not None:
        return _log_manager.get_logger(name)

    return logging.getLogger(name)


def is_logging_configured() -> bool:
    return _logging_configured


def reset_logging() -> None:
    """Reset logging configuration (tests)."""
    global _logging_configured, _log_manager
    _logging_configured = False
    _log_manager = None
    LogManager.reset_instance()
