# aurora/config/__init__.py
"""
Configuration module for Aurora Risk Lab

Provides centralized configuration management using Pydantic settings
and loguru-based logging setup.

Usage:
    from aurora.config import configure_logging, settings

    configure_logging()
    print(settings.COINGECKO_API_URL)
"""

from aurora.config.logging_config import (
    configure_logging,
    log_backtest_run,
    setup_logging,
    timed_operation,
)
from aurora.config.settings import Settings, get_settings, settings

__all__ = [
    # Settings
    "Settings",
    "settings",
    "get_settings",
    # Logging
    "configure_logging",
    "setup_logging",
    "timed_operation",
    "log_backtest_run",
]
