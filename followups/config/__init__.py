"""Configuration module."""

from followups.config.logging import configure_logging, get_logger, run_context
from followups.config.settings import Settings, get_settings, reset_settings

__all__ = [
    "Settings",
    "get_settings",
    "reset_settings",
    "configure_logging",
    "get_logger",
    "run_context",
]
