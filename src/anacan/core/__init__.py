"""Core Anacan utilities.

This module exports configuration and logging helpers for use throughout
the application.
"""

from anacan.core.config import MissingApiKeyError, Settings, get_settings
from anacan.core.logging import (
    bind_correlation_id,
    clear_context,
    configure_logging,
    get_logger,
)

__all__ = [
    "MissingApiKeyError",
    "Settings",
    "get_settings",
    "configure_logging",
    "get_logger",
    "bind_correlation_id",
    "clear_context",
]
