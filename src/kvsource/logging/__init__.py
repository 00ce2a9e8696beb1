"""Logging infrastructure for kvsource.

This module provides structured logging with JSON output and refresh
context tracking.
"""

from kvsource.logging.filters import (
    ContextFilter,
    clear_refresh_context,
    set_logging_context,
    set_refresh_context,
)
from kvsource.logging.logger import CustomJsonFormatter, get_logger, setup_logging

__all__ = [
    "get_logger",
    "setup_logging",
    "CustomJsonFormatter",
    "ContextFilter",
    "set_logging_context",
    "set_refresh_context",
    "clear_refresh_context",
]
