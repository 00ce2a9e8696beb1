"""Logging filters for context injection.

This module provides filters that inject context variables into log records,
so log lines emitted during one refresh cycle can be correlated.
"""

from __future__ import annotations

import logging
from contextvars import ContextVar
from typing import Any, Dict, Optional
from kvsource.__version__ import __version__

refresh_id_var: ContextVar[Optional[str]] = ContextVar("refresh_id", default=None)
vault_url_var: ContextVar[Optional[str]] = ContextVar("vault_url", default=None)

_static_context: Dict[str, Any] = {}


class ContextFilter(logging.Filter):
    """Logging filter that adds context variables to log records.

    Static context (environment and extra fields set once at startup) and
    per-refresh context (refresh id, vault url) are copied onto each record.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        """Add context variables to the log record.

        Args:
            record: Log record to enhance

        Returns:
            Always True (doesn't filter out any records)
        """
        for key, value in _static_context.items():
            setattr(record, key, value)

        setattr(record, "refresh_id", refresh_id_var.get())
        setattr(record, "vault_url", vault_url_var.get())
        setattr(record, "sdk_name", "kvsource")
        setattr(record, "kvsource_version", __version__)

        return True


def set_logging_context(
    environment: Optional[str] = None,
    extra: Optional[Dict[str, Any]] = None,
) -> None:
    """Replace the static context attached to every record."""
    _static_context.clear()
    if environment is not None:
        _static_context["environment"] = environment
    if extra:
        _static_context.update(extra)


def set_refresh_context(
    refresh_id: Optional[str] = None,
    vault_url: Optional[str] = None,
) -> None:
    """Set refresh context variables."""
    if refresh_id is not None:
        refresh_id_var.set(refresh_id)
    if vault_url is not None:
        vault_url_var.set(vault_url)


def clear_refresh_context() -> None:
    """Clear all refresh context variables."""
    refresh_id_var.set(None)
    vault_url_var.set(None)
