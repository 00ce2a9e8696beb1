"""JSON logging for kvsource.

Each record is written as one JSON line carrying the refresh id and vault URL
of the refresh that emitted it, plus OpenTelemetry trace ids when a span is
active. ``setup_logging`` installs the formatter through ``dictConfig``.
"""

from __future__ import annotations

import json
import logging
import logging.config
from datetime import datetime, timezone
from typing import Any, Dict

from opentelemetry import trace


_STANDARD_RECORD_KEYS = frozenset(logging.makeLogRecord({}).__dict__) | {"asctime", "message"}

# Correlation fields set by ContextFilter
_CONTEXT_FIELDS = ("sdk_name", "kvsource_version", "environment", "refresh_id", "vault_url")

# Fields passed through ``extra=`` by refresh, scheduling and error logging
_EVENT_FIELDS = (
    "mode",
    "secret_count",
    "secret_key",
    "secret_name",
    "secrets_loaded",
    "duration_seconds",
    "success",
    "error_type",
    "error",
    "error_code",
    "details",
    "status_code",
    "interval_seconds",
    "missed_firings",
)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


class CustomJsonFormatter(logging.Formatter):
    """Render records as one JSON object per line.

    Refresh correlation fields and known event fields are written at the top
    level. Any other ``extra=`` values are grouped under ``extra``. When a
    span is active its trace and span ids are added.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_record: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for key in _CONTEXT_FIELDS + _EVENT_FIELDS:
            value = getattr(record, key, None)
            if value is not None:
                log_record[key] = value

        extra = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _STANDARD_RECORD_KEYS
            and key not in _CONTEXT_FIELDS
            and key not in _EVENT_FIELDS
        }
        if extra:
            log_record["extra"] = extra

        span_context = trace.get_current_span().get_span_context()
        if span_context.is_valid:
            log_record["trace_id"] = format(span_context.trace_id, "032x")
            log_record["span_id"] = format(span_context.span_id, "016x")

        if record.exc_info:
            log_record["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_record, default=str)


def setup_logging(level: str = "INFO", azure_level: str = "WARNING") -> None:
    """Send JSON log lines to stdout.

    Args:
        level: Level for kvsource and the root logger (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        azure_level: Level for the Azure SDK loggers, which log every HTTP
            request at INFO
    """
    config_dict: Dict[str, Any] = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "kvsource_json": {
                "()": "kvsource.logging.logger.CustomJsonFormatter",
            }
        },
        "filters": {
            "kvsource_context": {
                "()": "kvsource.logging.filters.ContextFilter",
            }
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "kvsource_json",
                "filters": ["kvsource_context"],
                "stream": "ext://sys.stdout",
            }
        },
        "loggers": {
            "azure": {"level": azure_level.upper()},
        },
        "root": {
            "level": level.upper(),
            "handlers": ["console"],
        },
    }

    logging.config.dictConfig(config_dict)
