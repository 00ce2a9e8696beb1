"""Common building blocks shared across kvsource."""

from kvsource.common.exceptions import (
    ErrorCode,
    KVSourceError,
    KVSourceValueError,
    configuration_error,
    refresh_error,
    validation_error,
)

__all__ = [
    "ErrorCode",
    "KVSourceError",
    "KVSourceValueError",
    "configuration_error",
    "refresh_error",
    "validation_error",
]
