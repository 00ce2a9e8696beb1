from enum import Enum
from typing import Any, Dict, Optional


class ErrorCode(Enum):
    """Standard error codes for kvsource operations.

    Error codes categorize failures without a dedicated exception class per
    failure mode. Each category has its own number range.

    Attributes:
        CONFIG_*: Configuration-related errors (1xxx)
        INVALID_ARGUMENT: Input validation errors (2xxx)
        REFRESH_*: Snapshot refresh errors (8xxx)
    """
    # Configuration errors (1xxx)
    CONFIG_ERROR = "CONFIG_001"
    CONFIG_MISSING = "CONFIG_002"

    # Validation errors (2xxx)
    INVALID_ARGUMENT = "VALIDATION_002"

    # Refresh errors (8xxx)
    REFRESH_ERROR = "REFRESH_001"


class KVSourceError(Exception):
    """Base exception for all kvsource errors.

    A single exception class carrying an error code is used instead of a
    hierarchy of specific exception classes.

    Attributes:
        message: Error message
        error_code: Error code from ErrorCode enum
        details: Additional error details
        cause: Optional underlying exception
    """

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.REFRESH_ERROR,
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
    ):
        """Initialize kvsource error.

        Args:
            message: Error message
            error_code: Error code from ErrorCode enum
            details: Additional error details
            cause: Optional underlying exception
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.cause = cause

        # Lazy import to avoid circular dependency
        from kvsource.logging import get_logger
        logger = get_logger(__name__)
        logger.error(
            message,
            extra={
                "error_code": error_code.value,
                "details": self.details,
            },
            exc_info=cause if cause is not None else None,
        )

    def __str__(self) -> str:
        """String representation of the error."""
        msg = f"[{self.error_code.value}] {self.message}"
        if self.cause:
            msg = f"{msg} (caused by: {type(self.cause).__name__}: {str(self.cause)})"
        return msg

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for serialization."""
        return {
            "type": self.__class__.__name__,
            "message": self.message,
            "error_code": self.error_code.value,
            "error_name": self.error_code.name,
            "details": self.details,
        }


class KVSourceValueError(KVSourceError, ValueError):
    """Precondition failure on a caller-supplied argument."""


def configuration_error(
    message: str,
    config_key: Optional[str] = None,
    **kwargs
) -> KVSourceError:
    """Create a configuration error.

    Args:
        message: Error message
        config_key: Configuration key that caused the error
        **kwargs: Additional error details

    Returns:
        KVSourceError with CONFIG_ERROR code
    """
    details = kwargs.get('details', {})
    if config_key:
        details["config_key"] = config_key

    return KVSourceError(
        message=message,
        error_code=kwargs.pop('error_code', ErrorCode.CONFIG_ERROR),
        details=details,
        **{k: v for k, v in kwargs.items() if k != 'details'}
    )


def validation_error(
    message: str,
    field: Optional[str] = None,
    value: Any = None,
    **kwargs
) -> KVSourceValueError:
    """Create a validation error.

    The returned exception is also a ``ValueError`` so callers that guard
    arguments with ``except ValueError`` keep working.

    Args:
        message: Error message
        field: Field that failed validation
        value: Invalid value
        **kwargs: Additional error details

    Returns:
        KVSourceValueError with INVALID_ARGUMENT code
    """
    details = kwargs.get('details', {})
    if field:
        details["field"] = field
    if value is not None:
        details["value"] = repr(value)

    return KVSourceValueError(
        message=message,
        error_code=ErrorCode.INVALID_ARGUMENT,
        details=details,
        **{k: v for k, v in kwargs.items() if k != 'details'}
    )


def refresh_error(
    original_error: Exception,
    mode: Optional[str] = None,
    secret_name: Optional[str] = None,
    **kwargs
) -> KVSourceError:
    """Create a refresh error.

    Args:
        original_error: The underlying exception raised by the vault client
        mode: Refresh mode that was running (enumerate/targeted)
        secret_name: Secret being fetched when the failure occurred
        **kwargs: Additional error details

    Returns:
        KVSourceError with REFRESH_ERROR code
    """
    details = kwargs.get('details', {})
    if mode:
        details["mode"] = mode
    if secret_name:
        details["secret_name"] = secret_name

    return KVSourceError(
        message=f"Key Vault refresh failed: {str(original_error)}",
        error_code=ErrorCode.REFRESH_ERROR,
        details=details,
        cause=original_error,
        **{k: v for k, v in kwargs.items() if k not in ['details', 'cause']}
    )
