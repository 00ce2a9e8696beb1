"""OpenTelemetry tracing for Key Vault refresh and health checks.

Spans and instruments are created under the ``kvsource`` instrumentation
scope. Without a configured SDK both resolve to no-op implementations.
"""

import functools
from enum import Enum
from typing import Any, Callable, Dict, TypeVar

from opentelemetry import metrics, trace
from opentelemetry.trace import Status, StatusCode

from kvsource.__version__ import __version__


F = TypeVar('F', bound=Callable[..., Any])

INSTRUMENTATION_SCOPE = "kvsource"


def get_tracer():
    """Return the tracer for kvsource spans."""
    return trace.get_tracer(INSTRUMENTATION_SCOPE, __version__)


def get_meter():
    """Return the meter for kvsource instruments."""
    return metrics.get_meter(INSTRUMENTATION_SCOPE, __version__)


def _operation_attributes(operation: Any) -> Dict[str, str]:
    attributes = {}
    mode = getattr(operation, "mode", None)
    if mode is not None:
        attributes["kvsource.mode"] = mode.value if isinstance(mode, Enum) else str(mode)
    vault_url = getattr(operation, "vault_url", None)
    if vault_url:
        attributes["kvsource.vault_url"] = vault_url
    return attributes


def traced(span_name: str) -> Callable[[F], F]:
    """Run a vault operation method inside a span.

    The span carries the refresh mode and vault URL of the instance the
    method is bound to. Exceptions are recorded on the span and re-raised.

    Args:
        span_name: Name of the span
    """

    def decorator(func: F) -> F:

        @functools.wraps(func)
        def wrapper(self, *args: Any, **kwargs: Any) -> Any:
            with get_tracer().start_as_current_span(
                span_name, attributes=_operation_attributes(self)
            ) as span:
                try:
                    return func(self, *args, **kwargs)
                except Exception as exc:
                    span.record_exception(exc)
                    span.set_status(Status(StatusCode.ERROR, str(exc)))
                    raise

        return wrapper  # type: ignore[return-value]

    return decorator
