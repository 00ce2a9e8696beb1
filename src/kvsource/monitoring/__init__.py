"""Monitoring infrastructure for refresh metrics and tracing.

This module exports refresh outcomes and spans to OpenTelemetry.
"""

from kvsource.monitoring.metrics import RefreshMetrics, RefreshRecord
from kvsource.monitoring.tracing import get_meter, get_tracer, traced

__all__ = [
    "RefreshMetrics",
    "RefreshRecord",
    "get_meter",
    "get_tracer",
    "traced",
]
