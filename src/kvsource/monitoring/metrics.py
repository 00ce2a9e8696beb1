"""Metrics collection for Key Vault refresh cycles.

This module records refresh outcomes and exports them to OpenTelemetry.
"""

from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Iterable, Optional

from opentelemetry.metrics import CallbackOptions, Observation

from kvsource.logging import get_logger
from kvsource.monitoring.tracing import get_meter


@dataclass
class RefreshRecord:
    """Outcome of a single refresh cycle.

    Attributes:
        mode: Refresh mode ('enumerate' or 'targeted')
        secrets_loaded: Number of secrets in the published snapshot
        duration_seconds: Refresh duration in seconds
        success: Whether the refresh was published
        error_type: Exception class name if the refresh failed
        timestamp: When the refresh finished
    """

    mode: str
    secrets_loaded: int
    duration_seconds: float
    success: bool
    error_type: Optional[str] = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> Dict[str, Any]:
        """Convert the record to a dictionary."""
        data = asdict(self)
        data['timestamp'] = self.timestamp.isoformat()
        return data


class RefreshMetrics:
    """Collector for refresh metrics.

    Attributes:
        vault_url: Vault the owning operation reads from
        logger: Logger instance
        meter: OpenTelemetry meter
    """

    def __init__(
        self,
        vault_url: Optional[str] = None,
        snapshot_size: Optional[Callable[[], Optional[int]]] = None,
    ):
        """Initialize refresh metrics.

        Args:
            vault_url: Vault URL attached to every measurement
            snapshot_size: Callable returning the current snapshot size, or
                None once the snapshot is gone
        """
        self.vault_url = vault_url or "unknown"
        self.logger = get_logger(__name__)
        self._snapshot_size = snapshot_size
        self.last_record: Optional[RefreshRecord] = None

        self.meter = get_meter()
        self._setup_instruments()

    def _setup_instruments(self) -> None:
        """Setup OpenTelemetry instruments."""
        self.refresh_counter = self.meter.create_counter(
            "kvsource_refresh_total",
            description="Total number of Key Vault refresh cycles",
            unit="refreshes"
        )

        self.error_counter = self.meter.create_counter(
            "kvsource_refresh_errors_total",
            description="Total number of failed Key Vault refresh cycles",
            unit="errors"
        )

        self.duration_histogram = self.meter.create_histogram(
            "kvsource_refresh_duration_seconds",
            description="Duration of Key Vault refresh cycles",
            unit="seconds"
        )

        self.meter.create_observable_gauge(
            "kvsource_secrets_loaded",
            callbacks=[self._secrets_loaded_callback],
            description="Secrets held in the current snapshot",
            unit="secrets"
        )

    def record_refresh(self, record: RefreshRecord) -> None:
        """Record a refresh outcome.

        Args:
            record: Refresh record to export
        """
        self.last_record = record

        attributes = {
            "vault_url": self.vault_url,
            "mode": record.mode,
            "success": str(record.success).lower(),
        }

        self.refresh_counter.add(1, attributes)
        self.duration_histogram.record(record.duration_seconds, attributes)

        if not record.success:
            error_attributes = attributes.copy()
            error_attributes["error_type"] = record.error_type or "unknown"
            self.error_counter.add(1, error_attributes)

        self.logger.debug("Key Vault refresh recorded", extra=record.to_dict())

    def _secrets_loaded_callback(self, options: CallbackOptions) -> Iterable[Observation]:
        """Callback for the snapshot size gauge."""
        if self._snapshot_size is None:
            return
        size = self._snapshot_size()
        if size is not None:
            yield Observation(size, {"vault_url": self.vault_url})
