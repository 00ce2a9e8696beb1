"""Health reporting for the Key Vault property source."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional

from .operation import KeyVaultOperation


class HealthStatus(str, Enum):
    UP = "UP"
    DOWN = "DOWN"
    UNKNOWN = "UNKNOWN"


@dataclass(frozen=True)
class HealthReport:
    status: HealthStatus
    details: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {"status": self.status.value, "details": dict(self.details)}


class KeyVaultHealthIndicator:
    """Turns :meth:`KeyVaultOperation.is_up` into a health report.

    With no operation (Key Vault disabled or not configured) the status is
    UNKNOWN rather than DOWN.
    """

    def __init__(self, operation: Optional[KeyVaultOperation] = None):
        self.operation = operation

    def health(self) -> HealthReport:
        if self.operation is None:
            return HealthReport(HealthStatus.UNKNOWN, {"reason": "Key Vault is not configured"})

        status = HealthStatus.UP if self.operation.is_up() else HealthStatus.DOWN
        last_refreshed = self.operation.last_refreshed
        return HealthReport(
            status,
            {
                "vault_url": self.operation.vault_url,
                "mode": self.operation.mode.value,
                "secret_count": len(self.operation.snapshot),
                "last_refreshed": last_refreshed.isoformat() if last_refreshed else None,
            },
        )
