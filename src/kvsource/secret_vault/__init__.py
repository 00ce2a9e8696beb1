"""Key Vault property source.

This package keeps an in-memory snapshot of Azure Key Vault secrets and
serves configuration properties from it.
"""

from kvsource.protocols.providers import SecretClientProtocol
from .factory import create_property_source, create_secret_client
from .health import HealthReport, HealthStatus, KeyVaultHealthIndicator
from .keyvault import SecretResponse, create_keyvault_client, get_secret_with_response
from .mock import InMemorySecretClient
from .operation import KeyVaultOperation, RefreshMode
from .property_source import KeyVaultPropertySource
from .scheduler import PeriodicRefresher
from .snapshot import SnapshotStore

__all__ = [
    "HealthReport",
    "HealthStatus",
    "InMemorySecretClient",
    "KeyVaultHealthIndicator",
    "KeyVaultOperation",
    "KeyVaultPropertySource",
    "PeriodicRefresher",
    "RefreshMode",
    "SecretClientProtocol",
    "SecretResponse",
    "SnapshotStore",
    "create_keyvault_client",
    "create_property_source",
    "create_secret_client",
    "get_secret_with_response",
]
