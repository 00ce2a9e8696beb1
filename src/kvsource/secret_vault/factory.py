"""Factory for creating vault clients and property sources.

This module picks the vault client implementation from configuration and
environment, and wires it into a property source.
"""

from typing import Optional, Dict, TYPE_CHECKING
import os

from kvsource.common.exceptions import ErrorCode, configuration_error
from kvsource.logging import get_logger
from .keyvault import create_keyvault_client
from .mock import InMemorySecretClient
from .operation import KeyVaultOperation
from .property_source import KeyVaultPropertySource

if TYPE_CHECKING:
    from kvsource.protocols.providers import SecretClientProtocol
    from kvsource.settings.keyvault import KeyVaultSettings


logger = get_logger(__name__)


def is_test_mode() -> bool:
    """Check if the application is running in test mode.

    Returns:
        True if KVSOURCE_TEST_MODE="true" (case-insensitive), False otherwise
    """
    return os.getenv("KVSOURCE_TEST_MODE", "").lower() == "true"


def create_secret_client(
    settings: 'KeyVaultSettings',
    mock_values: Optional[Dict[str, str]] = None,
    force_mock: bool = False
) -> 'SecretClientProtocol':
    """Create the vault client based on configuration.

    Args:
        settings: Key Vault configuration settings
        mock_values: Secrets to seed the in-memory client with
        force_mock: If True, always create an in-memory client

    Returns:
        Azure SecretClient, or InMemorySecretClient in test mode

    Raises:
        KVSourceError: If Key Vault is not configured outside test mode

    Example:
        >>> from kvsource.settings import KeyVaultSettings
        >>> # Production: Azure Key Vault
        >>> client = create_secret_client(KeyVaultSettings(url="https://vault.vault.azure.net/"))
        >>> # Testing: in-memory
        >>> client = create_secret_client(settings, mock_values={"api-key": "test"}, force_mock=True)
    """
    if force_mock or is_test_mode():
        return InMemorySecretClient(mock_values)

    if not settings.is_configured:
        raise configuration_error(
            "Key Vault is disabled or has no URL configured",
            config_key="KEYVAULT_URL",
            error_code=ErrorCode.CONFIG_MISSING,
        )
    return create_keyvault_client(settings)


def create_property_source(
    settings: 'KeyVaultSettings',
    client: Optional['SecretClientProtocol'] = None,
) -> Optional[KeyVaultPropertySource]:
    """Create a Key Vault property source from settings.

    The returned source has already loaded its first snapshot and, if a
    positive refresh interval is configured, refreshes in the background
    until closed.

    Args:
        settings: Key Vault configuration settings
        client: Vault client to use instead of creating one

    Returns:
        The property source, or None when Key Vault is disabled
    """
    if not settings.enabled:
        logger.info("Key Vault property source is disabled")
        return None

    secret_client = client if client is not None else create_secret_client(settings)
    operation = KeyVaultOperation(
        secret_client,
        refresh_interval=settings.refresh_interval_seconds,
        secret_keys=settings.get_secret_key_list(),
        case_sensitive=settings.case_sensitive,
        health_probe_secret_name=settings.health_probe_secret_name,
    )
    return KeyVaultPropertySource(settings.name, operation)
