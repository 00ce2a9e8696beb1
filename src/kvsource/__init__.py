from kvsource.__version__ import __version__

from kvsource.naming import expand, expand_all, to_canonical

from kvsource.secret_vault import (
    InMemorySecretClient,
    KeyVaultHealthIndicator,
    KeyVaultOperation,
    KeyVaultPropertySource,
    RefreshMode,
    create_property_source,
    create_secret_client,
)

from kvsource.settings import KeyVaultSettings, get_settings

from kvsource.common.exceptions import KVSourceError, ErrorCode


__all__ = [
    "__version__",

    "to_canonical",
    "expand",
    "expand_all",

    "InMemorySecretClient",
    "KeyVaultHealthIndicator",
    "KeyVaultOperation",
    "KeyVaultPropertySource",
    "RefreshMode",
    "create_property_source",
    "create_secret_client",

    "KeyVaultSettings",
    "get_settings",

    # Exceptions (public API)
    "KVSourceError",
    "ErrorCode",
]
