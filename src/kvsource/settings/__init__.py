"""Settings for the Key Vault property source.

Built on Pydantic Settings: values come from ``KEYVAULT_``-prefixed
environment variables, then an optional ``.env`` file, then code defaults.

Quick Start:
    >>> from kvsource.settings import get_settings
    >>> settings = get_settings()
    >>> settings.refresh_interval_seconds
    1800.0
"""

from .keyvault import DEFAULT_HEALTH_PROBE_SECRET_NAME, KeyVaultSettings
from .main import get_settings, reload_settings

__all__ = [
    "DEFAULT_HEALTH_PROBE_SECRET_NAME",
    "KeyVaultSettings",
    "get_settings",
    "reload_settings",
]
