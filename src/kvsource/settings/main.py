from functools import lru_cache

from .keyvault import KeyVaultSettings


@lru_cache(maxsize=1)
def get_settings() -> KeyVaultSettings:
    """Get the process-wide settings instance.

    Settings are read from the environment and ``.env`` once and cached.

    Returns:
        KeyVaultSettings: The cached settings
    """
    return KeyVaultSettings()


def reload_settings() -> KeyVaultSettings:
    """Force settings to be re-read from the environment."""
    get_settings.cache_clear()
    return get_settings()
