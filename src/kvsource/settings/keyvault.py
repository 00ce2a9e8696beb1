"""Key Vault configuration settings.

This module contains the configuration for connecting to Azure Key Vault and
for the refresh behavior of the property source built on top of it.
"""

from typing import List, Optional
from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_HEALTH_PROBE_SECRET_NAME = "should-not-be-empty"


class KeyVaultSettings(BaseSettings):
    """Configuration settings for the Azure Key Vault property source.

    Credentials are optional: when tenant, client id and client secret are
    all provided a service principal is used, otherwise
    ``DefaultAzureCredential`` resolves one from the environment.

    Example:
        >>> settings = KeyVaultSettings(
        ...     url="https://vault-name.vault.azure.net/",
        ...     secret_keys="spring.datasource.password, API_KEY",
        ... )
        >>> settings.get_secret_key_list()
        ['spring.datasource.password', 'API_KEY']
    """

    model_config = SettingsConfigDict(
        env_prefix="KEYVAULT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    url: Optional[str] = Field(
        None,
        description="Azure Key Vault URL (https://vault-name.vault.azure.net/)"
    )
    enabled: bool = Field(
        default=True,
        description="Whether to expose Key Vault secrets as properties"
    )
    name: str = Field(
        default="azurekv",
        description="Name of the property source registered with the configuration consumer"
    )

    tenant_id: Optional[str] = Field(
        None,
        description="Azure AD tenant ID for service principal authentication"
    )
    client_id: Optional[str] = Field(
        None,
        description="Azure client ID for Key Vault authentication"
    )
    client_secret: Optional[SecretStr] = Field(
        None,
        description="Azure client secret for Key Vault authentication"
    )

    refresh_interval_seconds: float = Field(
        default=1800.0,
        description="Seconds between background refreshes. Zero or negative disables periodic refresh."
    )
    secret_keys: str = Field(
        default="",
        description=(
            "Comma-separated list of property names to fetch. "
            "When empty, every secret in the vault is loaded."
        )
    )
    case_sensitive: bool = Field(
        default=False,
        description="Pass property names through unchanged instead of normalizing them"
    )
    health_probe_secret_name: str = Field(
        default=DEFAULT_HEALTH_PROBE_SECRET_NAME,
        min_length=1,
        description="Secret requested by the health check; expected to be absent"
    )
    max_retries: int = Field(
        default=3,
        ge=0,
        le=10,
        description="Retry budget handed to the Azure SDK pipeline (retry_total)"
    )

    @field_validator("secret_keys")
    @classmethod
    def validate_secret_keys(cls, v: str) -> str:
        """Normalize the comma-separated key list.

        Args:
            v: The secret_keys string value

        Returns:
            The keys re-joined without surrounding whitespace
        """
        if not v:
            return v

        keys = [k.strip() for k in v.split(",")]
        if any(not k for k in keys):
            raise ValueError(
                f"Invalid secret_keys '{v}'. Keys must be non-empty and separated by single commas."
            )

        return ",".join(keys)

    @property
    def is_configured(self) -> bool:
        """Check if Key Vault is properly configured.

        Returns:
            True if Key Vault URL is provided and the source is enabled
        """
        return bool(self.enabled and self.url)

    @property
    def uses_client_secret(self) -> bool:
        """True when a complete service principal is configured."""
        return bool(self.tenant_id and self.client_id and self.client_secret)

    def get_secret_key_list(self) -> List[str]:
        """Get the configured secret keys.

        Returns:
            List of property names, or empty list for enumerate mode
        """
        if not self.secret_keys:
            return []
        return self.secret_keys.split(",")
