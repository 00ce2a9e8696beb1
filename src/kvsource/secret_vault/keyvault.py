"""Azure Key Vault client construction and response helpers.

This module builds the ``SecretClient`` the property source reads from and
exposes a fetch that also reports the HTTP status of the call.
"""

from dataclasses import dataclass
from typing import Any, Optional, TYPE_CHECKING

from kvsource.common.exceptions import ErrorCode, configuration_error
from kvsource.logging import get_logger

if TYPE_CHECKING:
    from azure.keyvault.secrets import SecretClient
    from kvsource.protocols.providers import SecretClientProtocol
    from kvsource.settings.keyvault import KeyVaultSettings


logger = get_logger(__name__)


@dataclass(frozen=True)
class SecretResponse:
    """Secret together with the status code of the response that carried it."""

    status_code: int
    secret: Any


def create_keyvault_client(settings: 'KeyVaultSettings') -> 'SecretClient':
    """Create an Azure ``SecretClient`` from settings.

    Uses client credentials when tenant, client id and secret are all set,
    ``DefaultAzureCredential`` otherwise.

    Args:
        settings: Key Vault configuration settings

    Returns:
        Configured SecretClient

    Raises:
        KVSourceError: If no vault URL is configured
    """
    if not settings.url:
        raise configuration_error(
            "Key Vault URL is not configured",
            config_key="KEYVAULT_URL",
            error_code=ErrorCode.CONFIG_MISSING,
        )

    from azure.keyvault.secrets import SecretClient
    from azure.identity import DefaultAzureCredential, ClientSecretCredential

    if settings.uses_client_secret:
        credential = ClientSecretCredential(
            tenant_id=settings.tenant_id,
            client_id=settings.client_id,
            client_secret=settings.client_secret.get_secret_value()
        )
    else:
        credential = DefaultAzureCredential()

    logger.info(
        "Creating Key Vault client",
        extra={
            "vault_url": settings.url,
            "credential_type": type(credential).__name__,
        },
    )
    return SecretClient(
        vault_url=settings.url,
        credential=credential,
        retry_total=settings.max_retries,
    )


def get_secret_with_response(
    client: 'SecretClientProtocol',
    name: str,
    version: Optional[str] = None,
) -> SecretResponse:
    """Fetch a secret and capture the HTTP status code of the response.

    The status is read through the ``raw_response_hook`` pipeline option.
    Clients that never invoke the hook (in-memory clients, test doubles) are
    reported as 200 when the call returns.

    Args:
        client: Vault client
        name: Secret name
        version: Secret version, latest if None

    Returns:
        SecretResponse with status code and secret

    Raises:
        azure.core.exceptions.AzureError: Whatever the client raises
    """
    captured = {}

    def _capture_status(pipeline_response: Any) -> None:
        http_response = getattr(pipeline_response, "http_response", None)
        status_code = getattr(http_response, "status_code", None)
        if status_code is not None:
            captured["status_code"] = status_code

    secret = client.get_secret(name, version, raw_response_hook=_capture_status)
    return SecretResponse(status_code=captured.get("status_code", 200), secret=secret)
