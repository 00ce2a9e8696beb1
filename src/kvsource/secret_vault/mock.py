"""In-memory secret client for testing and development.

This module provides the InMemorySecretClient class which mimics the parts of
``azure.keyvault.secrets.SecretClient`` used by kvsource, without requiring
actual Key Vault access.
"""

import re
import threading
import uuid
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional, Tuple

from azure.core.exceptions import ResourceNotFoundError
from azure.core.paging import ItemPaged

from kvsource.common.exceptions import validation_error

_SECRET_NAME = re.compile(r"[0-9a-zA-Z-]+")


@dataclass(frozen=True)
class InMemorySecretProperties:
    """Identifier of a stored secret version."""

    name: str
    version: str
    enabled: bool = True


@dataclass(frozen=True)
class InMemorySecret:
    """A stored secret version with its value."""

    name: str
    value: Optional[str]
    properties: InMemorySecretProperties


class InMemorySecretClient:
    """In-memory stand-in for the Azure Key Vault ``SecretClient``.

    Names are matched without regard to case, as Key Vault does. Each
    ``set_secret`` call creates a new version; ``get_secret`` without a
    version returns the latest one. Listings are paged through
    ``azure.core.paging.ItemPaged`` so callers iterate them exactly as they
    would a real listing.

    Attributes:
        vault_url: Pseudo URL reported for logging and health details
        page_size: Number of items per listing page
    """

    def __init__(
        self,
        secrets: Optional[Dict[str, str]] = None,
        vault_url: str = "memory://kvsource",
        page_size: int = 25,
    ):
        """Initialize the in-memory client.

        Args:
            secrets: Initial secret name -> value mappings
            vault_url: Pseudo URL of the vault
            page_size: Number of items per listing page
        """
        self.vault_url = vault_url
        self.page_size = page_size
        self._versions: Dict[str, List[InMemorySecret]] = {}
        self._lock = threading.Lock()
        for name, value in (secrets or {}).items():
            self.set_secret(name, value)

    def set_secret(self, name: str, value: Optional[str], **kwargs: Any) -> InMemorySecret:
        """Add a new version of a secret.

        Args:
            name: Secret name, restricted to letters, digits and hyphens
            value: Secret value

        Returns:
            The stored secret version
        """
        if not name or not _SECRET_NAME.fullmatch(name):
            raise validation_error(
                "Secret names may only contain letters, digits and hyphens",
                field="name",
                value=name,
            )
        secret = InMemorySecret(
            name=name,
            value=value,
            properties=InMemorySecretProperties(
                name=name,
                version=uuid.uuid4().hex,
                enabled=kwargs.get("enabled", True),
            ),
        )
        with self._lock:
            self._versions.setdefault(name.lower(), []).append(secret)
        return secret

    def delete_secret(self, name: str) -> None:
        """Remove every version of a secret."""
        with self._lock:
            if self._versions.pop(name.lower(), None) is None:
                raise ResourceNotFoundError(f"Secret not found: {name}")

    def get_secret(self, name: str, version: Optional[str] = None, **kwargs: Any) -> InMemorySecret:
        """Fetch a secret by name and optional version.

        Raises:
            ResourceNotFoundError: If the secret or version does not exist
        """
        with self._lock:
            versions = list(self._versions.get(name.lower(), ()))

        if not versions:
            raise ResourceNotFoundError(f"Secret not found: {name}")
        if not version:
            return versions[-1]
        for secret in versions:
            if secret.properties.version == version:
                return secret
        raise ResourceNotFoundError(f"Secret version not found: {name}/{version}")

    def list_properties_of_secrets(self, **kwargs: Any) -> ItemPaged:
        """List the latest version identifier of every secret, paged."""
        with self._lock:
            items = [versions[-1].properties for versions in self._versions.values()]
        items.sort(key=lambda p: p.name)

        def get_next(continuation_token: Optional[str] = None) -> int:
            return int(continuation_token or 0)

        def extract_data(start: int) -> Tuple[Optional[str], Iterator[InMemorySecretProperties]]:
            end = start + self.page_size
            next_token = str(end) if end < len(items) else None
            return next_token, iter(items[start:end])

        return ItemPaged(get_next, extract_data)

    def close(self) -> None:
        """Match the SecretClient interface; nothing to release."""

    def __len__(self) -> int:
        with self._lock:
            return len(self._versions)
