"""Provider protocol definitions.

This module defines the interfaces kvsource consumes from a vault client and
exposes to a configuration-binding consumer.
"""

from typing import Any, FrozenSet, Iterable, Iterator, Optional, Protocol, runtime_checkable


@runtime_checkable
class SecretPropertiesProtocol(Protocol):
    """Identifier of a listed secret (``azure.keyvault.secrets.SecretProperties``)."""

    name: Optional[str]
    version: Optional[str]


@runtime_checkable
class PagedSecretPropertiesProtocol(Protocol):
    """Lazy paged listing (``azure.core.paging.ItemPaged``)."""

    def by_page(self, continuation_token: Optional[str] = None) -> Iterator[Iterable[Any]]:
        """Iterate the listing one page at a time."""
        ...


@runtime_checkable
class SecretClientProtocol(Protocol):
    """Protocol defining the subset of ``SecretClient`` used by kvsource.

    ``azure.keyvault.secrets.SecretClient`` satisfies this protocol, as does
    :class:`kvsource.secret_vault.mock.InMemorySecretClient`.
    """

    @property
    def vault_url(self) -> str:
        """URL of the vault the client talks to."""
        ...

    def list_properties_of_secrets(self, **kwargs: Any) -> Optional[PagedSecretPropertiesProtocol]:
        """List identifiers of every secret in the vault.

        Returns:
            Paged listing of secret properties (values are not included)
        """
        ...

    def get_secret(self, name: str, version: Optional[str] = None, **kwargs: Any) -> Any:
        """Fetch a secret by name and optional version.

        Args:
            name: Secret name
            version: Secret version, latest if omitted
            **kwargs: Pipeline options such as ``raw_response_hook``

        Returns:
            Secret with ``name`` and ``value`` attributes

        Raises:
            azure.core.exceptions.ResourceNotFoundError: If the secret does not exist
        """
        ...


@runtime_checkable
class PropertySourceProtocol(Protocol):
    """Interface a configuration-binding consumer reads properties through."""

    name: str

    def get_property(self, name: str) -> Optional[str]:
        """Return the property value or None when absent."""
        ...

    def get_property_names(self) -> FrozenSet[str]:
        """Return every property name the source can resolve."""
        ...

    def contains_property(self, name: str) -> bool:
        """Check whether the property resolves to a value."""
        ...
