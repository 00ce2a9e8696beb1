"""Property source facade over a KeyVaultOperation."""

from typing import FrozenSet, Optional

from .operation import KeyVaultOperation


class KeyVaultPropertySource:
    """Named property source backed by Key Vault.

    This is the object a configuration-binding consumer registers; it
    delegates every lookup to the underlying operation.

    Attributes:
        name: Property source name
        operation: Operation serving lookups
    """

    def __init__(self, name: str, operation: KeyVaultOperation):
        self.name = name
        self.operation = operation

    def get_property(self, name: str) -> Optional[str]:
        return self.operation.get_property(name)

    def get_property_names(self) -> FrozenSet[str]:
        return self.operation.get_property_names()

    def contains_property(self, name: str) -> bool:
        return self.operation.contains_property(name)

    def close(self) -> None:
        self.operation.close()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, vault_url={self.operation.vault_url!r})"
