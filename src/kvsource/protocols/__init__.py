"""Protocols describing the collaborators of kvsource."""

from kvsource.protocols.providers import (
    PagedSecretPropertiesProtocol,
    PropertySourceProtocol,
    SecretClientProtocol,
    SecretPropertiesProtocol,
)

__all__ = [
    "PagedSecretPropertiesProtocol",
    "PropertySourceProtocol",
    "SecretClientProtocol",
    "SecretPropertiesProtocol",
]
