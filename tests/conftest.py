import threading

import pytest

from kvsource.secret_vault.mock import InMemorySecretClient


class RecordingClient:
    """Wraps an in-memory client, counting calls and optionally failing or blocking."""

    def __init__(self, inner: InMemorySecretClient):
        self.inner = inner
        self.vault_url = inner.vault_url
        self.get_calls = []
        self.list_calls = 0
        self.fail_on = None
        self.block_on = None
        self.entered = threading.Event()
        self.release = threading.Event()

    def list_properties_of_secrets(self, **kwargs):
        self.list_calls += 1
        return self.inner.list_properties_of_secrets(**kwargs)

    def get_secret(self, name, version=None, **kwargs):
        self.get_calls.append((name, version))
        if self.fail_on is not None and name == self.fail_on:
            raise RuntimeError(f"fetch failed for {name}")
        if self.block_on is not None and name == self.block_on:
            self.entered.set()
            self.release.wait(5)
        return self.inner.get_secret(name, version, **kwargs)


@pytest.fixture
def vault():
    """In-memory vault seeded with a couple of secrets."""
    return InMemorySecretClient(
        {
            "db-password": "s3cr3t",
            "acme-myproject-person-firstname": "Alice",
        },
        vault_url="https://unit-test.vault.azure.net/",
    )


@pytest.fixture
def recording_client(vault):
    return RecordingClient(vault)

