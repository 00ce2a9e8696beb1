"""Key Vault backed property lookup with periodic refresh.

This module provides the KeyVaultOperation class, which keeps an in-memory
snapshot of Key Vault secrets, serves property lookups from it, refreshes it
in the background and reports whether the vault is reachable.
"""

import threading
import time
import uuid
import weakref
from datetime import datetime, timezone
from enum import Enum
from typing import (
    Callable, Dict, FrozenSet, Iterable, Mapping, Optional, Sequence, Tuple, TYPE_CHECKING,
)

from azure.core.exceptions import (
    HttpResponseError,
    ResourceNotFoundError,
    ServiceRequestError,
    ServiceResponseError,
)

from kvsource.common.exceptions import KVSourceError, refresh_error, validation_error
from kvsource.logging import clear_refresh_context, get_logger, set_refresh_context
from kvsource.monitoring import RefreshMetrics, RefreshRecord, traced
from kvsource.naming import expand_all, to_canonical
from kvsource.settings.keyvault import DEFAULT_HEALTH_PROBE_SECRET_NAME

from .keyvault import get_secret_with_response
from .scheduler import PeriodicRefresher
from .snapshot import SnapshotStore

if TYPE_CHECKING:
    from kvsource.protocols.providers import SecretClientProtocol


logger = get_logger(__name__)


class RefreshMode(str, Enum):
    """How a refresh decides which secrets to fetch."""

    ENUMERATE = "enumerate"
    TARGETED = "targeted"


def _validate_secret_keys(secret_keys: Optional[Iterable[str]]) -> Tuple[str, ...]:
    if secret_keys is None:
        return ()
    keys = tuple(secret_keys)
    for index, key in enumerate(keys):
        if not isinstance(key, str) or not key:
            raise validation_error(
                "Secret keys must be non-empty strings",
                field=f"secret_keys[{index}]",
                value=key,
            )
    return keys


def _snapshot_size(store: SnapshotStore) -> Callable[[], Optional[int]]:
    # The meter holds gauge callbacks for the life of the process
    store_ref = weakref.ref(store)

    def size() -> Optional[int]:
        current = store_ref()
        return len(current) if current is not None else None

    return size


class KeyVaultOperation:
    """In-memory view of Key Vault secrets.

    Construction performs one synchronous refresh, so a constructed instance
    always serves fetched data. With a positive ``refresh_interval`` a
    background :class:`PeriodicRefresher` keeps the snapshot current until
    :meth:`close` is called.

    Without ``secret_keys`` every secret in the vault is loaded under its
    vault name (enumerate mode). With ``secret_keys`` exactly those
    properties are fetched, each stored under the key as the caller spelled
    it (targeted mode).

    Attributes:
        mode: Enumerate or targeted refresh
        case_sensitive: Whether property names are passed through unchanged
        secret_keys: Configured property names for targeted mode

    Example:
        >>> client = SecretClient(vault_url, DefaultAzureCredential())
        >>> with KeyVaultOperation(client, refresh_interval=1800) as kv:
        ...     kv.get_property("spring.datasource.password")
    """

    def __init__(
        self,
        secret_client: 'SecretClientProtocol',
        refresh_interval: float = 0,
        secret_keys: Optional[Sequence[str]] = None,
        case_sensitive: bool = False,
        health_probe_secret_name: str = DEFAULT_HEALTH_PROBE_SECRET_NAME,
    ):
        """Create the operation and load the initial snapshot.

        Args:
            secret_client: Vault client
            refresh_interval: Seconds between background refreshes; zero or
                negative disables periodic refresh
            secret_keys: Property names to fetch; None or empty loads every secret
            case_sensitive: Pass names through unchanged instead of normalizing
            health_probe_secret_name: Secret requested by :meth:`is_up`

        Raises:
            KVSourceValueError: If a secret key is None or empty
            KVSourceError: If the initial refresh fails
        """
        self.secret_keys = _validate_secret_keys(secret_keys)
        self.case_sensitive = case_sensitive
        self.mode = RefreshMode.TARGETED if self.secret_keys else RefreshMode.ENUMERATE
        self.health_probe_secret_name = health_probe_secret_name
        self._client = secret_client
        self._store = SnapshotStore()
        self._refresh_lock = threading.Lock()
        self._refresher: Optional[PeriodicRefresher] = None
        self._closed = False
        self.last_refreshed: Optional[datetime] = None
        self.vault_url: Optional[str] = getattr(secret_client, "vault_url", None)
        self._metrics = RefreshMetrics(self.vault_url, snapshot_size=_snapshot_size(self._store))

        self.refresh()

        if refresh_interval > 0:
            self._refresher = PeriodicRefresher(self.refresh, refresh_interval).start()

    def get_property(self, name: str) -> Optional[str]:
        """Look up a property value.

        Args:
            name: Property name in any relaxed binding format

        Returns:
            The secret value, or None if the snapshot has no such property
            or the name is None or empty
        """
        if not name:
            return None
        canonical = to_canonical(name, self.case_sensitive)
        snapshot = self._store.current
        if self.case_sensitive:
            return snapshot.get(name)
        if self.mode is RefreshMode.ENUMERATE:
            return snapshot.get(canonical)

        # Targeted snapshots are keyed by the configured spelling
        if name in snapshot:
            return snapshot[name]
        for key, value in snapshot.items():
            if to_canonical(key) == canonical:
                return value
        return None

    def contains_property(self, name: str) -> bool:
        return self.get_property(name) is not None

    def get_property_names(self) -> FrozenSet[str]:
        """Return every name a property can be looked up by.

        Case-insensitive sources list each stored name together with its
        dotted variant (``db-password`` and ``db.password``).
        """
        return expand_all(self._store.current, self.case_sensitive)

    @property
    def snapshot(self) -> Mapping[str, str]:
        """The currently published snapshot (read-only)."""
        return self._store.current

    def refresh(self) -> Mapping[str, str]:
        """Fetch secrets from Key Vault and publish a new snapshot.

        A refresh is all-or-nothing: values are collected into a private
        dict and published only when every fetch has succeeded, so a failed
        refresh leaves the previous snapshot in place. Concurrent calls are
        serialized.

        Returns:
            The newly published snapshot

        Raises:
            KVSourceError: If listing or fetching secrets fails
        """
        with self._refresh_lock:
            set_refresh_context(refresh_id=uuid.uuid4().hex, vault_url=self.vault_url)
            try:
                return self._refresh_locked()
            finally:
                clear_refresh_context()

    @traced("kvsource.refresh")
    def _refresh_locked(self) -> Mapping[str, str]:
        started = time.perf_counter()
        try:
            if self.mode is RefreshMode.TARGETED:
                values = self._fetch_targeted()
            else:
                values = self._fetch_all()
        except Exception as exc:
            self._metrics.record_refresh(RefreshRecord(
                mode=self.mode.value,
                secrets_loaded=len(self._store),
                duration_seconds=time.perf_counter() - started,
                success=False,
                error_type=type(exc).__name__,
            ))
            if isinstance(exc, KVSourceError):
                raise
            raise refresh_error(exc, mode=self.mode.value) from exc

        snapshot = self._store.publish(values)
        self.last_refreshed = datetime.now(timezone.utc)
        self._metrics.record_refresh(RefreshRecord(
            mode=self.mode.value,
            secrets_loaded=len(snapshot),
            duration_seconds=time.perf_counter() - started,
            success=True,
        ))
        logger.info(
            "Key Vault snapshot refreshed",
            extra={"mode": self.mode.value, "secret_count": len(snapshot)},
        )
        return snapshot

    def _fetch_all(self) -> Dict[str, str]:
        values: Dict[str, str] = {}
        paged = self._client.list_properties_of_secrets()
        if paged is None:
            return values

        for page in paged.by_page():
            for properties in page:
                try:
                    secret = self._client.get_secret(properties.name, properties.version)
                except Exception as exc:
                    raise refresh_error(
                        exc, mode=self.mode.value, secret_name=properties.name
                    ) from exc
                values[secret.name] = secret.value
        return values

    def _fetch_targeted(self) -> Dict[str, str]:
        values: Dict[str, str] = {}
        for key in self.secret_keys:
            secret_name = to_canonical(key, self.case_sensitive)
            try:
                secret = self._client.get_secret(secret_name)
            except ResourceNotFoundError:
                secret = None
            except Exception as exc:
                raise refresh_error(
                    exc, mode=self.mode.value, secret_name=secret_name
                ) from exc

            if secret is None:
                logger.debug(
                    "Configured secret not found in Key Vault",
                    extra={"secret_key": key, "secret_name": secret_name},
                )
                continue
            values[key] = secret.value
        return values

    @traced("kvsource.health_check")
    def is_up(self) -> bool:
        """Check whether Key Vault is reachable.

        Requests a secret that is expected not to exist. The check only
        detects a vault that cannot be used at all, so most failures still
        count as up:

        - a response below 500 is up
        - a not-found error is up
        - a transport error is up, and logged
        - any other HTTP error, authentication failures included, is down
        - any other exception is down

        Returns:
            True if the vault is considered up
        """
        try:
            response = get_secret_with_response(self._client, self.health_probe_secret_name)
            return response.status_code < 500
        except ResourceNotFoundError:
            return True
        except (ServiceRequestError, ServiceResponseError) as exc:
            logger.error(
                "An HTTP error occurred while checking Key Vault connectivity",
                exc_info=exc,
            )
            return True
        except HttpResponseError as exc:
            logger.error(
                "Key Vault returned an error while checking connectivity",
                extra={"status_code": exc.status_code},
                exc_info=exc,
            )
            return False
        except Exception as exc:
            logger.error(
                "A runtime error occurred while checking Key Vault connectivity",
                exc_info=exc,
            )
            return False

    @property
    def refresher(self) -> Optional[PeriodicRefresher]:
        return self._refresher

    def close(self) -> None:
        """Stop background refreshes. Safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        if self._refresher is not None:
            self._refresher.stop()
            logger.info("Stopped periodic Key Vault refresh")

    def __enter__(self) -> "KeyVaultOperation":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
