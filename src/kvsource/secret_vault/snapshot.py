"""Atomically replaceable snapshot of fetched secrets."""

from types import MappingProxyType
from typing import Dict, Iterator, Mapping, Optional


EMPTY_SNAPSHOT: Mapping[str, str] = MappingProxyType({})


class SnapshotStore:
    """Holds the currently published secret snapshot.

    A snapshot is a read-only view over a dict that nothing else references,
    so it can never change after publication. Publishing is a single
    attribute assignment; readers take the reference once per call and see
    one complete snapshot.
    """

    def __init__(self) -> None:
        self._snapshot: Mapping[str, str] = EMPTY_SNAPSHOT

    @property
    def current(self) -> Mapping[str, str]:
        """The published snapshot."""
        return self._snapshot

    def publish(self, values: Dict[str, str]) -> Mapping[str, str]:
        """Replace the published snapshot.

        Args:
            values: Freshly built mapping; the store takes ownership of it

        Returns:
            The new read-only snapshot
        """
        snapshot = MappingProxyType(dict(values))
        self._snapshot = snapshot
        return snapshot

    def get(self, key: str) -> Optional[str]:
        return self._snapshot.get(key)

    def keys(self) -> Iterator[str]:
        return iter(tuple(self._snapshot))

    def __contains__(self, key: object) -> bool:
        return key in self._snapshot

    def __len__(self) -> int:
        return len(self._snapshot)
