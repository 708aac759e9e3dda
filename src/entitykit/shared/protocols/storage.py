"""Storage protocols for dependency inversion.

The cache stores only need a string-keyed, string-valued store; any
backend satisfying KeyValueStore can be plugged into EntityContext.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class KeyValueStore(Protocol):
    """Persisted key/value store.

    Implementations must be durable for the lifetime the caller expects
    (process-local for MemoryKeyValueStore, across restarts for
    SQLiteKeyValueStore) and may raise on storage failures; the cache
    stores catch and describe those failures.

    Example:
        >>> from entitykit.storage import MemoryKeyValueStore
        >>> store: KeyValueStore = MemoryKeyValueStore()
        >>> store.set("node_1", "{}")
        >>> store.get("node_1")
        '{}'
    """

    def get(self, key: str) -> str | None:
        """Return the stored string, or None when the key is absent."""

    def set(self, key: str, value: str) -> None:
        """Store value under key, overwriting any prior value."""

    def remove(self, key: str) -> None:
        """Remove key; removing a missing key is not an error."""
