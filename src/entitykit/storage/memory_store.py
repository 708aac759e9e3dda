"""In-process key/value store."""

from __future__ import annotations

import threading


class MemoryKeyValueStore:
    """Dict-backed KeyValueStore.

    Contents live as long as the instance; use SQLiteKeyValueStore when
    entries must survive a restart.
    """

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})
        self._lock = threading.Lock()

    def get(self, key: str) -> str | None:
        with self._lock:
            return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        if not isinstance(value, str):
            msg = f"MemoryKeyValueStore only stores strings, got {type(value).__name__}"
            raise TypeError(msg)
        with self._lock:
            self._data[key] = value

    def remove(self, key: str) -> None:
        with self._lock:
            self._data.pop(key, None)

    def keys(self, prefix: str = "") -> list[str]:
        """Return stored keys starting with prefix, sorted."""
        with self._lock:
            return sorted(k for k in self._data if k.startswith(prefix))

    def clear(self) -> int:
        """Remove every entry and return how many were removed."""
        with self._lock:
            count = len(self._data)
            self._data.clear()
            return count

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._data
