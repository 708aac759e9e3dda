"""Key/value store backends for the entity and index caches."""

from entitykit.storage.memory_store import MemoryKeyValueStore
from entitykit.storage.sqlite_store import SQLiteKeyValueStore

__all__ = ["MemoryKeyValueStore", "SQLiteKeyValueStore"]
