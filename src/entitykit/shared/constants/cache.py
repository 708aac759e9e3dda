"""
Cache Configuration Constants

This module provides the constants that govern entity and index caching:
TTL defaults, the never-expires sentinel and persisted envelope field names.
"""

# Base time units for TTL calculations
BASE_SECOND = 1
BASE_MINUTE = 60 * BASE_SECOND
BASE_HOUR = 60 * BASE_MINUTE
BASE_DAY = 24 * BASE_HOUR


class Cache:
    """Entity cache configuration."""

    # Caching is opt-in
    DEFAULT_ENABLED = False
    DEFAULT_EXPIRATION = BASE_HOUR

    # Expiration value meaning "never expires"
    NEVER_EXPIRES = 0

    # Separator between entity type and id in storage keys
    KEY_SEPARATOR = "_"

    # Default SQLite database location
    DEFAULT_DB_PATH = "cache/entitykit.db"


class CacheFields:
    """Field names of persisted cache envelopes."""

    DATA = "data"
    EXPIRATION = "expiration"
    ENTITY_TYPE = "entity_type"
    ENTITY_IDS = "entity_ids"


class StorageSchema:
    """SQLite key/value store schema constants."""

    TABLE = "kv_store"
    VERSION_TABLE = "schema_version"
    CURRENT_VERSION = 1
