"""
EntityKit - Client-side entity access layer

Loads, saves and deletes typed records (nodes, users, comments, ...) of a
remote CMS-style entity service, with request deduplication and a TTL
cache for single entities and query results.
"""

__version__ = "0.1.0"

from .config import Settings, get_config, load_settings
from .core import EntityContext, EntityFacade
from .services import EntityTypeHandlers, EntityTypeRegistry
from .shared.types import CallOptions, PageOptions
from .storage import MemoryKeyValueStore, SQLiteKeyValueStore

__all__ = [
    "CallOptions",
    "EntityContext",
    "EntityFacade",
    "EntityTypeHandlers",
    "EntityTypeRegistry",
    "MemoryKeyValueStore",
    "PageOptions",
    "SQLiteKeyValueStore",
    "Settings",
    "get_config",
    "load_settings",
]
