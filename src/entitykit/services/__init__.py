"""Services module for EntityKit.

This module contains the caching, request deduplication and entity type
registry components orchestrated by the entity facade.
"""

from .entity_cache import EntityCacheStore, entity_cache_key
from .expiration import compute_expiration, is_expired
from .index_cache import IndexCacheStore, index_cache_key
from .registry import EntityTypeHandlers, EntityTypeRegistry
from .request_queue import QueueEntry, QueueKey, RequestQueue
from .statistics import CacheCounters, CacheStatistics

__all__ = [
    "CacheCounters",
    "CacheStatistics",
    "EntityCacheStore",
    "EntityTypeHandlers",
    "EntityTypeRegistry",
    "IndexCacheStore",
    "QueueEntry",
    "QueueKey",
    "RequestQueue",
    "compute_expiration",
    "entity_cache_key",
    "index_cache_key",
    "is_expired",
]
