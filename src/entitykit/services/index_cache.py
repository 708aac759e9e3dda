"""Index cache store.

Caches the result of a list/query operation as the ordered ids of the
entities it returned, keyed by an opaque query key (usually the request
path). Loading an index replays every id through the entity cache, so a
hit may still contain per-item misses.
"""

from __future__ import annotations

import logging
import time
from typing import Callable, Iterable

import orjson

from entitykit.services.codec import (
    decode_envelope,
    encode_envelope,
    envelope_expiration,
)
from entitykit.services.entity_cache import EntityCacheStore
from entitykit.services.expiration import Clock, is_expired
from entitykit.services.statistics import CacheStatistics
from entitykit.shared.constants import CacheFields, Logging
from entitykit.shared.errors import (
    DomainError,
    ErrorCode,
    ErrorContext,
    create_cache_error,
)
from entitykit.shared.logging import log_operation_warning
from entitykit.shared.protocols import KeyValueStore
from entitykit.shared.result import OperationResult
from entitykit.shared.types import Entity

logger = logging.getLogger(__name__)

PrimaryKeyLookup = Callable[[str], "str | None"]


def index_cache_key(path: str) -> str:
    """Return the storage key for an index query; the path is used as-is."""
    return path


class IndexCacheStore:
    """TTL-enforcing cache of query results stored as id lists.

    Args:
        store: Persisted key/value store
        entity_cache: Entity cache used to rebuild result lists
        primary_key_of: Resolves an entity type's primary-key field name
        clock: Time source returning epoch seconds
        statistics: Optional lookup counters
    """

    def __init__(
        self,
        store: KeyValueStore,
        entity_cache: EntityCacheStore,
        primary_key_of: PrimaryKeyLookup,
        *,
        clock: Clock = time.time,
        statistics: CacheStatistics | None = None,
    ) -> None:
        self.store = store
        self.entity_cache = entity_cache
        self.primary_key_of = primary_key_of
        self.clock = clock
        self.statistics = statistics or entity_cache.statistics

    def load(
        self,
        query_key: str,
        entity_type: str,
        reset: bool = False,
    ) -> OperationResult[list[Entity | None]]:
        """Load a cached query result.

        Args:
            query_key: Opaque query key
            entity_type: Entity type of the listed entities
            reset: Drop the cached index instead of reading it

        Returns:
            Hit with the rebuilt list (None marks an entity that is no longer
            cached), a miss, or a failure degraded to a miss
        """
        key = index_cache_key(query_key)

        if reset:
            deleted = self.delete(query_key)
            self.statistics.record_miss("index")
            return deleted if not deleted.ok else OperationResult.miss()

        try:
            raw = self.store.get(key)
        except Exception as e:  # pylint: disable=broad-exception-caught
            self.statistics.record_failure("index")
            return OperationResult.failure(
                create_cache_error(ErrorCode.CACHE_READ_FAILED, key, "index_cache_load", e),
            )

        if raw is None:
            self.statistics.record_miss("index")
            return OperationResult.miss()

        try:
            envelope = decode_envelope(raw)
            entity_ids = list(envelope[CacheFields.ENTITY_IDS])
            expiration = envelope_expiration(envelope)
        except (orjson.JSONDecodeError, ValueError, KeyError, TypeError) as e:
            self.statistics.record_failure("index")
            deleted = self.delete(query_key)
            if deleted.error is not None:
                log_operation_warning(logger, deleted.error)
            return OperationResult.failure(
                create_cache_error(ErrorCode.CACHE_CORRUPTED, key, "index_cache_load", e),
            )

        if is_expired(expiration, self.clock):
            logger.debug("Index entry expired: %s", key[: Logging.KEY_PREVIEW_LENGTH])
            self.statistics.record_miss("index", expired=True)
            deleted = self.delete(query_key)
            return deleted if not deleted.ok else OperationResult.miss()

        self.statistics.record_hit("index")
        return OperationResult.success(self._replay(entity_type, entity_ids))

    def _replay(
        self,
        entity_type: str,
        entity_ids: Iterable[int | None],
    ) -> list[Entity | None]:
        results: list[Entity | None] = []
        for entity_id in entity_ids:
            if entity_id is None:
                results.append(None)
                continue
            item = self.entity_cache.load(entity_type, entity_id)
            if item.error is not None:
                log_operation_warning(logger, item.error, operation="index_cache_load")
            results.append(item.value)
        return results

    def save(
        self,
        query_key: str,
        entity_type: str,
        expiration: int,
        entities: Iterable[Entity],
    ) -> OperationResult[None]:
        """Store the ordered ids of a query result.

        Args:
            query_key: Opaque query key
            entity_type: Entity type of the listed entities
            expiration: Absolute epoch seconds, or 0 for never expires
            entities: Entities exactly as the query returned them

        Returns:
            Success, or a failure when the primary key is unknown or the
            write failed
        """
        key = index_cache_key(query_key)
        primary_key = self.primary_key_of(entity_type)
        if primary_key is None:
            return OperationResult.failure(
                DomainError(
                    code=ErrorCode.PRIMARY_KEY_UNRESOLVED,
                    message=f"index_cache_save - no primary key for {entity_type}",
                    context=ErrorContext(
                        operation="index_cache_save",
                        entity_type=entity_type,
                        additional_data={"key": key},
                    ),
                ),
            )

        envelope = {
            CacheFields.ENTITY_TYPE: entity_type,
            CacheFields.EXPIRATION: expiration,
            CacheFields.ENTITY_IDS: [entity.get(primary_key) for entity in entities],
        }

        try:
            raw = encode_envelope(envelope)
        except orjson.JSONEncodeError as e:
            return OperationResult.failure(
                create_cache_error(
                    ErrorCode.CACHE_SERIALIZATION_ERROR, key, "index_cache_save", e
                ),
            )

        try:
            self.store.set(key, raw)
        except Exception as e:  # pylint: disable=broad-exception-caught
            return OperationResult.failure(
                create_cache_error(ErrorCode.CACHE_WRITE_FAILED, key, "index_cache_save", e),
            )

        logger.debug(
            "Cached index %s (%d ids)",
            key[: Logging.KEY_PREVIEW_LENGTH],
            len(envelope[CacheFields.ENTITY_IDS]),
        )
        return OperationResult.success()

    def delete(self, query_key: str) -> OperationResult[None]:
        """Remove a cached index unconditionally."""
        key = index_cache_key(query_key)
        try:
            self.store.remove(key)
        except Exception as e:  # pylint: disable=broad-exception-caught
            return OperationResult.failure(
                create_cache_error(ErrorCode.CACHE_DELETE_FAILED, key, "index_cache_delete", e),
            )
        return OperationResult.success()
