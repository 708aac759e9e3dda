"""Entity cache store.

This module keeps serialized copies of single entities in a persisted
key/value store under ``<entity_type>_<id>``, each with an absolute
expiration attached. Every operation reports through OperationResult;
storage and serialization faults never escape as exceptions.
"""

from __future__ import annotations

import logging
import time
from typing import Callable

import orjson

from entitykit.services.codec import (
    decode_envelope,
    encode_envelope,
    envelope_expiration,
)
from entitykit.services.expiration import Clock, is_expired
from entitykit.services.statistics import CacheStatistics
from entitykit.shared.constants import Cache, CacheFields, Logging
from entitykit.shared.errors import ErrorCode, create_cache_error
from entitykit.shared.logging import log_operation_warning
from entitykit.shared.protocols import KeyValueStore
from entitykit.shared.result import OperationResult
from entitykit.shared.types import Entity, PageOptions

logger = logging.getLogger(__name__)

PageOptionsProvider = Callable[[], PageOptions]


def entity_cache_key(entity_type: str, entity_id: int | str | None) -> str:
    """Return the storage key for one entity.

    Example:
        >>> entity_cache_key("node", 123)
        'node_123'
    """
    return f"{entity_type}{Cache.KEY_SEPARATOR}{entity_id}"


class EntityCacheStore:
    """TTL-enforcing cache of single entities.

    Args:
        store: Persisted key/value store holding the serialized entries
        clock: Time source returning epoch seconds
        page_options: Provider of the current page-lifecycle hints
        statistics: Optional lookup counters
    """

    def __init__(
        self,
        store: KeyValueStore,
        *,
        clock: Clock = time.time,
        page_options: PageOptionsProvider | None = None,
        statistics: CacheStatistics | None = None,
    ) -> None:
        self.store = store
        self.clock = clock
        self.page_options = page_options
        self.statistics = statistics or CacheStatistics()

    def load(
        self,
        entity_type: str,
        entity_id: int,
        reset: bool = False,
    ) -> OperationResult[Entity]:
        """Load an entity from the cache.

        A reset deletes the entry and reports a miss. An expired entry is
        deleted and reported as a miss. During a page reload a still-valid
        entry is only reused when the page hints explicitly say
        ``reset=False``; otherwise it is dropped.

        Args:
            entity_type: Entity type
            entity_id: Entity id
            reset: Drop any cached copy instead of reading it

        Returns:
            Hit with the entity, a miss, or a failure degraded to a miss
        """
        key = entity_cache_key(entity_type, entity_id)

        if reset:
            deleted = self.delete(entity_type, entity_id)
            self.statistics.record_miss()
            return deleted if not deleted.ok else OperationResult.miss()

        try:
            raw = self.store.get(key)
        except Exception as e:  # pylint: disable=broad-exception-caught
            self.statistics.record_failure()
            return OperationResult.failure(
                create_cache_error(ErrorCode.CACHE_READ_FAILED, key, "entity_cache_load", e),
            )

        if raw is None:
            self.statistics.record_miss()
            return OperationResult.miss()

        try:
            envelope = decode_envelope(raw)
            entity = envelope[CacheFields.DATA]
            if not isinstance(entity, dict):
                msg = f"cached entity must be an object, got {type(entity).__name__}"
                raise TypeError(msg)
            expiration = envelope_expiration(envelope)
        except (orjson.JSONDecodeError, ValueError, KeyError, TypeError) as e:
            self.statistics.record_failure()
            self._discard(entity_type, entity_id)
            return OperationResult.failure(
                create_cache_error(ErrorCode.CACHE_CORRUPTED, key, "entity_cache_load", e),
            )

        if is_expired(expiration, self.clock):
            logger.debug("Cache entry expired: %s", key[: Logging.KEY_PREVIEW_LENGTH])
            self.statistics.record_miss(expired=True)
            deleted = self.delete(entity_type, entity_id)
            return deleted if not deleted.ok else OperationResult.miss()

        page = self.page_options() if self.page_options is not None else None
        if page is not None and page.reloading_page and page.reset is not False:
            logger.debug("Page reload, dropping cached copy: %s", key)
            self.statistics.record_miss()
            deleted = self.delete(entity_type, entity_id)
            return deleted if not deleted.ok else OperationResult.miss()

        self.statistics.record_hit()
        logger.debug("Cache hit: %s", key[: Logging.KEY_PREVIEW_LENGTH])
        return OperationResult.success(entity)

    def save(
        self,
        entity_type: str,
        entity_id: int | None,
        entity: Entity,
        expiration: int,
    ) -> OperationResult[None]:
        """Store an entity with its expiration, overwriting any prior copy.

        Args:
            entity_type: Entity type
            entity_id: Entity id
            entity: Entity fields
            expiration: Absolute epoch seconds, or 0 for never expires

        Returns:
            Success, or a failure when serialization or the write failed
        """
        key = entity_cache_key(entity_type, entity_id)
        envelope = {CacheFields.DATA: entity, CacheFields.EXPIRATION: expiration}

        try:
            raw = encode_envelope(envelope)
        except orjson.JSONEncodeError as e:
            return OperationResult.failure(
                create_cache_error(
                    ErrorCode.CACHE_SERIALIZATION_ERROR, key, "entity_cache_save", e
                ),
            )

        try:
            self.store.set(key, raw)
        except Exception as e:  # pylint: disable=broad-exception-caught
            return OperationResult.failure(
                create_cache_error(ErrorCode.CACHE_WRITE_FAILED, key, "entity_cache_save", e),
            )

        logger.debug("Cached %s (expiration=%s)", key, expiration)
        return OperationResult.success()

    def _discard(self, entity_type: str, entity_id: int | None) -> None:
        """Drop an unreadable entry so the next load goes to the remote service."""
        deleted = self.delete(entity_type, entity_id)
        if deleted.error is not None:
            log_operation_warning(logger, deleted.error)

    def delete(self, entity_type: str, entity_id: int | None) -> OperationResult[None]:
        """Remove an entity's cached copy. Missing entries are not an error."""
        key = entity_cache_key(entity_type, entity_id)
        try:
            self.store.remove(key)
        except Exception as e:  # pylint: disable=broad-exception-caught
            return OperationResult.failure(
                create_cache_error(ErrorCode.CACHE_DELETE_FAILED, key, "entity_cache_delete", e),
            )
        return OperationResult.success()
