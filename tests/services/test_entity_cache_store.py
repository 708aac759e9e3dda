"""Tests for EntityCacheStore.

Tests follow the Failure-First pattern:
1. Test failure cases first
2. Test edge cases
3. Test happy path
"""

from __future__ import annotations

import orjson
import pytest

from entitykit.services.entity_cache import EntityCacheStore, entity_cache_key
from entitykit.services.expiration import current_time
from entitykit.shared.errors import CacheError, ErrorCode
from entitykit.shared.types import PageOptions


@pytest.fixture
def cache(store, clock) -> EntityCacheStore:
    return EntityCacheStore(store, clock=clock)


class BrokenStore:
    """Store whose every operation fails."""

    def get(self, key: str) -> str | None:
        raise OSError("disk unavailable")

    def set(self, key: str, value: str) -> None:
        raise OSError("quota exceeded")

    def remove(self, key: str) -> None:
        raise OSError("disk unavailable")


class TestEntityCacheStoreFailures:
    """Storage faults degrade to misses with a described failure."""

    def test_read_failure_is_reported_not_raised(self, clock) -> None:
        cache = EntityCacheStore(BrokenStore(), clock=clock)

        result = cache.load("node", 1)

        assert result.hit is False
        assert isinstance(result.error, CacheError)
        assert result.error.code == ErrorCode.CACHE_READ_FAILED
        assert cache.statistics.entity.failures == 1

    def test_write_failure_is_reported_not_raised(self, clock) -> None:
        cache = EntityCacheStore(BrokenStore(), clock=clock)

        result = cache.save("node", 1, {"nid": 1}, 0)

        assert result.ok is False
        assert result.error.code == ErrorCode.CACHE_WRITE_FAILED

    def test_unserializable_entity_is_reported(self, cache, store) -> None:
        result = cache.save("node", 1, {"nid": 1, "blob": object()}, 0)

        assert result.error.code == ErrorCode.CACHE_SERIALIZATION_ERROR
        assert store.get("node_1") is None

    def test_corrupted_entry_is_a_miss(self, cache, store) -> None:
        store.set("node_1", "{not json")

        result = cache.load("node", 1)

        assert result.hit is False
        assert result.error.code == ErrorCode.CACHE_CORRUPTED

    @pytest.mark.parametrize("expiration", ['"soon"', "1.5", "true", "[1]", '{"at": 1}'])
    def test_non_integer_expiration_is_corruption(self, cache, store, expiration) -> None:
        # Given
        store.set("node_1", f'{{"data": {{"nid": 1}}, "expiration": {expiration}}}')

        # When
        result = cache.load("node", 1)

        # Then
        assert result.hit is False
        assert result.error.code == ErrorCode.CACHE_CORRUPTED
        assert store.get("node_1") is None

    def test_corrupted_entry_is_discarded(self, cache, store) -> None:
        store.set("node_1", "{not json")

        cache.load("node", 1)

        assert store.get("node_1") is None
        assert cache.load("node", 1).ok is True

    def test_delete_failure_is_reported(self, clock) -> None:
        result = EntityCacheStore(BrokenStore(), clock=clock).delete("node", 1)

        assert result.error.code == ErrorCode.CACHE_DELETE_FAILED


class TestEntityCacheStoreExpiration:
    """Expired entries are never served and are removed on read."""

    def test_expired_entry_is_deleted_on_read(self, cache, store, clock) -> None:
        # Given
        cache.save("node", 1, {"nid": 1}, current_time(clock) + 60)

        # When
        clock.advance(61)
        result = cache.load("node", 1)

        # Then
        assert result.hit is False
        assert result.ok is True
        assert store.get("node_1") is None
        assert cache.statistics.entity.expired == 1

    def test_entry_valid_until_expiration_second(self, cache, clock) -> None:
        cache.save("node", 1, {"nid": 1}, current_time(clock) + 60)

        clock.advance(60)

        assert cache.load("node", 1).value == {"nid": 1}

    def test_never_expiring_entry_survives(self, cache, clock) -> None:
        cache.save("node", 1, {"nid": 1}, 0)

        clock.advance(100 * 365 * 86400)

        assert cache.load("node", 1).value == {"nid": 1}


class TestEntityCacheStoreReset:
    """Reset and page reload hints."""

    def test_reset_deletes_valid_entry(self, cache, store) -> None:
        cache.save("node", 1, {"nid": 1}, 0)

        result = cache.load("node", 1, reset=True)

        assert result.hit is False
        assert store.get("node_1") is None

    def test_page_reload_drops_cached_copy(self, store, clock) -> None:
        cache = EntityCacheStore(
            store, clock=clock, page_options=lambda: PageOptions(reloading_page=True)
        )
        cache.save("node", 1, {"nid": 1}, 0)

        assert cache.load("node", 1).hit is False
        assert store.get("node_1") is None

    def test_page_reload_with_explicit_no_reset_keeps_copy(self, store, clock) -> None:
        cache = EntityCacheStore(
            store,
            clock=clock,
            page_options=lambda: PageOptions(reloading_page=True, reset=False),
        )
        cache.save("node", 1, {"nid": 1}, 0)

        assert cache.load("node", 1).value == {"nid": 1}

    def test_no_reload_keeps_copy(self, store, clock) -> None:
        cache = EntityCacheStore(store, clock=clock, page_options=PageOptions)
        cache.save("node", 1, {"nid": 1}, 0)

        assert cache.load("node", 1).hit is True


class TestEntityCacheStoreHappyPath:
    """Round trips through the persisted store."""

    def test_storage_key_layout(self) -> None:
        assert entity_cache_key("taxonomy_term", 42) == "taxonomy_term_42"

    def test_save_persists_envelope(self, cache, store) -> None:
        cache.save("user", 7, {"uid": 7, "name": "admin"}, 1234)

        envelope = orjson.loads(store.get("user_7"))

        assert envelope == {"data": {"uid": 7, "name": "admin"}, "expiration": 1234}

    def test_save_overwrites(self, cache) -> None:
        cache.save("node", 1, {"nid": 1, "title": "old"}, 0)
        cache.save("node", 1, {"nid": 1, "title": "new"}, 0)

        assert cache.load("node", 1).value["title"] == "new"

    def test_delete_is_idempotent(self, cache) -> None:
        assert cache.delete("node", 404).ok is True
        assert cache.delete("node", 404).ok is True

    def test_unicode_fields_survive(self, cache) -> None:
        entity = {"nid": 3, "title": "Ünïcödé 日本語", "body": {"und": [{"value": "x"}]}}
        cache.save("node", 3, entity, 0)

        assert cache.load("node", 3).value == entity
