"""Tests for IndexCacheStore."""

from __future__ import annotations

import orjson
import pytest

from entitykit.services.entity_cache import EntityCacheStore
from entitykit.services.expiration import current_time
from entitykit.services.index_cache import IndexCacheStore
from entitykit.shared.constants import PRIMARY_KEYS
from entitykit.shared.errors import ErrorCode

QUERY = "entity_node.json?parameters[type]=article&page=0"


@pytest.fixture
def entity_cache(store, clock) -> EntityCacheStore:
    return EntityCacheStore(store, clock=clock)


@pytest.fixture
def index_cache(store, entity_cache, clock) -> IndexCacheStore:
    return IndexCacheStore(store, entity_cache, PRIMARY_KEYS.get, clock=clock)


def _nodes(*ids: int) -> list[dict]:
    return [{"nid": nid, "title": f"Node {nid}"} for nid in ids]


def _cache_entities(entity_cache: EntityCacheStore, entities: list[dict]) -> None:
    for entity in entities:
        entity_cache.save("node", entity["nid"], entity, 0)


class TestIndexCacheStore:
    """Index save/load and reconstruction."""

    def test_missing_index_is_a_miss(self, index_cache) -> None:
        result = index_cache.load(QUERY, "node")

        assert result.hit is False
        assert result.ok is True

    def test_save_stores_ordered_ids(self, index_cache, store) -> None:
        index_cache.save(QUERY, "node", 0, _nodes(10, 11, 12))

        envelope = orjson.loads(store.get(QUERY))

        assert envelope == {
            "entity_type": "node",
            "expiration": 0,
            "entity_ids": [10, 11, 12],
        }

    def test_load_reconstructs_entities_in_order(
        self, index_cache, entity_cache
    ) -> None:
        # Given
        entities = _nodes(10, 11, 12)
        _cache_entities(entity_cache, entities)
        index_cache.save(QUERY, "node", 0, entities)

        # When
        result = index_cache.load(QUERY, "node")

        # Then
        assert result.value == entities

    def test_individually_deleted_entity_becomes_miss_marker(
        self, index_cache, entity_cache
    ) -> None:
        # Given
        entities = _nodes(10, 11, 12)
        _cache_entities(entity_cache, entities)
        index_cache.save(QUERY, "node", 0, entities)

        # When
        entity_cache.delete("node", 11)
        result = index_cache.load(QUERY, "node")

        # Then
        assert result.value == [entities[0], None, entities[2]]

    def test_expired_index_is_deleted(self, index_cache, store, clock) -> None:
        index_cache.save(QUERY, "node", current_time(clock) + 5, _nodes(1))

        clock.advance(6)

        assert index_cache.load(QUERY, "node").hit is False
        assert store.get(QUERY) is None

    def test_reset_drops_index(self, index_cache, store) -> None:
        index_cache.save(QUERY, "node", 0, _nodes(1))

        assert index_cache.load(QUERY, "node", reset=True).hit is False
        assert store.get(QUERY) is None

    def test_empty_result_is_a_hit(self, index_cache) -> None:
        index_cache.save(QUERY, "node", 0, [])

        result = index_cache.load(QUERY, "node")

        assert result.hit is True
        assert result.value == []

    def test_unknown_primary_key_is_reported(self, index_cache, store) -> None:
        result = index_cache.save(QUERY, "widget", 0, [{"wid": 1}])

        assert result.error.code == ErrorCode.PRIMARY_KEY_UNRESOLVED
        assert store.get(QUERY) is None

    def test_corrupted_index_is_reported(self, index_cache, store) -> None:
        store.set(QUERY, '{"entity_type": "node"}')

        result = index_cache.load(QUERY, "node")

        assert result.error.code == ErrorCode.CACHE_CORRUPTED

    def test_non_integer_expiration_is_corruption(self, index_cache, store) -> None:
        store.set(
            QUERY,
            '{"entity_type": "node", "expiration": "soon", "entity_ids": [1]}',
        )

        result = index_cache.load(QUERY, "node")

        assert result.error.code == ErrorCode.CACHE_CORRUPTED
        assert store.get(QUERY) is None
        assert index_cache.load(QUERY, "node").ok is True

    def test_delete_is_unconditional(self, index_cache, store) -> None:
        index_cache.save(QUERY, "node", 0, _nodes(1))

        assert index_cache.delete(QUERY).ok is True
        assert index_cache.delete(QUERY).ok is True
        assert store.get(QUERY) is None
