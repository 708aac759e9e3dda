"""Tests for MemoryKeyValueStore."""

from __future__ import annotations

import pytest

from entitykit.shared.protocols import KeyValueStore
from entitykit.storage import MemoryKeyValueStore


class TestMemoryKeyValueStore:
    def test_satisfies_protocol(self, store) -> None:
        assert isinstance(store, KeyValueStore)

    def test_get_set_remove(self, store) -> None:
        assert store.get("k") is None

        store.set("k", "v")
        assert store.get("k") == "v"
        assert "k" in store

        store.remove("k")
        store.remove("k")
        assert store.get("k") is None

    def test_rejects_non_string_values(self, store) -> None:
        with pytest.raises(TypeError):
            store.set("k", {"nid": 1})

    def test_initial_contents_are_copied(self) -> None:
        initial = {"a": "1"}
        store = MemoryKeyValueStore(initial)
        store.set("b", "2")

        assert initial == {"a": "1"}
        assert len(store) == 2

    def test_keys_and_clear(self, store) -> None:
        store.set("node_2", "x")
        store.set("node_1", "x")
        store.set("user_1", "x")

        assert store.keys("node_") == ["node_1", "node_2"]
        assert store.clear() == 3
        assert len(store) == 0
