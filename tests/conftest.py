"""
Pytest configuration and shared fixtures for EntityKit tests.

This module provides common fixtures: a controllable clock, an in-memory
store, a fake remote service whose requests stay pending until a test
resolves them, and a facade wired to all of them.
"""

from __future__ import annotations

from collections.abc import Generator
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import pytest

from entitykit.config.models import CacheSettings, Settings
from entitykit.core import EntityContext, EntityFacade
from entitykit.services import EntityTypeHandlers, EntityTypeRegistry
from entitykit.shared.constants import EntityTypes
from entitykit.shared.types import CallOptions
from entitykit.storage import MemoryKeyValueStore, SQLiteKeyValueStore

START_TIME = 1_700_000_000.0


class FakeClock:
    """Manually advanced epoch-seconds clock."""

    def __init__(self, now: float = START_TIME) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@dataclass
class RemoteCall:
    """One recorded remote handler invocation."""

    operation: str
    entity_type: str
    argument: Any
    options: CallOptions


@dataclass
class FakeRemote:
    """Remote service double; calls stay pending until resolved."""

    calls: list[RemoteCall] = field(default_factory=list)

    def calls_for(self, operation: str, entity_type: str | None = None) -> list[RemoteCall]:
        return [
            call
            for call in self.calls
            if call.operation == operation
            and (entity_type is None or call.entity_type == entity_type)
        ]

    def handlers(self, entity_type: str, primary_key: str | None = None) -> EntityTypeHandlers:
        def record(operation: str):
            def handler(argument: Any, options: CallOptions) -> None:
                self.calls.append(RemoteCall(operation, entity_type, argument, options))

            return handler

        return EntityTypeHandlers(
            entity_type=entity_type,
            retrieve=record("retrieve"),
            create=record("create"),
            update=record("update"),
            delete=record("delete"),
            primary_key=primary_key,
        )

    def resolve(self, call: RemoteCall, payload: Any) -> None:
        call.options.success(payload)

    def fail(self, call: RemoteCall, status: int, message: str) -> None:
        call.options.error({"transport": "xhr"}, status, message)


class Recorder:
    """Collects callback invocations in order."""

    def __init__(self) -> None:
        self.events: list[tuple[str, tuple[Any, ...]]] = []

    def success(self, label: str = "success"):
        def callback(payload: Any) -> None:
            self.events.append((label, (payload,)))

        return callback

    def error(self, label: str = "error"):
        def callback(handle: Any, status: int | None, message: str | None) -> None:
            self.events.append((label, (handle, status, message)))

        return callback

    def labels(self) -> list[str]:
        return [label for label, _ in self.events]


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store() -> MemoryKeyValueStore:
    return MemoryKeyValueStore()


@pytest.fixture
def sqlite_store(tmp_path: Path) -> Generator[SQLiteKeyValueStore, None, None]:
    db = SQLiteKeyValueStore(tmp_path / "cache" / "entitykit.db")
    yield db
    db.close()


@pytest.fixture
def settings() -> Settings:
    """Settings with entity caching switched on and a one hour TTL."""
    return Settings(cache=CacheSettings(enabled=True, expiration=3600))


@pytest.fixture
def remote() -> FakeRemote:
    return FakeRemote()


@pytest.fixture
def registry(remote: FakeRemote) -> EntityTypeRegistry:
    """Registry with every core entity type backed by the fake remote."""
    return EntityTypeRegistry(
        [
            remote.handlers(entity_type)
            for entity_type in (
                EntityTypes.COMMENT,
                EntityTypes.FILE,
                EntityTypes.NODE,
                EntityTypes.TAXONOMY_TERM,
                EntityTypes.TAXONOMY_VOCABULARY,
                EntityTypes.USER,
            )
        ]
    )


@pytest.fixture
def context(
    store: MemoryKeyValueStore,
    settings: Settings,
    registry: EntityTypeRegistry,
    clock: FakeClock,
) -> EntityContext:
    return EntityContext(store=store, settings=settings, registry=registry, clock=clock)


@pytest.fixture
def facade(context: EntityContext) -> EntityFacade:
    return EntityFacade(context)


@pytest.fixture
def recorder() -> Recorder:
    return Recorder()


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "integration: mark test as an integration test")
