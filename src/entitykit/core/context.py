"""Entity context.

Bundles the shared state the facade works against: the persisted store,
the request queue, the type registry, live settings and the page hints
supplied by the surrounding UI. One context is created per process (or
per test) and handed to EntityFacade explicitly.
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass, field
from pathlib import Path

from entitykit.config.models.settings import Settings
from entitykit.services.expiration import Clock
from entitykit.services.registry import EntityTypeRegistry
from entitykit.services.request_queue import RequestQueue
from entitykit.services.statistics import CacheStatistics
from entitykit.shared.protocols import KeyValueStore
from entitykit.shared.types import PageOptions
from entitykit.storage import MemoryKeyValueStore, SQLiteKeyValueStore

logger = logging.getLogger(__name__)


@dataclass
class EntityContext:
    """Shared state for one EntityFacade.

    Attributes:
        store: Persisted key/value store for entity and index caches
        settings: Live settings; cache values are read at every decision
        registry: Registered entity types and their remote handlers
        queue: In-flight request registry
        statistics: Cache lookup counters
        clock: Time source returning epoch seconds
    """

    store: KeyValueStore = field(default_factory=MemoryKeyValueStore)
    settings: Settings = field(default_factory=Settings)
    registry: EntityTypeRegistry = field(default_factory=EntityTypeRegistry)
    queue: RequestQueue = field(default_factory=RequestQueue)
    statistics: CacheStatistics = field(default_factory=CacheStatistics)
    clock: Clock = time.time
    _page_options: PageOptions = field(default_factory=PageOptions, repr=False)
    _page_lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        registry: EntityTypeRegistry | None = None,
    ) -> EntityContext:
        """Build a context backed by the SQLite store named in settings."""
        db_path = Path(settings.cache.db_path)
        logger.info("Opening entity cache store at %s", db_path)
        return cls(
            store=SQLiteKeyValueStore(db_path),
            settings=settings,
            registry=registry if registry is not None else EntityTypeRegistry(),
        )

    @property
    def caching_enabled(self) -> bool:
        return bool(self.settings.cache.enabled)

    @property
    def cache_expiration(self) -> int:
        return int(self.settings.cache.expiration)

    def page_options(self) -> PageOptions:
        """Return the current page-lifecycle hints."""
        with self._page_lock:
            return self._page_options

    def set_page_options(self, options: PageOptions) -> None:
        """Replace the page-lifecycle hints, e.g. when a page starts loading."""
        with self._page_lock:
            self._page_options = options

    def close(self) -> None:
        """Close the store when it holds external resources."""
        close = getattr(self.store, "close", None)
        if callable(close):
            close()
