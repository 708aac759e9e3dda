"""Cache statistics collection."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Any


@dataclass
class CacheCounters:
    """Lookup outcome counters for one cache."""

    hits: int = 0
    misses: int = 0
    expired: int = 0
    failures: int = 0

    @property
    def hit_ratio(self) -> float:
        """Fraction of lookups served from cache."""
        total = self.hits + self.misses
        return self.hits / total if total > 0 else 0.0

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "hits": self.hits,
            "misses": self.misses,
            "expired": self.expired,
            "failures": self.failures,
            "hit_ratio": f"{self.hit_ratio:.2%}",
        }


@dataclass
class CacheStatistics:
    """Central aggregator for entity and index cache lookups.

    Expired reads are counted both as ``expired`` and as ``misses``.
    """

    entity: CacheCounters = field(default_factory=CacheCounters)
    index: CacheCounters = field(default_factory=CacheCounters)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def _counters(self, cache: str) -> CacheCounters:
        return self.index if cache == "index" else self.entity

    def record_hit(self, cache: str = "entity") -> None:
        with self._lock:
            self._counters(cache).hits += 1

    def record_miss(self, cache: str = "entity", *, expired: bool = False) -> None:
        with self._lock:
            counters = self._counters(cache)
            counters.misses += 1
            if expired:
                counters.expired += 1

    def record_failure(self, cache: str = "entity") -> None:
        with self._lock:
            self._counters(cache).failures += 1

    def reset(self) -> None:
        """Reset all counters to zero."""
        with self._lock:
            self.entity = CacheCounters()
            self.index = CacheCounters()

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        with self._lock:
            return {"entity": self.entity.to_dict(), "index": self.index.to_dict()}
