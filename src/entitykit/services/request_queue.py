"""Request deduplication queue.

Registry of in-flight remote requests keyed by (entity type, operation,
entity id). The first caller for a key triggers the one outbound call;
later callers for the same key park their callbacks on the entry and are
served when the call succeeds.

Entries are never garbage-collected. A successful drain only empties the
success list and marks the entry idle; a request that never succeeds
keeps its entry in flight for the lifetime of the registry.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Callable, NamedTuple

from entitykit.shared.constants import CallbackKinds

logger = logging.getLogger(__name__)

Callback = Callable[..., None]


class QueueKey(NamedTuple):
    """Identity of one logical in-flight request."""

    entity_type: str
    operation: str
    entity_id: int


@dataclass
class QueueEntry:
    """Callbacks waiting on one in-flight request.

    Attributes:
        success: Success callbacks in registration order
        error: Error callbacks in registration order; these are kept but
            never fanned out, only the triggering caller's error callback
            is invoked by the remote handler
        in_flight: True between enqueue and the successful drain
    """

    success: list[Callback] = field(default_factory=list)
    error: list[Callback] = field(default_factory=list)
    in_flight: bool = True


class RequestQueue:
    """Process-wide registry of in-flight requests.

    All reads and mutations are serialized by one re-entrant lock so the
    registry keeps single-threaded ordering when callbacks run on worker
    threads. Callbacks are never invoked while the lock is held.
    """

    def __init__(self) -> None:
        self._entries: dict[QueueKey, QueueEntry] = {}
        self._lock = threading.RLock()

    def is_queued(self, entity_type: str, operation: str, entity_id: int) -> bool:
        """Return True while a request for this key is awaiting its result."""
        with self._lock:
            entry = self._entries.get(QueueKey(entity_type, operation, entity_id))
            return entry is not None and entry.in_flight

    def enqueue(self, entity_type: str, operation: str, entity_id: int) -> None:
        """Create the entry for a key, or re-arm an idle one.

        A key that is already in flight is left untouched.
        """
        key = QueueKey(entity_type, operation, entity_id)
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self._entries[key] = QueueEntry()
                logger.debug("Queued %s", key)
            elif not entry.in_flight:
                entry.in_flight = True
                logger.debug("Re-queued %s", key)

    def add_callback(
        self,
        entity_type: str,
        operation: str,
        entity_id: int,
        kind: str,
        callback: Callback,
    ) -> None:
        """Append a callback to the success or error list of a key.

        Raises:
            ValueError: If kind is neither "success" nor "error"
        """
        if kind not in (CallbackKinds.SUCCESS, CallbackKinds.ERROR):
            msg = f"Unknown callback kind: {kind!r}"
            raise ValueError(msg)

        key = QueueKey(entity_type, operation, entity_id)
        with self._lock:
            entry = self._entries.setdefault(key, QueueEntry())
            getattr(entry, kind).append(callback)

    def drain_success(
        self,
        entity_type: str,
        operation: str,
        entity_id: int,
    ) -> list[Callback]:
        """Take the success callbacks of a key in registration order.

        The success list is cleared and the entry marked idle; the error
        list is left as it is.
        """
        key = QueueKey(entity_type, operation, entity_id)
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return []
            callbacks = entry.success
            entry.success = []
            entry.in_flight = False
        logger.debug("Drained %d callback(s) for %s", len(callbacks), key)
        return callbacks

    def pending(
        self,
        entity_type: str,
        operation: str,
        entity_id: int,
    ) -> tuple[int, int]:
        """Return (success, error) callback counts registered for a key."""
        with self._lock:
            entry = self._entries.get(QueueKey(entity_type, operation, entity_id))
            if entry is None:
                return (0, 0)
            return (len(entry.success), len(entry.error))

    def clear(self) -> None:
        """Forget every entry, in flight or idle."""
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries
