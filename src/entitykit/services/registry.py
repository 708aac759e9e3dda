"""Entity type registry.

Each entity type implementation registers the remote handlers it offers
(retrieve, create, update, delete) and, for types outside the fixed
primary-key table, its primary-key field name. A type is supported
exactly when it is registered.

Example:
    >>> registry = EntityTypeRegistry()
    >>> registry.register(
    ...     EntityTypeHandlers(
    ...         entity_type="node",
    ...         retrieve=node_retrieve,
    ...         create=node_create,
    ...         update=node_update,
    ...         delete=node_delete,
    ...     )
    ... )
    >>> registry.is_supported("node")
    True
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Any, Callable, Iterator

from entitykit.shared.constants import Operations
from entitykit.shared.types import CallOptions, Entity

logger = logging.getLogger(__name__)

RetrieveHandler = Callable[[int, CallOptions], None]
SaveHandler = Callable[[Entity, CallOptions], None]
DeleteHandler = Callable[[Any, CallOptions], None]


@dataclass(frozen=True)
class EntityTypeHandlers:
    """Remote handlers of one entity type.

    Every handler must eventually call ``options.success(payload)`` or
    ``options.error(transport_handle, status, message)`` exactly once.

    Attributes:
        entity_type: Type tag, e.g. "node"
        retrieve: Fetch one entity by id
        create: Create an entity that has no primary key yet
        update: Update an existing entity
        delete: Delete an entity by id
        primary_key: Primary-key field for types outside the fixed table
    """

    entity_type: str
    retrieve: RetrieveHandler | None = None
    create: SaveHandler | None = None
    update: SaveHandler | None = None
    delete: DeleteHandler | None = None
    primary_key: str | None = None

    def handler(self, operation: str) -> Callable[..., None] | None:
        """Return the handler for an operation name, or None."""
        if operation not in (
            Operations.RETRIEVE,
            Operations.CREATE,
            Operations.UPDATE,
            Operations.DELETE,
        ):
            return None
        return getattr(self, operation)


class EntityTypeRegistry:
    """Table of registered entity types."""

    def __init__(self, handlers: list[EntityTypeHandlers] | None = None) -> None:
        self._types: dict[str, EntityTypeHandlers] = {}
        self._lock = threading.Lock()
        for entry in handlers or []:
            self.register(entry)

    def register(self, handlers: EntityTypeHandlers) -> None:
        """Register (or replace) the handlers of an entity type."""
        with self._lock:
            replaced = handlers.entity_type in self._types
            self._types[handlers.entity_type] = handlers
        logger.debug(
            "%s entity type: %s",
            "Replaced" if replaced else "Registered",
            handlers.entity_type,
        )

    def unregister(self, entity_type: str) -> bool:
        """Remove an entity type. Returns True if it was registered."""
        with self._lock:
            return self._types.pop(entity_type, None) is not None

    def get(self, entity_type: str) -> EntityTypeHandlers | None:
        """Return the handlers of an entity type, or None if unsupported."""
        with self._lock:
            return self._types.get(entity_type)

    def is_supported(self, entity_type: str) -> bool:
        with self._lock:
            return entity_type in self._types

    def types(self) -> list[str]:
        """Return registered entity types in registration order."""
        with self._lock:
            return list(self._types)

    def __contains__(self, entity_type: object) -> bool:
        return isinstance(entity_type, str) and self.is_supported(entity_type)

    def __iter__(self) -> Iterator[EntityTypeHandlers]:
        with self._lock:
            return iter(list(self._types.values()))

    def __len__(self) -> int:
        with self._lock:
            return len(self._types)
