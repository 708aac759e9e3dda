"""Entity facade.

Public entry point for loading, saving and deleting entities of the
remote service. Loads go through the request queue, so concurrent callers
asking for the same entity share one remote retrieve, and through the
entity cache when caching is enabled.

Every public operation is a fault boundary: unexpected errors are logged
and the call returns None. Declared failures (bad id, unsupported type,
missing handler) are logged as warnings and reported to the caller's
error callback as ``(None, None, message)``.
"""

from __future__ import annotations

import logging
from typing import Any

from entitykit.core.context import EntityContext
from entitykit.services.entity_cache import EntityCacheStore
from entitykit.services.expiration import compute_expiration
from entitykit.services.index_cache import IndexCacheStore
from entitykit.shared.constants import (
    CREATE_ONLY_TYPES,
    PRIMARY_KEYS,
    CallbackKinds,
    EntityFields,
    EntityTypes,
    Operations,
)
from entitykit.shared.error_handling import (
    handle_operation_errors,
    log_error_with_context,
    map_exception_to_entitykit_error,
)
from entitykit.shared.errors import (
    DomainError,
    EntityKitError,
    ErrorCode,
    ErrorContext,
    create_handler_not_found_error,
    create_unsupported_type_error,
)
from entitykit.shared.logging import log_operation_warning
from entitykit.shared.result import OperationResult
from entitykit.shared.types import (
    CallOptions,
    Entity,
    ErrorCallback,
    is_entity_id,
    parse_entity_id,
)

logger = logging.getLogger(__name__)


class EntityFacade:
    """Load, save and delete entities against the remote service.

    Args:
        context: Shared store, queue, registry and settings

    Example:
        >>> facade = EntityFacade(EntityContext(registry=registry))
        >>> facade.load("node", 123, CallOptions(success=print))
    """

    def __init__(self, context: EntityContext) -> None:
        self.context = context
        self.entity_cache = EntityCacheStore(
            context.store,
            clock=context.clock,
            page_options=context.page_options,
            statistics=context.statistics,
        )
        self.index_cache = IndexCacheStore(
            context.store,
            self.entity_cache,
            self.primary_key_of,
            clock=context.clock,
            statistics=context.statistics,
        )

    # ------------------------------------------------------------------ load

    @handle_operation_errors(operation="entity_load")
    def load(
        self,
        entity_type: str,
        entity_id: Any,
        options: CallOptions | None = None,
    ) -> None:
        """Load one entity and deliver it to ``options.success``.

        A valid cached copy is delivered immediately. Otherwise, if a
        retrieve for the same entity is already in flight, the caller's
        callbacks join that request; if not, a retrieve is dispatched and
        its result is cached (when enabled) and fanned out to every
        queued success callback in registration order. Network errors go
        only to the error callback of the caller that dispatched.

        Args:
            entity_type: Entity type, e.g. "node"
            entity_id: A single integer-like id
            options: Caller callbacks and the reset flag
        """
        options = options or CallOptions()

        if not is_entity_id(entity_id):
            self._declare_failure(
                options,
                DomainError(
                    code=ErrorCode.INVALID_ENTITY_ID,
                    message=f"entity_load({entity_type}) - only single ids supported!",
                    context=ErrorContext(
                        operation="entity_load",
                        entity_type=entity_type,
                        additional_data={"entity_id": repr(entity_id)},
                    ),
                ),
            )
            return

        entity_id = parse_entity_id(entity_id)
        queue = self.context.queue

        if queue.is_queued(entity_type, Operations.RETRIEVE, entity_id):
            if self.context.caching_enabled:
                cached = self._cached_entity(entity_type, entity_id, options.reset)
                if cached is not None:
                    options.notify_success(cached)
                    return
            if options.success is not None:
                queue.add_callback(
                    entity_type,
                    Operations.RETRIEVE,
                    entity_id,
                    CallbackKinds.SUCCESS,
                    options.success,
                )
            if options.error is not None:
                queue.add_callback(
                    entity_type,
                    Operations.RETRIEVE,
                    entity_id,
                    CallbackKinds.ERROR,
                    options.error,
                )
            return

        if self.context.caching_enabled:
            cached = self._cached_entity(entity_type, entity_id, options.reset)
            if cached is not None:
                options.notify_success(cached)
                return

        handlers = self.context.registry.get(entity_type)
        if handlers is None:
            self._declare_failure(
                options,
                create_unsupported_type_error(entity_type, "entity_load"),
            )
            return
        if handlers.retrieve is None:
            self._declare_failure(
                options,
                create_handler_not_found_error(
                    entity_type, Operations.RETRIEVE, "entity_load"
                ),
            )
            return

        queue.enqueue(entity_type, Operations.RETRIEVE, entity_id)
        if options.success is not None:
            queue.add_callback(
                entity_type,
                Operations.RETRIEVE,
                entity_id,
                CallbackKinds.SUCCESS,
                options.success,
            )

        call_options = CallOptions(
            success=lambda data: self._retrieve_succeeded(entity_type, entity_id, data),
            error=_forward_error(options),
        )
        primary_key = self.primary_key_of(entity_type)
        if primary_key is not None:
            call_options.params[primary_key] = entity_id

        logger.debug("Dispatching %s retrieve for id %d", entity_type, entity_id)
        handlers.retrieve(entity_id, call_options)

    @handle_operation_errors(operation="entity_load - success")
    def _retrieve_succeeded(self, entity_type: str, entity_id: int, data: Entity) -> None:
        if self.context.caching_enabled:
            expiration = compute_expiration(
                self.context.cache_expiration,
                self.context.caching_enabled,
                self.context.clock,
            )
            if expiration is not None:
                self._report(
                    self.entity_cache.save(entity_type, entity_id, data, expiration),
                )

        callbacks = self.context.queue.drain_success(
            entity_type, Operations.RETRIEVE, entity_id
        )
        for callback in callbacks:
            try:
                callback(data)
            except Exception as e:  # pylint: disable=broad-exception-caught
                log_error_with_context(
                    map_exception_to_entitykit_error(e, "entity_load - success"),
                    "entity_load - success",
                    additional_context={"entity_type": entity_type, "entity_id": entity_id},
                )

    def _cached_entity(
        self,
        entity_type: str,
        entity_id: int,
        reset: bool,
    ) -> Entity | None:
        result = self.entity_cache.load(entity_type, entity_id, reset)
        self._report(result)
        return result.value

    # ------------------------------------------------------- save / delete

    @handle_operation_errors(operation="entity_save")
    def save(
        self,
        entity_type: str,
        bundle: str | None,
        entity: Entity,
        options: CallOptions | None = None,
    ) -> None:
        """Create or update an entity through its type's remote handler.

        An entity without a value in its primary-key field is created,
        otherwise updated; file entities are always created. Node
        entities without a language get the configured default language.
        The cache is not touched.

        Args:
            entity_type: Entity type
            bundle: Bundle (content type) name; handlers read it from the entity
            entity: Entity fields, modified in place when a language is injected
            options: Caller callbacks, handed to the remote handler as-is
        """
        options = options or CallOptions()

        handlers = self.context.registry.get(entity_type)
        if handlers is None:
            self._declare_failure(
                options,
                create_unsupported_type_error(entity_type, "entity_save"),
            )
            return

        if entity_type == EntityTypes.NODE and not entity.get(EntityFields.LANGUAGE):
            entity[EntityFields.LANGUAGE] = self.context.settings.entity.default_language

        operation = self._save_operation(entity_type, entity)
        handler = handlers.handler(operation)
        if handler is None:
            self._declare_failure(
                options,
                create_handler_not_found_error(entity_type, operation, "entity_save"),
            )
            return

        logger.debug("Dispatching %s %s (bundle=%s)", entity_type, operation, bundle)
        handler(entity, options)

    def _save_operation(self, entity_type: str, entity: Entity) -> str:
        if entity_type in CREATE_ONLY_TYPES:
            return Operations.CREATE
        primary_key = self.primary_key_of(entity_type)
        if primary_key is not None and entity.get(primary_key):
            return Operations.UPDATE
        return Operations.CREATE

    @handle_operation_errors(operation="entity_delete")
    def delete(
        self,
        entity_type: str,
        entity_id: Any,
        options: CallOptions | None = None,
    ) -> None:
        """Delete an entity through its type's remote handler.

        The cached copy and any in-flight queue entry are left untouched;
        call ``invalidate`` to drop the cached copy.
        """
        options = options or CallOptions()

        handlers = self.context.registry.get(entity_type)
        if handlers is None:
            self._declare_failure(
                options,
                create_unsupported_type_error(entity_type, "entity_delete"),
            )
            return
        if handlers.delete is None:
            self._declare_failure(
                options,
                create_handler_not_found_error(
                    entity_type, Operations.DELETE, "entity_delete"
                ),
            )
            return

        handlers.delete(entity_id, options)

    # --------------------------------------------------------- primary keys

    @handle_operation_errors(operation="entity_primary_key")
    def primary_key_of(self, entity_type: str) -> str | None:
        """Return the primary-key field name of an entity type.

        The fixed table covers the core types; any other type must declare
        ``primary_key`` when it registers. Unresolved types log a warning
        and return None.
        """
        primary_key = PRIMARY_KEYS.get(entity_type)
        if primary_key is not None:
            return primary_key

        handlers = self.context.registry.get(entity_type)
        if handlers is not None and handlers.primary_key:
            return handlers.primary_key

        log_operation_warning(
            logger,
            DomainError(
                code=ErrorCode.PRIMARY_KEY_UNRESOLVED,
                message=(
                    f"entity_primary_key - unsupported entity type ({entity_type}) - "
                    "to add support, register its EntityTypeHandlers with a primary_key"
                ),
                context=ErrorContext(
                    operation="entity_primary_key", entity_type=entity_type
                ),
            ),
        )
        return None

    def supported_types(self) -> list[str]:
        """Return the registered entity types."""
        return self.context.registry.types()

    # ------------------------------------------------- cache maintenance

    @handle_operation_errors(operation="entity_invalidate")
    def invalidate(self, entity_type: str, entity_id: Any) -> bool:
        """Drop an entity's cached copy. Returns True when the delete succeeded."""
        result = self.entity_cache.delete(entity_type, parse_entity_id(entity_id))
        self._report(result)
        return result.ok

    @handle_operation_errors(operation="entity_index_load")
    def cached_index(
        self,
        entity_type: str,
        query_key: str,
        reset: bool = False,
    ) -> list[Entity | None] | None:
        """Return a cached query result, or None when there is none.

        Entities that are no longer individually cached appear as None;
        callers decide whether that invalidates the whole result.
        """
        if not self.context.caching_enabled:
            return None
        result = self.index_cache.load(query_key, entity_type, reset)
        self._report(result)
        return result.value

    @handle_operation_errors(operation="entity_index_save")
    def cache_index(
        self,
        entity_type: str,
        query_key: str,
        entities: list[Entity],
    ) -> bool:
        """Cache a query result with the configured expiration.

        Returns:
            True when the index was stored, False when caching is disabled
            or the write failed
        """
        expiration = compute_expiration(
            self.context.cache_expiration,
            self.context.caching_enabled,
            self.context.clock,
        )
        if expiration is None:
            return False
        result = self.index_cache.save(query_key, entity_type, expiration, entities)
        self._report(result)
        return result.ok

    @handle_operation_errors(operation="entity_index_delete")
    def invalidate_index(self, query_key: str) -> bool:
        """Drop a cached query result."""
        result = self.index_cache.delete(query_key)
        self._report(result)
        return result.ok

    # ------------------------------------------------------------ helpers

    def _report(self, result: OperationResult[Any]) -> None:
        if result.error is not None:
            log_operation_warning(logger, result.error)

    def _declare_failure(self, options: CallOptions, error: EntityKitError) -> None:
        log_operation_warning(logger, error)
        options.notify_error(None, None, error.message)


def _forward_error(options: CallOptions) -> ErrorCallback:
    """Wrap the dispatching caller's error callback for the remote handler."""

    @handle_operation_errors(operation="entity_load - error")
    def forward(transport_handle: Any, status: int | None, message: str | None) -> None:
        options.notify_error(transport_handle, status, message)

    return forward
