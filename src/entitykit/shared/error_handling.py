"""Shared error handling utilities for EntityKit.

This module provides the fault boundary used by every public facade
operation: unexpected exceptions are mapped to EntityKitError, logged
once, and the operation returns None instead of propagating.
"""

from __future__ import annotations

import functools
import logging
from typing import Any, Callable, TypeVar

import orjson

from entitykit.shared.errors import (
    ApplicationError,
    DomainError,
    EntityKitError,
    ErrorCode,
    ErrorContext,
    InfrastructureError,
)

logger = logging.getLogger(__name__)


def map_exception_to_entitykit_error(
    error: Exception,
    operation: str,
    default_code: ErrorCode = ErrorCode.APPLICATION_ERROR,
) -> EntityKitError:
    """Map a generic exception to an EntityKitError.

    Args:
        error: The exception to map
        operation: Operation name where error occurred
        default_code: Default error code if mapping fails

    Returns:
        EntityKitError instance

    Example:
        >>> try:
        ...     orjson.loads("{")
        ... except orjson.JSONDecodeError as e:
        ...     error = map_exception_to_entitykit_error(e, "decode")
        ...     # Returns InfrastructureError with CACHE_SERIALIZATION_ERROR code
    """
    if isinstance(error, EntityKitError):
        return error

    context = ErrorContext(
        operation=operation,
        additional_data={"original_error_type": type(error).__name__},
    )

    # JSONDecodeError subclasses ValueError, check it first. JSONEncodeError
    # is TypeError itself and cannot be told apart here; encode failures are
    # reported by the cache stores before they reach this mapping.
    if isinstance(error, orjson.JSONDecodeError):
        return InfrastructureError(
            code=ErrorCode.CACHE_SERIALIZATION_ERROR,
            message=f"Serialization error: {error}",
            context=context,
            original_error=error,
        )

    if isinstance(error, OSError):
        return InfrastructureError(
            code=ErrorCode.STORAGE_ERROR,
            message=f"Storage error: {error}",
            context=context,
            original_error=error,
        )

    if isinstance(error, (ValueError, KeyError, TypeError, AttributeError)):
        return ApplicationError(
            code=ErrorCode.DATA_PROCESSING_ERROR,
            message=f"Data processing error: {error}",
            context=context,
            original_error=error,
        )

    return InfrastructureError(
        code=default_code,
        message=f"Unexpected error: {error}",
        context=context,
        original_error=error,
    )


def log_error_with_context(
    error: EntityKitError,
    operation: str,
    additional_context: dict[str, Any] | None = None,
) -> None:
    """Log an EntityKitError with structured context.

    Domain and application errors are expected failures and log as
    warnings; infrastructure errors log as errors.

    Args:
        error: EntityKitError instance to log
        operation: Operation name where error occurred
        additional_context: Additional context data for logging
    """
    log_context: dict[str, Any] = {
        "operation": operation,
        "error_code": error.code.value,
        "error_type": type(error).__name__,
    }

    if additional_context:
        log_context.update(additional_context)

    if isinstance(error, (DomainError, ApplicationError)):
        logger.warning(
            "%s - %s",
            operation,
            error.message,
            extra={"context": log_context},
        )
    elif isinstance(error, InfrastructureError):
        logger.error(
            "%s - %s",
            operation,
            error.message,
            extra={"context": log_context},
        )
    else:
        logger.exception(
            "%s - %s",
            operation,
            error.message,
            extra={"context": log_context},
        )


F = TypeVar("F", bound=Callable[..., Any])


def handle_operation_errors(
    operation: str,
    *,
    default_code: ErrorCode = ErrorCode.APPLICATION_ERROR,
    reraise: bool = False,
) -> Callable[[F], F]:
    """Decorator marking a function as a fault boundary.

    Args:
        operation: Operation name for error context
        default_code: Default error code if mapping fails
        reraise: Whether to re-raise the mapped error (default: False)

    Returns:
        Decorator function

    Example:
        >>> @handle_operation_errors(operation="entity_delete")
        ... def delete(self, entity_type, entity_id):
        ...     ...  # errors are logged and None is returned
    """

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            try:
                return func(*args, **kwargs)
            except EntityKitError as e:
                log_error_with_context(e, operation)
                if reraise:
                    raise
                return None
            except Exception as e:  # pylint: disable=broad-exception-caught
                mapped_error = map_exception_to_entitykit_error(
                    e,
                    operation,
                    default_code=default_code,
                )
                log_error_with_context(mapped_error, operation)
                if reraise:
                    raise mapped_error from e
                return None

        return wrapper  # type: ignore[return-value]

    return decorator
