"""EntityKit Error Handling Module

This module defines the error handling system for EntityKit, providing
structured error classes with context information.

The error hierarchy follows these principles:
- One Source of Truth: All error codes are defined in ErrorCode enum
- Structured Context: ErrorContext provides additional information
- Proper Exception Chaining: Original exceptions are preserved
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from pathlib import Path
from typing import Any, Union

# Type alias for primitive context values (str, int, float, bool only)
PrimitiveContextValue = Union[str, int, float, bool]


class ErrorCode(str, Enum):
    """Error codes for EntityKit.

    This enum serves as the single source of truth for all error codes
    used throughout the library.
    """

    # Entity dispatch errors
    UNSUPPORTED_ENTITY_TYPE = "UNSUPPORTED_ENTITY_TYPE"
    INVALID_ENTITY_ID = "INVALID_ENTITY_ID"
    HANDLER_NOT_FOUND = "HANDLER_NOT_FOUND"
    PRIMARY_KEY_UNRESOLVED = "PRIMARY_KEY_UNRESOLVED"

    # Remote errors
    REMOTE_REQUEST_FAILED = "REMOTE_REQUEST_FAILED"

    # Cache errors
    CACHE_READ_FAILED = "CACHE_READ_FAILED"
    CACHE_WRITE_FAILED = "CACHE_WRITE_FAILED"
    CACHE_DELETE_FAILED = "CACHE_DELETE_FAILED"
    CACHE_SERIALIZATION_ERROR = "CACHE_SERIALIZATION_ERROR"
    CACHE_CORRUPTED = "CACHE_CORRUPTED"

    # Storage errors
    STORAGE_ERROR = "STORAGE_ERROR"
    STORAGE_NOT_INITIALIZED = "STORAGE_NOT_INITIALIZED"

    # Configuration errors
    CONFIG_INVALID = "CONFIG_INVALID"
    CONFIG_MISSING = "CONFIG_MISSING"

    # Validation errors
    VALIDATION_ERROR = "VALIDATION_ERROR"
    DATA_PROCESSING_ERROR = "DATA_PROCESSING_ERROR"

    # Application errors
    APPLICATION_ERROR = "APPLICATION_ERROR"
    INFRASTRUCTURE_ERROR = "INFRASTRUCTURE_ERROR"


def _coerce_primitives(value: Any | None) -> dict[str, PrimitiveContextValue] | None:
    """Coerce additional_data values to primitives.

    Converts Path, Enum, Decimal to primitive types.

    Args:
        value: Input dictionary or None

    Returns:
        Dictionary with primitive values only, or None

    Raises:
        TypeError: If value is not a dict or contains unconvertible types
    """
    if value is None:
        return None

    if not isinstance(value, dict):
        error_msg = f"additional_data must be dict, got {type(value).__name__}"
        raise TypeError(error_msg)

    coerced: dict[str, PrimitiveContextValue] = {}
    for key, val in value.items():
        if isinstance(val, (str, int, float, bool)):
            coerced[key] = val
        elif isinstance(val, Path):
            coerced[key] = str(val)
        elif isinstance(val, Enum):
            coerced[key] = val.value
        elif isinstance(val, Decimal):
            coerced[key] = float(val)
        elif val is None:
            continue
        else:
            error_msg = (
                f"Cannot coerce {type(val).__name__} to primitive type. "
                f"Only str, int, float, bool, Path, Enum, Decimal are allowed."
            )
            raise TypeError(error_msg)

    return coerced


@dataclass(frozen=True)
class ErrorContext:
    """Context information for errors.

    Only primitive types (str, int, float, bool) are allowed in
    additional_data to ensure safe serialization into log records.

    Attributes:
        operation: Optional operation name that caused the error
        entity_type: Optional entity type the operation targeted
        entity_id: Optional entity id the operation targeted
        additional_data: Optional dict with primitive values only
    """

    operation: str | None = None
    entity_type: str | None = None
    entity_id: int | None = None
    additional_data: dict[str, PrimitiveContextValue] | None = None

    def __post_init__(self) -> None:
        """Post-initialization validation and coercion."""
        if self.additional_data is not None:
            coerced = _coerce_primitives(self.additional_data)
            object.__setattr__(self, "additional_data", coerced)

    def safe_dict(self) -> dict[str, Any]:
        """Export context as a dict with additional_data always present.

        Example:
            >>> ErrorContext(operation="load", entity_type="node").safe_dict()
            {'operation': 'load', 'entity_type': 'node', 'additional_data': {}}
        """
        data: dict[str, Any] = {}
        if self.operation is not None:
            data["operation"] = self.operation
        if self.entity_type is not None:
            data["entity_type"] = self.entity_type
        if self.entity_id is not None:
            data["entity_id"] = self.entity_id
        data["additional_data"] = dict(self.additional_data or {})
        return data


class EntityKitError(Exception):
    """Base exception class for all EntityKit errors."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        context: ErrorContext | None = None,
        original_error: Exception | None = None,
    ) -> None:
        """Initialize EntityKitError.

        Args:
            code: Error code from ErrorCode enum
            message: Human-readable error message
            context: Additional context information
            original_error: Original exception that caused this error
        """
        self.code = code
        self.message = message
        self.context = context or ErrorContext()
        self.original_error = original_error
        super().__init__(f"{code.value}: {message}")

    def __str__(self) -> str:
        """Return string representation of the error."""
        return f"{self.code.value}: {self.message}"

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging."""
        return {
            "code": self.code.value,
            "message": self.message,
            "context": self.context.safe_dict(),
            "original_error": str(self.original_error) if self.original_error else None,
        }


class DomainError(EntityKitError):
    """Domain-specific errors.

    Raised when a request violates the entity model: unsupported entity
    types, ids that are not a single integer, unresolved primary keys.
    """


class InfrastructureError(EntityKitError):
    """Infrastructure-related errors.

    Raised when interacting with the persisted key/value store or the
    remote entity service fails.
    """


class CacheError(InfrastructureError):
    """Entity or index cache read/write failure."""


class ApplicationError(EntityKitError):
    """Application-level errors such as invalid configuration."""


def create_unsupported_type_error(
    entity_type: str,
    operation: str,
) -> DomainError:
    """Create an error for an entity type with no registered handlers.

    Args:
        entity_type: The entity type that was requested
        operation: Operation that was attempted

    Returns:
        DomainError with UNSUPPORTED_ENTITY_TYPE code
    """
    return DomainError(
        code=ErrorCode.UNSUPPORTED_ENTITY_TYPE,
        message=f"{operation} - unsupported type: {entity_type}",
        context=ErrorContext(operation=operation, entity_type=entity_type),
    )


def create_handler_not_found_error(
    entity_type: str,
    handler: str,
    operation: str,
) -> DomainError:
    """Create an error for a missing remote handler.

    Args:
        entity_type: The entity type that was requested
        handler: Name of the missing handler (retrieve, create, ...)
        operation: Operation that was attempted

    Returns:
        DomainError with HANDLER_NOT_FOUND code
    """
    return DomainError(
        code=ErrorCode.HANDLER_NOT_FOUND,
        message=f"{operation} - {entity_type} has no {handler} handler",
        context=ErrorContext(
            operation=operation,
            entity_type=entity_type,
            additional_data={"handler": handler},
        ),
    )


def create_cache_error(
    code: ErrorCode,
    key: str,
    operation: str,
    original_error: Exception,
) -> CacheError:
    """Create a cache error wrapping a storage or serialization failure.

    Args:
        code: One of the CACHE_* error codes
        key: Storage key the operation touched
        operation: Operation that was attempted
        original_error: Exception raised by the store or codec

    Returns:
        CacheError carrying the storage key in its context
    """
    return CacheError(
        code=code,
        message=f"{operation} failed for key {key}: {original_error}",
        context=ErrorContext(operation=operation, additional_data={"key": key}),
        original_error=original_error,
    )
