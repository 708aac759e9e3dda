"""Tests for the EntityKit error hierarchy."""

from __future__ import annotations

from enum import Enum
from pathlib import Path

import pytest

from entitykit.shared.errors import (
    ApplicationError,
    CacheError,
    DomainError,
    EntityKitError,
    ErrorCode,
    ErrorContext,
    InfrastructureError,
    create_cache_error,
    create_handler_not_found_error,
    create_unsupported_type_error,
)


class _Color(Enum):
    RED = "red"


class TestErrorContext:
    def test_primitives_are_kept(self) -> None:
        context = ErrorContext(additional_data={"a": 1, "b": "x", "c": 1.5, "d": True})

        assert context.additional_data == {"a": 1, "b": "x", "c": 1.5, "d": True}

    def test_path_and_enum_are_coerced(self) -> None:
        context = ErrorContext(
            additional_data={"path": Path("/tmp/cache.db"), "color": _Color.RED}
        )

        assert context.additional_data == {"path": "/tmp/cache.db", "color": "red"}

    def test_none_values_are_dropped(self) -> None:
        context = ErrorContext(additional_data={"key": "node_1", "missing": None})

        assert context.additional_data == {"key": "node_1"}

    def test_non_primitive_is_rejected(self) -> None:
        with pytest.raises(TypeError):
            ErrorContext(additional_data={"entity": {"nid": 1}})

    def test_safe_dict_skips_unset_fields(self) -> None:
        context = ErrorContext(operation="entity_load", entity_type="node")

        assert context.safe_dict() == {
            "operation": "entity_load",
            "entity_type": "node",
            "additional_data": {},
        }


class TestEntityKitError:
    def test_str_includes_code(self) -> None:
        error = DomainError(ErrorCode.INVALID_ENTITY_ID, "bad id")

        assert str(error) == "INVALID_ENTITY_ID: bad id"

    def test_to_dict(self) -> None:
        cause = OSError("disk full")
        error = InfrastructureError(
            ErrorCode.STORAGE_ERROR,
            "write failed",
            ErrorContext(operation="set"),
            cause,
        )

        assert error.to_dict() == {
            "code": "STORAGE_ERROR",
            "message": "write failed",
            "context": {"operation": "set", "additional_data": {}},
            "original_error": "disk full",
        }

    def test_hierarchy(self) -> None:
        assert issubclass(CacheError, InfrastructureError)
        for cls in (DomainError, InfrastructureError, ApplicationError):
            assert issubclass(cls, EntityKitError)


class TestErrorFactories:
    def test_unsupported_type(self) -> None:
        error = create_unsupported_type_error("widget", "entity_save")

        assert isinstance(error, DomainError)
        assert error.code == ErrorCode.UNSUPPORTED_ENTITY_TYPE
        assert error.message == "entity_save - unsupported type: widget"
        assert error.context.entity_type == "widget"

    def test_handler_not_found(self) -> None:
        error = create_handler_not_found_error("user", "update", "entity_save")

        assert error.code == ErrorCode.HANDLER_NOT_FOUND
        assert error.context.additional_data == {"handler": "update"}

    def test_cache_error_keeps_cause(self) -> None:
        cause = ValueError("bad json")

        error = create_cache_error(ErrorCode.CACHE_CORRUPTED, "node_1", "entity_cache_load", cause)

        assert isinstance(error, CacheError)
        assert error.original_error is cause
        assert error.context.additional_data == {"key": "node_1"}
        assert "node_1" in error.message
