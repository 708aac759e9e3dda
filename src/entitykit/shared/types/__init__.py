"""Type definitions shared across EntityKit."""

from entitykit.shared.types.entity import (
    CallOptions,
    Entity,
    ErrorCallback,
    PageOptions,
    SuccessCallback,
    is_entity_id,
    parse_entity_id,
)

__all__ = [
    "CallOptions",
    "Entity",
    "ErrorCallback",
    "PageOptions",
    "SuccessCallback",
    "is_entity_id",
    "parse_entity_id",
]
