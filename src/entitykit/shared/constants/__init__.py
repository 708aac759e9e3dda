"""
EntityKit Constants Module

This module provides centralized constants for EntityKit. All magic values
are defined here to ensure consistency across the codebase.
"""

from .cache import (
    BASE_DAY,
    BASE_HOUR,
    BASE_MINUTE,
    BASE_SECOND,
    Cache,
    CacheFields,
    StorageSchema,
)
from .entity import (
    CREATE_ONLY_TYPES,
    DEFAULT_LANGUAGE,
    PRIMARY_KEYS,
    CallbackKinds,
    EntityFields,
    EntityTypes,
    Operations,
)
from .logging import Logging

__all__ = [
    "BASE_DAY",
    "BASE_HOUR",
    "BASE_MINUTE",
    "BASE_SECOND",
    "CREATE_ONLY_TYPES",
    "DEFAULT_LANGUAGE",
    "PRIMARY_KEYS",
    "Cache",
    "CacheFields",
    "CallbackKinds",
    "EntityFields",
    "EntityTypes",
    "Logging",
    "Operations",
    "StorageSchema",
]
