"""
Entity Constants

Entity type names, their primary-key fields and the remote operation
names used as request queue keys.
"""

from __future__ import annotations

from types import MappingProxyType


class EntityTypes:
    """Entity types known to the remote service."""

    COMMENT = "comment"
    FILE = "file"
    NODE = "node"
    TAXONOMY_TERM = "taxonomy_term"
    TAXONOMY_VOCABULARY = "taxonomy_vocabulary"
    USER = "user"


# Fixed primary-key table; other types declare their key on registration
PRIMARY_KEYS = MappingProxyType(
    {
        EntityTypes.COMMENT: "cid",
        EntityTypes.FILE: "fid",
        EntityTypes.NODE: "nid",
        EntityTypes.TAXONOMY_TERM: "tid",
        EntityTypes.TAXONOMY_VOCABULARY: "vid",
        EntityTypes.USER: "uid",
    }
)

# Types whose save always goes through the create handler
CREATE_ONLY_TYPES = frozenset({EntityTypes.FILE})


class Operations:
    """Remote operation names."""

    RETRIEVE = "retrieve"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


class CallbackKinds:
    """Request queue callback lists."""

    SUCCESS = "success"
    ERROR = "error"


class EntityFields:
    """Entity field names with special handling."""

    LANGUAGE = "language"


DEFAULT_LANGUAGE = "und"
