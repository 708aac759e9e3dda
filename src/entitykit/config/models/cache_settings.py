"""Cache configuration model.

This module contains the cache configuration model controlling whether
entities and index results are cached locally, and for how long.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from entitykit.shared.constants import Cache


class CacheSettings(BaseModel):
    """Entity cache configuration.

    Both values are read by the facade at every cache decision, so
    assigning to them at runtime takes effect on the next call.
    """

    enabled: bool = Field(
        default=Cache.DEFAULT_ENABLED,
        description="Enable local entity caching",
    )
    expiration: int = Field(
        default=Cache.DEFAULT_EXPIRATION,
        ge=0,
        description="Cache time-to-live in seconds (0 = never expires)",
    )
    db_path: str = Field(
        default=Cache.DEFAULT_DB_PATH,
        description="SQLite database used by the persisted store",
    )


__all__ = ["CacheSettings"]
