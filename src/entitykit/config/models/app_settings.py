"""Entity and logging configuration models."""

from __future__ import annotations

from pydantic import BaseModel, Field

from entitykit.shared.constants import DEFAULT_LANGUAGE, Logging


class EntitySettings(BaseModel):
    """Entity handling configuration."""

    default_language: str = Field(
        default=DEFAULT_LANGUAGE,
        description="Language injected into node entities saved without one",
    )


class LoggingSettings(BaseModel):
    """Logging configuration.

    This class manages logging behavior including level, file output
    and console rendering.
    """

    level: str = Field(default=Logging.DEFAULT_LEVEL, description="Logging level")
    file: str | None = Field(default=None, description="Optional JSON log file path")
    use_rich: bool = Field(
        default=True,
        description="Render console logs with rich instead of JSON lines",
    )


__all__ = ["EntitySettings", "LoggingSettings"]
