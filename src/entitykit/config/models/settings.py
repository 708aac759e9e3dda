"""EntityKit Settings Configuration Model.

Main Settings class that consolidates all configuration domains.
"""

from __future__ import annotations

import logging
from pathlib import Path

import toml
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from entitykit.config.models.app_settings import EntitySettings, LoggingSettings
from entitykit.config.models.cache_settings import CacheSettings

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Settings facade providing unified configuration access.

    Environment variables override defaults, e.g.
    ``ENTITYKIT_CACHE__ENABLED=true`` or ``ENTITYKIT_CACHE__EXPIRATION=0``.
    """

    model_config = SettingsConfigDict(
        env_prefix="ENTITYKIT_",
        env_nested_delimiter="__",
        env_ignore_empty=True,
        extra="ignore",
        validate_assignment=True,
    )

    cache: CacheSettings = Field(default_factory=CacheSettings)
    entity: EntitySettings = Field(default_factory=EntitySettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    @classmethod
    def from_toml_file(cls, file_path: str | Path) -> Settings:
        """Load settings from TOML file with environment variable overrides."""
        file_path = Path(file_path)
        if not file_path.exists():
            msg = f"Configuration file not found: {file_path}"
            raise FileNotFoundError(msg)

        raw_config = toml.load(file_path)
        return cls(**raw_config)

    def to_toml_file(self, file_path: str | Path) -> None:
        """Save settings to TOML file."""
        file_path = Path(file_path)
        file_path.parent.mkdir(parents=True, exist_ok=True)

        config_dict = self.model_dump(exclude_none=True)

        with open(file_path, "w", encoding="utf-8") as f:
            toml.dump(config_dict, f)
