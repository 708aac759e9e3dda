"""Configuration domain models."""

from entitykit.config.models.app_settings import EntitySettings, LoggingSettings
from entitykit.config.models.cache_settings import CacheSettings
from entitykit.config.models.settings import Settings

__all__ = [
    "CacheSettings",
    "EntitySettings",
    "LoggingSettings",
    "Settings",
]
