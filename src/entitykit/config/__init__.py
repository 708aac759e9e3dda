"""EntityKit Configuration Module

This module provides unified access to configuration models and settings
management:
- Settings: Main configuration facade
- Loader functions: get_config, load_settings, reload_config
- Domain models: Cache, Entity, Logging settings
"""

from __future__ import annotations

from .loader import SettingsLoader, get_config, load_settings, reload_config
from .models import CacheSettings, EntitySettings, LoggingSettings, Settings

__all__ = [
    "CacheSettings",
    "EntitySettings",
    "LoggingSettings",
    "Settings",
    "SettingsLoader",
    "get_config",
    "load_settings",
    "reload_config",
]
