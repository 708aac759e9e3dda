"""Settings loader and singleton manager.

This module handles:
- Environment variable loading from .env files
- Configuration file loading from TOML
- Thread-safe singleton pattern for the Settings instance
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path

import toml
from dotenv import load_dotenv
from pydantic import ValidationError

from entitykit.config.models.settings import Settings
from entitykit.shared.errors import ApplicationError, ErrorCode, ErrorContext

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATHS: tuple[Path, ...] = (
    Path("config/entitykit.toml"),
    Path("entitykit.toml"),
    Path.home() / ".entitykit" / "config.toml",
)


class SettingsLoader:
    """Thread-safe singleton manager for Settings.

    Uses double-checked locking pattern to ensure thread-safety
    while minimizing lock overhead.
    """

    _instance: Settings | None = None
    _lock: threading.RLock = threading.RLock()

    def get_config(self) -> Settings:
        """Get the global settings instance (thread-safe).

        Returns:
            The global Settings instance, loading it if necessary.
        """
        if self._instance is None:
            with self._lock:
                if self._instance is None:
                    _load_env_file()
                    self._instance = load_settings()

        return self._instance

    def reload_config(self) -> Settings:
        """Reload the global settings instance from configuration files.

        Returns:
            The reloaded Settings instance.
        """
        with self._lock:
            _load_env_file()
            self._instance = load_settings()

        return self._instance


def _load_env_file(env_file: Path = Path(".env")) -> None:
    """Load environment variables from a .env file when one exists."""
    if env_file.exists():
        load_dotenv(env_file, override=False)
        logger.debug("Loaded environment from %s", env_file)


def load_settings(config_path: str | Path | None = None) -> Settings:
    """Load settings from a TOML file, falling back to defaults.

    An explicit config_path must exist. Without one, the first existing
    file among DEFAULT_CONFIG_PATHS is used; when none exists, defaults
    overlaid by ENTITYKIT_* environment variables are returned.

    Args:
        config_path: Optional path to a TOML configuration file

    Returns:
        Settings instance

    Raises:
        ApplicationError: If the file is missing, unreadable or invalid
    """
    if config_path is not None:
        return _load_from_file(Path(config_path))

    for candidate in DEFAULT_CONFIG_PATHS:
        if candidate.exists():
            return _load_from_file(candidate)

    return Settings()


def _load_from_file(path: Path) -> Settings:
    context = ErrorContext(
        operation="load_settings",
        additional_data={"config_path": str(path)},
    )
    try:
        settings = Settings.from_toml_file(path)
    except FileNotFoundError as e:
        raise ApplicationError(
            code=ErrorCode.CONFIG_MISSING,
            message=f"Configuration file not found: {path}",
            context=context,
            original_error=e,
        ) from e
    except (toml.TomlDecodeError, ValidationError) as e:
        raise ApplicationError(
            code=ErrorCode.CONFIG_INVALID,
            message=f"Invalid configuration in {path}: {e}",
            context=context,
            original_error=e,
        ) from e

    logger.info("Loaded configuration from %s", path)
    return settings


_loader = SettingsLoader()


def get_config() -> Settings:
    """Get the global settings instance (thread-safe)."""
    return _loader.get_config()


def reload_config() -> Settings:
    """Reload the global settings instance from configuration files."""
    return _loader.reload_config()


__all__ = [
    "DEFAULT_CONFIG_PATHS",
    "SettingsLoader",
    "get_config",
    "load_settings",
    "reload_config",
]
