"""
Logging Configuration Constants

This module contains all constants related to logging configuration
and log formatting.
"""


class Logging:
    """Logging defaults."""

    ROOT_LOGGER = "entitykit"
    DEFAULT_LEVEL = "INFO"
    DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    DEFAULT_ENCODING = "utf-8"
    RICH_TIME_FORMAT = "[%H:%M:%S]"

    # Maximum key characters echoed in debug logs
    KEY_PREVIEW_LENGTH = 50
