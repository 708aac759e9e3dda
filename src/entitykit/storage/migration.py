"""Migration manager for the SQLite key/value store.

This module provides database schema creation and version tracking.
"""

from __future__ import annotations

import logging
import sqlite3

from entitykit.shared.constants import StorageSchema

logger = logging.getLogger(__name__)


class MigrationManager:
    """Database schema migration manager."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        """Initialize migration manager.

        Args:
            conn: SQLite database connection
        """
        self.conn = conn
        self._current_version = self._get_current_version()

    def get_current_version(self) -> int:
        """Get current schema version.

        Returns:
            Current schema version number
        """
        return self._current_version

    def _get_current_version(self) -> int:
        cursor = self.conn.execute(
            "SELECT name FROM sqlite_master WHERE type='table' AND name=?",
            (StorageSchema.VERSION_TABLE,),
        )
        if cursor.fetchone() is None:
            return 0

        cursor = self.conn.execute(
            f"SELECT MAX(version) FROM {StorageSchema.VERSION_TABLE}"  # noqa: S608
        )
        row = cursor.fetchone()
        return row[0] if row and row[0] is not None else 0

    def create_tables(self) -> None:
        """Create database schema (v1)."""
        if self._current_version >= StorageSchema.CURRENT_VERSION:
            return

        schema_sql = f"""
        CREATE TABLE IF NOT EXISTS {StorageSchema.TABLE} (
            key TEXT PRIMARY KEY,
            value TEXT NOT NULL,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP NOT NULL,

            CHECK (length(key) > 0)
        );

        CREATE TABLE IF NOT EXISTS {StorageSchema.VERSION_TABLE} (
            version INTEGER PRIMARY KEY,
            applied_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP NOT NULL
        );
        """

        self.conn.executescript(schema_sql)
        self.conn.execute(
            f"INSERT OR REPLACE INTO {StorageSchema.VERSION_TABLE} (version) VALUES (?)",  # noqa: S608
            (StorageSchema.CURRENT_VERSION,),
        )
        self._current_version = StorageSchema.CURRENT_VERSION

        logger.info("Created key/value store schema (v%d)", self._current_version)

    def validate_schema(self) -> bool:
        """Validate current schema integrity.

        Returns:
            True if schema is valid, False otherwise
        """
        for table in (StorageSchema.TABLE, StorageSchema.VERSION_TABLE):
            cursor = self.conn.execute(
                "SELECT name FROM sqlite_master WHERE type='table' AND name=?",
                (table,),
            )
            if cursor.fetchone() is None:
                logger.error("Required table '%s' not found", table)
                return False

        return self._get_current_version() == StorageSchema.CURRENT_VERSION
