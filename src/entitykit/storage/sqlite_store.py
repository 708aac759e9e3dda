"""SQLite key/value store.

This module provides the durable KeyValueStore used to persist entity
and index cache entries across process restarts.
"""

from __future__ import annotations

import logging
import sqlite3
import threading
from pathlib import Path
from types import TracebackType

from typing_extensions import Self

from entitykit.shared.constants import Logging, StorageSchema
from entitykit.shared.errors import ErrorCode, ErrorContext, InfrastructureError
from entitykit.shared.logging import log_operation_error, log_operation_success
from entitykit.storage.migration import MigrationManager

logger = logging.getLogger(__name__)

_SECURE_FILE_MODE = 0o600


class SQLiteKeyValueStore:
    """SQLite-backed string key/value store.

    Values are stored verbatim as TEXT. Uses WAL mode for concurrent
    readers and auto-commit so every set/remove is durable on return.

    Attributes:
        db_path: Path to SQLite database file
        conn: SQLite database connection

    Example:
        >>> store = SQLiteKeyValueStore(Path("cache.db"))
        >>> store.set("node_1", '{"data": {"nid": 1}, "expiration": 0}')
        >>> store.get("node_1")
        '{"data": {"nid": 1}, "expiration": 0}'
        >>> store.close()
    """

    def __init__(self, db_path: Path | str) -> None:
        """Initialize the SQLite key/value store.

        Args:
            db_path: Path to SQLite database file, or ":memory:"

        Raises:
            InfrastructureError: If database initialization fails
        """
        self.db_path = Path(db_path) if str(db_path) != ":memory:" else None
        self._database = str(db_path)
        self.conn: sqlite3.Connection | None = None
        self._lock = threading.RLock()
        self._initialize_db()

    def _initialize_db(self) -> None:
        """Initialize database with WAL mode and schema.

        Raises:
            InfrastructureError: If database connection or schema creation fails
        """
        context = ErrorContext(
            operation="initialize_store",
            additional_data={"db_path": self._database},
        )

        try:
            db_is_new = False
            if self.db_path is not None:
                self.db_path.parent.mkdir(parents=True, exist_ok=True)
                db_is_new = not self.db_path.exists()

            self.conn = sqlite3.connect(
                self._database,
                check_same_thread=False,
                isolation_level=None,  # Auto-commit mode
            )

            if db_is_new and self.db_path is not None:
                try:
                    self.db_path.chmod(_SECURE_FILE_MODE)
                except OSError as e:
                    logger.warning(
                        "Failed to set secure permissions for DB file %s: %s",
                        self.db_path,
                        e,
                    )

            self.conn.execute("PRAGMA journal_mode=WAL")
            self.conn.execute("PRAGMA synchronous=NORMAL")

            MigrationManager(self.conn).create_tables()

            log_operation_success(
                logger=logger,
                operation="initialize_store",
                duration_ms=0,
                context=context.additional_data,
            )

        except sqlite3.Error as e:
            error = InfrastructureError(
                code=ErrorCode.STORAGE_ERROR,
                message=f"Failed to initialize SQLite store: {e!s}",
                context=context,
                original_error=e,
            )
            log_operation_error(logger=logger, error=error, operation="initialize_store")
            raise error from e

    def _connection(self, operation: str) -> sqlite3.Connection:
        if self.conn is None:
            raise InfrastructureError(
                code=ErrorCode.STORAGE_NOT_INITIALIZED,
                message="Database connection not initialized",
                context=ErrorContext(operation=operation),
            )
        return self.conn

    def _execute(
        self,
        operation: str,
        sql: str,
        params: tuple[str, ...] = (),
    ) -> sqlite3.Cursor:
        conn = self._connection(operation)
        try:
            return conn.execute(sql, params)
        except sqlite3.Error as e:
            raise InfrastructureError(
                code=ErrorCode.STORAGE_ERROR,
                message=f"SQLite {operation} failed: {e!s}",
                context=ErrorContext(operation=operation),
                original_error=e,
            ) from e

    def get(self, key: str) -> str | None:
        """Retrieve the value stored under key.

        Args:
            key: Storage key

        Returns:
            Stored string or None if absent

        Raises:
            InfrastructureError: If database operation fails
        """
        with self._lock:
            cursor = self._execute(
                "get",
                f"SELECT value FROM {StorageSchema.TABLE} WHERE key = ?",  # noqa: S608
                (key,),
            )
            row = cursor.fetchone()
        return row[0] if row else None

    def set(self, key: str, value: str) -> None:
        """Store value under key, replacing any prior value.

        Args:
            key: Storage key
            value: String value

        Raises:
            InfrastructureError: If database operation fails
        """
        with self._lock:
            self._execute(
                "set",
                f"""
                INSERT OR REPLACE INTO {StorageSchema.TABLE} (key, value, updated_at)
                VALUES (?, ?, CURRENT_TIMESTAMP)
                """,  # noqa: S608
                (key, value),
            )

        logger.debug(
            "Stored key=%s (%d bytes)",
            key[: Logging.KEY_PREVIEW_LENGTH],
            len(value.encode("utf-8")),
        )

    def remove(self, key: str) -> None:
        """Remove key. Missing keys are ignored.

        Raises:
            InfrastructureError: If database operation fails
        """
        with self._lock:
            cursor = self._execute(
                "remove",
                f"DELETE FROM {StorageSchema.TABLE} WHERE key = ?",  # noqa: S608
                (key,),
            )

        if cursor.rowcount > 0:
            logger.debug("Removed key=%s", key[: Logging.KEY_PREVIEW_LENGTH])

    def keys(self, prefix: str = "") -> list[str]:
        """Return stored keys starting with prefix, sorted."""
        escaped = prefix.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
        with self._lock:
            cursor = self._execute(
                "keys",
                f"SELECT key FROM {StorageSchema.TABLE} "  # noqa: S608
                "WHERE key LIKE ? ESCAPE '\\' ORDER BY key",
                (f"{escaped}%",),
            )
            return [row[0] for row in cursor.fetchall()]

    def clear(self) -> int:
        """Remove every entry.

        Returns:
            Number of removed entries
        """
        with self._lock:
            cursor = self._execute("clear", f"DELETE FROM {StorageSchema.TABLE}")  # noqa: S608
        logger.info("Cleared %d stored entries", cursor.rowcount)
        return cursor.rowcount

    def close(self) -> None:
        """Close database connection."""
        with self._lock:
            if self.conn:
                self.conn.close()
                self.conn = None
                logger.debug("Closed SQLite store connection: %s", self._database)

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()
