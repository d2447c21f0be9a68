"""
SQLite-backed configuration store.

Durable single-node backend. The table is a literal key-value map so the
store stays interchangeable with the Redis and in-memory backends.

Design:
- One table: student_configs
- Columns: key (PRIMARY KEY), value (JSON text), created_at, updated_at
- Blocking sqlite3 calls run in a worker thread
"""

import asyncio
import logging
import sqlite3
import uuid
from typing import Optional

from store.base import ConfigStore, StoreUnavailableError

logger = logging.getLogger(__name__)


class SQLiteConfigStore(ConfigStore):
    """
    SQLite key-value store.

    A fresh connection is opened per operation, so the store can be shared
    across requests without any in-process locking.
    """

    def __init__(self, db_path: Optional[str] = None):
        """
        Initialize the SQLite store.

        Args:
            db_path: Path to SQLite database file.
                    If None, uses a shared in-memory database (useful for testing).
        """
        self.db_path = db_path or f"file:student_configs_{uuid.uuid4().hex}?mode=memory&cache=shared"
        self._uri = self.db_path.startswith("file:")
        # Shared in-memory databases vanish when the last connection closes.
        self._keepalive = self._connect() if self._uri else None
        self._initialize_db()

    def _connect(self) -> sqlite3.Connection:
        return sqlite3.connect(self.db_path, uri=self._uri)

    def _initialize_db(self) -> None:
        """
        Create the schema if missing. Enables WAL mode for file databases.
        """
        try:
            conn = self._connect()
            cursor = conn.cursor()

            if not self._uri:
                cursor.execute("PRAGMA journal_mode=WAL")
                cursor.execute("PRAGMA synchronous=FULL")

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS student_configs (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                )
            """)

            conn.commit()
            conn.close()

            logger.debug(f"SQLite config store initialized: {self.db_path}")
        except sqlite3.Error as e:
            raise StoreUnavailableError(f"Failed to initialize SQLite store: {e}") from e

    def _get_sync(self, key: str) -> Optional[str]:
        conn = self._connect()
        try:
            row = conn.execute(
                "SELECT value FROM student_configs WHERE key = ?",
                (key,),
            ).fetchone()
        finally:
            conn.close()
        return row[0] if row else None

    def _put_sync(self, key: str, value: str) -> None:
        conn = self._connect()
        try:
            conn.execute(
                """
                INSERT INTO student_configs (key, value)
                VALUES (?, ?)
                ON CONFLICT(key)
                DO UPDATE SET value = excluded.value, updated_at = CURRENT_TIMESTAMP
                """,
                (key, value),
            )
            conn.commit()
        finally:
            conn.close()

    async def get(self, key: str) -> Optional[str]:
        try:
            return await asyncio.to_thread(self._get_sync, key)
        except sqlite3.Error as e:
            logger.error(f"SQLite error during get: key={key}, {e}")
            raise StoreUnavailableError(f"Config store unavailable: {e}") from e

    async def put(self, key: str, value: str) -> None:
        try:
            await asyncio.to_thread(self._put_sync, key, value)
        except sqlite3.Error as e:
            logger.error(f"SQLite error during put: key={key}, {e}")
            raise StoreUnavailableError(f"Config store unavailable: {e}") from e
        logger.info(f"Config stored: key={key}")

    async def close(self) -> None:
        if self._keepalive is not None:
            self._keepalive.close()
            self._keepalive = None
