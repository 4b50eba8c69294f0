"""SQLite storage backend for the offline record store and change queue."""

from __future__ import annotations

import logging
from pathlib import Path

import aiosqlite

from offline_sync.storage.base import SyncStorage
from offline_sync.storage.sqlite_change_queue import SQLiteChangeQueueMixin
from offline_sync.storage.sqlite_records import SQLiteRecordMixin
from offline_sync.storage.sqlite_schema import SCHEMA, SCHEMA_VERSION, run_migrations

logger = logging.getLogger(__name__)


class SQLiteStorage(
    SQLiteRecordMixin,
    SQLiteChangeQueueMixin,
    SyncStorage,
):
    """SQLite-based storage for records and pending changes.

    Both stores live in one database file so a client has a single
    durable artifact. Each write commits before returning.
    """

    def __init__(self, db_path: str | Path) -> None:
        self._db_path = Path(db_path).resolve()
        self._conn: aiosqlite.Connection | None = None

    @property
    def db_path(self) -> Path:
        """Path to the database file."""
        return self._db_path

    async def initialize(self) -> None:
        """Initialize database connection and schema.

        For existing databases, runs pending migrations first then applies
        the full schema so indexes on new columns can be created safely.
        """
        if self._conn is not None:
            return

        self._db_path.parent.mkdir(parents=True, exist_ok=True)

        self._conn = await aiosqlite.connect(self._db_path)
        self._conn.row_factory = aiosqlite.Row

        await self._conn.execute("PRAGMA journal_mode=WAL")
        await self._conn.execute("PRAGMA synchronous=FULL")

        await self._conn.execute(
            "CREATE TABLE IF NOT EXISTS schema_version (version INTEGER PRIMARY KEY)"
        )
        await self._conn.commit()

        async with self._conn.execute("SELECT version FROM schema_version") as cursor:
            row = await cursor.fetchone()

        if row is not None and row["version"] < SCHEMA_VERSION:
            await run_migrations(self._conn, row["version"])

        # Full schema: CREATE TABLE/INDEX IF NOT EXISTS (safe after migration)
        await self._conn.executescript(SCHEMA)

        # Stamp version for brand-new databases
        async with self._conn.execute("SELECT version FROM schema_version") as cursor:
            row = await cursor.fetchone()
            if row is None:
                await self._conn.execute(
                    "INSERT INTO schema_version (version) VALUES (?)", (SCHEMA_VERSION,)
                )
                await self._conn.commit()

        logger.debug("Opened local store at %s", self._db_path)

    async def close(self) -> None:
        """Close database connection."""
        if self._conn:
            await self._conn.close()
            self._conn = None

    async def __aenter__(self) -> SQLiteStorage:
        await self.initialize()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    def _ensure_conn(self) -> aiosqlite.Connection:
        """Ensure connection is available."""
        if self._conn is None:
            raise RuntimeError("Database not initialized. Call initialize() first.")
        return self._conn

    async def clear(self) -> None:
        """Delete all records and queued changes (ids keep counting upward)."""
        conn = self._ensure_conn()
        for table in ("pending_changes", "records"):
            # Table names come from the fixed tuple above
            await conn.execute(f"DELETE FROM {table}")
        await conn.commit()
