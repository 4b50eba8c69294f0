"""SQLite schema definition for the local record store and change queue."""

from __future__ import annotations

import logging
import sqlite3
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import aiosqlite

logger = logging.getLogger(__name__)

# Schema version for migrations
SCHEMA_VERSION = 1

# ── Migrations ──────────────────────────────────────────────────────
# Each entry maps (from_version -> to_version) with a list of SQL statements.
# Migrations run sequentially in initialize() when db version < SCHEMA_VERSION.

MIGRATIONS: dict[tuple[int, int], list[str]] = {}

# AUTOINCREMENT keeps ids monotonic: sqlite_sequence tracks the highest id
# ever used, including ids inserted explicitly by an upsert.
SCHEMA = """
CREATE TABLE IF NOT EXISTS records (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL DEFAULT '',
    email TEXT NOT NULL,
    department TEXT NOT NULL DEFAULT '',
    position TEXT NOT NULL DEFAULT '',
    updated_at TEXT NOT NULL
);
CREATE UNIQUE INDEX IF NOT EXISTS idx_records_email ON records(email);

CREATE TABLE IF NOT EXISTS pending_changes (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    kind TEXT NOT NULL,
    record_id INTEGER NOT NULL,
    record TEXT NOT NULL,
    timestamp TEXT NOT NULL,
    synced INTEGER NOT NULL DEFAULT 0
);
CREATE INDEX IF NOT EXISTS idx_pending_changes_synced ON pending_changes(synced, id);
"""


async def run_migrations(
    conn: aiosqlite.Connection,
    current_version: int,
    target_version: int = SCHEMA_VERSION,
) -> int:
    """Apply all pending migrations from current_version to target_version.

    Returns the final schema version after all migrations.
    """
    version = current_version

    while version < target_version:
        next_version = version + 1
        statements = MIGRATIONS.get((version, next_version), [])

        for sql in statements:
            try:
                await conn.execute(sql)
            except sqlite3.OperationalError as e:
                # Column may already exist (partial migration or manual fix)
                if "duplicate column" in str(e).lower() or "already exists" in str(e).lower():
                    logger.debug("Migration already applied: %s", e)
                else:
                    raise

        version = next_version

    await conn.execute("UPDATE schema_version SET version = ?", (target_version,))
    await conn.commit()
    return version
