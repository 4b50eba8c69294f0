"""SQLite record operations mixin (the local record store)."""

from __future__ import annotations

import logging
import sqlite3
from typing import TYPE_CHECKING, Any

from offline_sync.core.record import RECORD_FIELDS, UNIQUE_FIELD, Record
from offline_sync.storage.base import ConstraintViolation
from offline_sync.utils.timeutils import parse_timestamp, utcnow

if TYPE_CHECKING:
    import aiosqlite

logger = logging.getLogger(__name__)


class SQLiteRecordMixin:
    """Mixin providing record CRUD with email uniqueness enforcement."""

    # ------------------------------------------------------------------
    # Protocol stubs, satisfied by SQLiteStorage at runtime.
    # ------------------------------------------------------------------

    def _ensure_conn(self) -> aiosqlite.Connection:
        raise NotImplementedError

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def create_record(self, fields: dict[str, Any]) -> Record:
        conn = self._ensure_conn()
        record = Record.from_dict({**fields, "id": 0})
        await self._check_unique(conn, record.unique_value, exclude_id=None)

        try:
            cursor = await conn.execute(
                """INSERT INTO records (name, email, department, position, updated_at)
                   VALUES (?, ?, ?, ?, ?)""",
                (
                    record.name,
                    record.email,
                    record.department,
                    record.position,
                    record.updated_at.isoformat(),
                ),
            )
        except sqlite3.IntegrityError as e:
            await conn.rollback()
            raise ConstraintViolation(UNIQUE_FIELD, record.unique_value) from e
        await conn.commit()

        stored = record.with_fields(id=cursor.lastrowid or 0)
        logger.debug("Created record %d (%s)", stored.id, stored.email)
        return stored

    async def update_record(self, record: Record) -> Record:
        if record.id <= 0:
            raise ValueError("update_record requires a positive record id")

        conn = self._ensure_conn()
        await self._check_unique(conn, record.unique_value, exclude_id=record.id)

        try:
            await conn.execute(
                """INSERT INTO records (id, name, email, department, position, updated_at)
                   VALUES (?, ?, ?, ?, ?, ?)
                   ON CONFLICT(id) DO UPDATE SET
                       name = excluded.name,
                       email = excluded.email,
                       department = excluded.department,
                       position = excluded.position,
                       updated_at = excluded.updated_at""",
                (
                    record.id,
                    record.name,
                    record.email,
                    record.department,
                    record.position,
                    record.updated_at.isoformat(),
                ),
            )
        except sqlite3.IntegrityError as e:
            await conn.rollback()
            raise ConstraintViolation(UNIQUE_FIELD, record.unique_value) from e
        await conn.commit()
        return record

    async def get_record(self, record_id: int) -> Record | None:
        conn = self._ensure_conn()
        async with conn.execute("SELECT * FROM records WHERE id = ?", (record_id,)) as cursor:
            row = await cursor.fetchone()
        if row is None:
            return None
        return _row_to_record(row)

    async def list_records(self) -> list[Record]:
        conn = self._ensure_conn()
        async with conn.execute("SELECT * FROM records ORDER BY id ASC") as cursor:
            rows = await cursor.fetchall()
        return [_row_to_record(r) for r in rows]

    async def delete_record(self, record_id: int) -> bool:
        conn = self._ensure_conn()
        cursor = await conn.execute("DELETE FROM records WHERE id = ?", (record_id,))
        await conn.commit()
        return cursor.rowcount > 0

    async def count_records(self) -> int:
        conn = self._ensure_conn()
        async with conn.execute("SELECT COUNT(*) AS cnt FROM records") as cursor:
            row = await cursor.fetchone()
        return int(row["cnt"]) if row else 0

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    async def _check_unique(
        conn: aiosqlite.Connection, value: str, exclude_id: int | None
    ) -> None:
        """Raise ConstraintViolation if another record already uses *value*."""
        async with conn.execute(
            f"SELECT id FROM records WHERE {UNIQUE_FIELD} = ?", (value,)
        ) as cursor:
            row = await cursor.fetchone()
        if row is not None and row["id"] != exclude_id:
            raise ConstraintViolation(UNIQUE_FIELD, value, existing_id=int(row["id"]))


def _row_to_record(row: Any) -> Record:
    """Convert a database row to a Record."""
    return Record(
        id=int(row["id"]),
        updated_at=parse_timestamp(row["updated_at"]) or utcnow(),
        **{name: str(row[name] or "") for name in RECORD_FIELDS},
    )
