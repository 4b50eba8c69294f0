"""SQLite change queue operations mixin for offline sync."""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

from offline_sync.core.pending_change import ChangeKind, PendingChange
from offline_sync.core.record import Record
from offline_sync.utils.timeutils import parse_timestamp, utcnow

if TYPE_CHECKING:
    import aiosqlite

logger = logging.getLogger(__name__)


class SQLiteChangeQueueMixin:
    """Mixin providing the pending change queue."""

    # ------------------------------------------------------------------
    # Protocol stubs, satisfied by SQLiteStorage at runtime.
    # ------------------------------------------------------------------

    def _ensure_conn(self) -> aiosqlite.Connection:
        raise NotImplementedError

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def enqueue(self, kind: ChangeKind, record: Record) -> PendingChange:
        """Append a change to the queue. Returns the stored entry."""
        conn = self._ensure_conn()
        now = utcnow()

        cursor = await conn.execute(
            """INSERT INTO pending_changes (kind, record_id, record, timestamp, synced)
               VALUES (?, ?, ?, ?, 0)""",
            (
                kind.value,
                record.id,
                json.dumps(record.to_dict()),
                now.isoformat(),
            ),
        )
        await conn.commit()

        change = PendingChange(
            id=cursor.lastrowid or 0,
            kind=kind,
            record=record,
            timestamp=now,
            synced=False,
        )
        logger.debug("Queued %s for record %d as change %d", kind, record.id, change.id)
        return change

    async def list_pending(self) -> list[PendingChange]:
        """Get all unsynced changes, ordered by id ASC."""
        conn = self._ensure_conn()

        async with conn.execute(
            "SELECT * FROM pending_changes WHERE synced = 0 ORDER BY id ASC"
        ) as cursor:
            rows = await cursor.fetchall()
        return [_row_to_pending_change(r) for r in rows]

    async def mark_synced(self, change_id: int) -> None:
        """Mark one change as synced."""
        conn = self._ensure_conn()
        await conn.execute(
            "UPDATE pending_changes SET synced = 1 WHERE id = ? AND synced = 0",
            (change_id,),
        )
        await conn.commit()

    async def purge_synced(self) -> int:
        """Delete synced changes. Returns count purged."""
        conn = self._ensure_conn()
        cursor = await conn.execute("DELETE FROM pending_changes WHERE synced = 1")
        await conn.commit()
        return cursor.rowcount

    async def get_queue_stats(self) -> dict[str, int]:
        """Get change queue statistics."""
        conn = self._ensure_conn()

        async with conn.execute(
            """SELECT
                COUNT(*) as total,
                SUM(CASE WHEN synced = 0 THEN 1 ELSE 0 END) as pending,
                SUM(CASE WHEN synced = 1 THEN 1 ELSE 0 END) as synced,
                MAX(id) as last_id
               FROM pending_changes"""
        ) as cursor:
            row = await cursor.fetchone()
            if row is None:
                return {"total": 0, "pending": 0, "synced": 0, "last_id": 0}
        return {
            "total": row["total"] or 0,
            "pending": row["pending"] or 0,
            "synced": row["synced"] or 0,
            "last_id": row["last_id"] or 0,
        }


def _row_to_pending_change(row: Any) -> PendingChange:
    """Convert a database row to a PendingChange."""
    payload: dict[str, Any] = json.loads(str(row["record"])) if row["record"] else {}
    return PendingChange(
        id=int(row["id"]),
        kind=ChangeKind(row["kind"]),
        record=Record.from_dict(payload),
        timestamp=parse_timestamp(row["timestamp"]) or utcnow(),
        synced=bool(row["synced"]),
    )
