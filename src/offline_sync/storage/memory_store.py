"""In-memory storage backend for development and testing."""

from __future__ import annotations

from dataclasses import replace
from typing import Any

from offline_sync.core.pending_change import ChangeKind, PendingChange
from offline_sync.core.record import UNIQUE_FIELD, Record
from offline_sync.storage.base import ConstraintViolation, SyncStorage
from offline_sync.utils.timeutils import utcnow


class InMemoryStorage(SyncStorage):
    """Dict-based storage with the same contract as SQLiteStorage.

    Data is lost when the process exits. Dicts preserve insertion order,
    which gives the FIFO queue ordering for free.
    """

    def __init__(self) -> None:
        self._records: dict[int, Record] = {}
        self._email_index: dict[str, int] = {}
        self._changes: dict[int, PendingChange] = {}
        self._last_record_id = 0
        self._last_change_id = 0

    # ========== Record Operations ==========

    async def create_record(self, fields: dict[str, Any]) -> Record:
        record = Record.from_dict({**fields, "id": 0})
        self._check_unique(record.unique_value, exclude_id=None)

        self._last_record_id += 1
        stored = replace(record, id=self._last_record_id)
        self._put(stored)
        return stored

    async def update_record(self, record: Record) -> Record:
        if record.id <= 0:
            raise ValueError("update_record requires a positive record id")
        self._check_unique(record.unique_value, exclude_id=record.id)

        previous = self._records.get(record.id)
        if previous is not None:
            self._email_index.pop(previous.unique_value, None)
        self._put(record)
        # Upserted ids are never handed out again by create_record
        self._last_record_id = max(self._last_record_id, record.id)
        return record

    async def get_record(self, record_id: int) -> Record | None:
        return self._records.get(record_id)

    async def list_records(self) -> list[Record]:
        return [self._records[k] for k in sorted(self._records)]

    async def delete_record(self, record_id: int) -> bool:
        record = self._records.pop(record_id, None)
        if record is None:
            return False
        self._email_index.pop(record.unique_value, None)
        return True

    async def count_records(self) -> int:
        return len(self._records)

    def _put(self, record: Record) -> None:
        self._records[record.id] = record
        self._email_index[record.unique_value] = record.id

    def _check_unique(self, value: str, exclude_id: int | None) -> None:
        owner = self._email_index.get(value)
        if owner is not None and owner != exclude_id:
            raise ConstraintViolation(UNIQUE_FIELD, value, existing_id=owner)

    # ========== Change Queue Operations ==========

    async def enqueue(self, kind: ChangeKind, record: Record) -> PendingChange:
        self._last_change_id += 1
        change = PendingChange(
            id=self._last_change_id,
            kind=kind,
            record=record,
            timestamp=utcnow(),
            synced=False,
        )
        self._changes[change.id] = change
        return change

    async def list_pending(self) -> list[PendingChange]:
        return [c for c in self._changes.values() if not c.synced]

    async def mark_synced(self, change_id: int) -> None:
        change = self._changes.get(change_id)
        if change is not None and not change.synced:
            self._changes[change_id] = replace(change, synced=True)

    async def purge_synced(self) -> int:
        synced_ids = [cid for cid, c in self._changes.items() if c.synced]
        for cid in synced_ids:
            del self._changes[cid]
        return len(synced_ids)

    async def get_queue_stats(self) -> dict[str, int]:
        pending = sum(1 for c in self._changes.values() if not c.synced)
        return {
            "total": len(self._changes),
            "pending": pending,
            "synced": len(self._changes) - pending,
            "last_id": max(self._changes, default=0),
        }

    async def clear(self) -> None:
        """Delete all records and queued changes (ids keep counting upward)."""
        self._records.clear()
        self._email_index.clear()
        self._changes.clear()
