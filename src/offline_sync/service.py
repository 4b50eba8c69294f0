"""Record write path: local first, then a best-effort remote call."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from offline_sync.core.pending_change import ChangeKind
from offline_sync.core.record import RECORD_FIELDS
from offline_sync.remote.base import RemoteError
from offline_sync.utils.timeutils import utcnow

if TYPE_CHECKING:
    from offline_sync.core.record import Record
    from offline_sync.remote.base import RemoteClient
    from offline_sync.storage.base import SyncStorage
    from offline_sync.sync.connectivity import ConnectivityMonitor

logger = logging.getLogger(__name__)


class RecordNotFound(LookupError):
    """An update targeted a record that does not exist locally."""

    def __init__(self, record_id: int) -> None:
        super().__init__(f"Record {record_id} not found")
        self.record_id = record_id


class RecordService:
    """
    Mutations and queries over the local record store.

    Every write completes locally first. When online, one remote call is
    attempted; if it fails, or the client is offline, the change is queued
    for the next sync. Remote failures never surface to the caller.
    """

    def __init__(
        self,
        storage: SyncStorage,
        remote: RemoteClient,
        monitor: ConnectivityMonitor,
    ) -> None:
        self._storage = storage
        self._remote = remote
        self._monitor = monitor

    async def create(self, fields: dict[str, Any]) -> Record:
        """Create a record locally and try to push it.

        Raises:
            ConstraintViolation: If the email is already in use locally
        """
        record = await self._storage.create_record(fields)
        logger.debug("Created local record %d", record.id)
        await self._push(ChangeKind.CREATE, record)
        return record

    async def update(self, record_id: int, **changes: Any) -> Record:
        """Apply field changes to an existing record and try to push it.

        Raises:
            RecordNotFound: If no local record has this id
            ConstraintViolation: If the new email collides with another record
            ValueError: If a change names anything but a domain field
        """
        # id is fixed once assigned and updated_at is always stamped here
        invalid = set(changes) - set(RECORD_FIELDS)
        if invalid:
            raise ValueError(f"Cannot update record fields: {', '.join(sorted(invalid))}")

        existing = await self._storage.get_record(record_id)
        if existing is None:
            raise RecordNotFound(record_id)

        updated = existing.with_fields(**{**changes, "updated_at": utcnow()})
        record = await self._storage.update_record(updated)
        logger.debug("Updated local record %d", record.id)
        await self._push(ChangeKind.UPDATE, record)
        return record

    async def delete(self, record_id: int) -> bool:
        """Delete a record locally. Returns False if it did not exist."""
        snapshot = await self._storage.get_record(record_id)
        deleted = await self._storage.delete_record(record_id)
        if not deleted or snapshot is None:
            return False

        logger.debug("Deleted local record %d", record_id)
        await self._push(ChangeKind.DELETE, snapshot)
        return True

    async def get(self, record_id: int) -> Record | None:
        return await self._storage.get_record(record_id)

    async def list(self) -> list[Record]:
        return await self._storage.list_records()

    async def pending_summaries(self) -> list[str]:
        """Human-readable summaries of the changes waiting to sync."""
        pending = await self._storage.list_pending()
        return [change.describe() for change in pending]

    async def _push(self, kind: ChangeKind, record: Record) -> None:
        """One best-effort remote attempt; enqueue on any remote failure."""
        if self._monitor.is_online():
            try:
                await self._send(kind, record)
                return
            except RemoteError as e:
                logger.info("Remote %s of record %d failed, queueing: %s", kind, record.id, e)

        change = await self._storage.enqueue(kind, record)
        logger.debug("Queued change %d (%s record %d)", change.id, kind, record.id)

    async def _send(self, kind: ChangeKind, record: Record) -> None:
        if kind == ChangeKind.CREATE:
            await self._remote.create(record)
        elif kind == ChangeKind.UPDATE:
            await self._remote.update(record)
        else:
            await self._remote.delete(record.id)
