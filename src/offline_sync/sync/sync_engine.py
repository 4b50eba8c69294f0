"""Sync engine: drains the pending-change queue and reconciles with the remote."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from typing import TYPE_CHECKING, Any

from offline_sync.core.pending_change import ChangeKind, PendingChange
from offline_sync.remote.base import RemoteError
from offline_sync.sync.merge import should_apply_remote
from offline_sync.utils.timeutils import utcnow

if TYPE_CHECKING:
    from offline_sync.core.record import Record
    from offline_sync.remote.base import RemoteClient
    from offline_sync.storage.base import SyncStorage
    from offline_sync.sync.connectivity import ConnectivityMonitor
    from offline_sync.sync.status import StatusChannel

logger = logging.getLogger(__name__)

MSG_BUSY = "Sync already in progress..."
MSG_OFFLINE = "Cannot sync: device is offline"
MSG_STARTING = "Starting sync..."
MSG_DOWNLOADING = "Downloading latest data from server..."
MSG_COMPLETED = "Sync completed successfully!"


class SyncEngineState(StrEnum):
    IDLE = "idle"
    SYNCING = "syncing"


class SyncOutcome(StrEnum):
    COMPLETED = "completed"
    BUSY = "busy"
    OFFLINE = "offline"
    FAILED = "failed"


@dataclass(frozen=True)
class UploadFailure:
    """A queued change that could not be confirmed remotely this cycle."""

    change_id: int
    kind: ChangeKind
    record_id: int
    reason: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "change_id": self.change_id,
            "kind": str(self.kind),
            "record_id": self.record_id,
            "reason": self.reason,
        }


@dataclass(frozen=True)
class SyncResult:
    """Outcome and counters of one sync() call."""

    outcome: SyncOutcome
    pending_found: int = 0
    uploaded: int = 0
    failures: list[UploadFailure] = field(default_factory=list)
    downloaded: int = 0
    inserted: int = 0
    overwritten: int = 0
    unchanged: int = 0
    merge_failures: int = 0
    purged: int = 0
    reason: str | None = None
    started_at: datetime = field(default_factory=utcnow)
    finished_at: datetime = field(default_factory=utcnow)

    @property
    def succeeded(self) -> bool:
        return self.outcome == SyncOutcome.COMPLETED

    def to_dict(self) -> dict[str, Any]:
        return {
            "outcome": str(self.outcome),
            "pending_found": self.pending_found,
            "uploaded": self.uploaded,
            "failures": [f.to_dict() for f in self.failures],
            "downloaded": self.downloaded,
            "inserted": self.inserted,
            "overwritten": self.overwritten,
            "unchanged": self.unchanged,
            "merge_failures": self.merge_failures,
            "purged": self.purged,
            "reason": self.reason,
            "started_at": self.started_at.isoformat(),
            "finished_at": self.finished_at.isoformat(),
        }


class SyncEngine:
    """Orchestrates one sync cycle at a time.

    Cycle:
    1. Upload pending changes in FIFO order, marking confirmed ones synced
    2. Download the remote snapshot
    3. Merge it into the local store
    4. Purge synced queue entries

    Only one cycle runs at a time; overlapping calls return ``busy``.
    """

    def __init__(
        self,
        storage: SyncStorage,
        remote: RemoteClient,
        monitor: ConnectivityMonitor,
        status: StatusChannel,
    ) -> None:
        self._storage = storage
        self._remote = remote
        self._monitor = monitor
        self._status = status
        self._syncing = False
        self._last_result: SyncResult | None = None

    @property
    def state(self) -> SyncEngineState:
        return SyncEngineState.SYNCING if self._syncing else SyncEngineState.IDLE

    @property
    def is_syncing(self) -> bool:
        return self._syncing

    @property
    def last_result(self) -> SyncResult | None:
        """Result of the most recent cycle that actually ran."""
        return self._last_result

    async def sync(self) -> SyncResult:
        """Run one sync cycle."""
        # Check and set without an await in between
        if self._syncing:
            await self._status.publish(MSG_BUSY)
            return SyncResult(outcome=SyncOutcome.BUSY, reason=MSG_BUSY)
        if not self._monitor.is_online():
            await self._status.publish(MSG_OFFLINE)
            return SyncResult(outcome=SyncOutcome.OFFLINE, reason=MSG_OFFLINE)

        self._syncing = True
        try:
            result = await self._run_cycle()
        finally:
            self._syncing = False

        self._last_result = result
        return result

    async def _run_cycle(self) -> SyncResult:
        started_at = utcnow()
        stats: dict[str, int] = {
            "pending_found": 0,
            "uploaded": 0,
            "downloaded": 0,
            "inserted": 0,
            "overwritten": 0,
            "unchanged": 0,
            "merge_failures": 0,
            "purged": 0,
        }
        failures: list[UploadFailure] = []

        try:
            await self._status.publish(MSG_STARTING)

            pending = await self._storage.list_pending()
            stats["pending_found"] = len(pending)
            await self._status.publish(f"Found {len(pending)} pending changes to sync...")

            for change in pending:
                try:
                    await self._upload(change)
                except RemoteError as e:
                    logger.warning(
                        "Upload of change %d (%s record %d) failed: %s",
                        change.id,
                        change.kind,
                        change.record.id,
                        e,
                    )
                    failures.append(
                        UploadFailure(change.id, change.kind, change.record.id, str(e))
                    )
                    continue
                await self._storage.mark_synced(change.id)
                stats["uploaded"] += 1
            await self._status.publish(f"Uploaded {stats['uploaded']} changes...")

            await self._status.publish(MSG_DOWNLOADING)
            remote_records = await self._remote.list_all()
            stats["downloaded"] = len(remote_records)

            for remote_record in remote_records:
                try:
                    outcome = await self._merge(remote_record)
                except Exception:
                    logger.warning(
                        "Failed to merge remote record %d", remote_record.id, exc_info=True
                    )
                    stats["merge_failures"] += 1
                    continue
                stats[outcome] += 1

            stats["purged"] = await self._storage.purge_synced()
        except Exception as e:
            logger.error("Sync cycle failed: %s", e, exc_info=True)
            await self._status.publish(f"Sync failed: {e}")
            return SyncResult(
                outcome=SyncOutcome.FAILED,
                failures=failures,
                reason=str(e),
                started_at=started_at,
                finished_at=utcnow(),
                **stats,
            )

        await self._status.publish(MSG_COMPLETED)
        logger.debug("Sync finished: %s", stats)
        return SyncResult(
            outcome=SyncOutcome.COMPLETED,
            failures=failures,
            started_at=started_at,
            finished_at=utcnow(),
            **stats,
        )

    async def _upload(self, change: PendingChange) -> None:
        """Replay one queued change against the remote."""
        if change.kind == ChangeKind.CREATE:
            await self._remote.create(change.record)
        elif change.kind == ChangeKind.UPDATE:
            await self._remote.update(change.record)
        elif change.kind == ChangeKind.DELETE:
            # A record already gone remotely still counts as confirmed
            deleted = await self._remote.delete(change.record.id)
            if not deleted:
                logger.debug("Remote record %d was already absent", change.record.id)

    async def _merge(self, remote: Record) -> str:
        """Apply one remote record locally. Returns the counter it belongs to."""
        local = await self._storage.get_record(remote.id)
        if local is None:
            await self._storage.update_record(remote)
            return "inserted"
        if should_apply_remote(local, remote):
            await self._storage.update_record(remote)
            return "overwritten"
        return "unchanged"
