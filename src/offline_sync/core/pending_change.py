"""Pending change entries held in the change queue."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum

from offline_sync.core.record import Record
from offline_sync.utils.timeutils import utcnow


class ChangeKind(StrEnum):
    """Kind of local mutation awaiting remote confirmation."""

    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


@dataclass(frozen=True)
class PendingChange:
    """A queued mutation not yet confirmed by the remote store."""

    id: int  # Queue-local, insertion ordered
    kind: ChangeKind
    record: Record  # Snapshot at queue time, id already assigned locally
    timestamp: datetime = field(default_factory=utcnow)
    synced: bool = False

    def describe(self) -> str:
        """One-line human readable summary."""
        kind = self.kind.value.capitalize()
        return f"{kind} - {self.record.name} ({self.timestamp:%Y-%m-%d %H:%M})"
