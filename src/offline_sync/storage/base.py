"""Abstract interfaces for the local record store and the change queue."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from offline_sync.core.pending_change import ChangeKind, PendingChange
    from offline_sync.core.record import Record


class ConstraintViolation(ValueError):
    """A write collided with the uniqueness constraint on a record field."""

    def __init__(self, field: str, value: str, existing_id: int | None = None) -> None:
        super().__init__(f"A record with {field}={value!r} already exists")
        self.field = field
        self.value = value
        self.existing_id = existing_id


class LocalStore(ABC):
    """
    Durable keyed record storage, the client's system of record while offline.

    Implementations assign monotonically increasing ids that are never reused
    and enforce uniqueness of the email field across live records. Every
    successful write is durable when the call returns.
    """

    @abstractmethod
    async def create_record(self, fields: dict[str, Any]) -> Record:
        """
        Insert a new record with a store-assigned id.

        Args:
            fields: Domain fields; any ``id`` entry is ignored

        Returns:
            The stored record including its assigned id

        Raises:
            ConstraintViolation: If the email is already used by a live record
        """
        ...

    @abstractmethod
    async def update_record(self, record: Record) -> Record:
        """
        Upsert a record by id.

        Inserts the record with that exact id when absent (used when merging
        remote records), otherwise overwrites all fields.

        Raises:
            ConstraintViolation: If the email collides with a different id
        """
        ...

    @abstractmethod
    async def get_record(self, record_id: int) -> Record | None:
        """Get a record by id, or None if absent."""
        ...

    @abstractmethod
    async def list_records(self) -> list[Record]:
        """List all records in insertion (id) order."""
        ...

    @abstractmethod
    async def delete_record(self, record_id: int) -> bool:
        """Delete a record. Returns True if it existed, False otherwise."""
        ...

    async def count_records(self) -> int:
        """Count live records. Backends may override with a cheaper query."""
        return len(await self.list_records())


class ChangeQueue(ABC):
    """Durable append-only log of mutations awaiting remote confirmation."""

    @abstractmethod
    async def enqueue(self, kind: ChangeKind, record: Record) -> PendingChange:
        """Append a change with ``synced=False`` and ``timestamp=now``."""
        ...

    @abstractmethod
    async def list_pending(self) -> list[PendingChange]:
        """Unsynced changes in insertion order."""
        ...

    @abstractmethod
    async def mark_synced(self, change_id: int) -> None:
        """Flag a change as confirmed. No-op if the id is unknown."""
        ...

    @abstractmethod
    async def purge_synced(self) -> int:
        """Remove every synced change. Returns the number removed."""
        ...

    @abstractmethod
    async def get_queue_stats(self) -> dict[str, int]:
        """Counts of ``total``, ``pending`` and ``synced`` entries plus ``last_id``."""
        ...


class SyncStorage(LocalStore, ChangeQueue):
    """A backend providing both the record store and the change queue."""

    async def initialize(self) -> None:  # noqa: B027
        """Open connections and create schema. No-op by default."""

    async def close(self) -> None:  # noqa: B027
        """Release resources. No-op by default."""
