"""Remote client interface and classified remote failures."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from offline_sync.core.record import Record


class RemoteError(Exception):
    """Error from a remote store operation."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class RemoteUnreachable(RemoteError):
    """Transient failure: network error, timeout or server-side fault."""


class RemoteRejected(RemoteError):
    """The remote store refused the operation (validation, conflict, missing target)."""


class RemoteClient(ABC):
    """
    CRUD access to the authoritative remote record store.

    Every operation either succeeds or raises RemoteUnreachable /
    RemoteRejected; callers never see transport-specific exceptions.
    """

    @abstractmethod
    async def create(self, record: Record) -> Record:
        """Create a record remotely. The remote assigns its own id."""
        ...

    @abstractmethod
    async def update(self, record: Record) -> Record:
        """Replace the remote record with the same id."""
        ...

    @abstractmethod
    async def delete(self, record_id: int) -> bool:
        """Delete by id. Returns False if the remote did not have it."""
        ...

    @abstractmethod
    async def get(self, record_id: int) -> Record | None:
        """Get a record by id, or None if absent."""
        ...

    @abstractmethod
    async def list_all(self) -> list[Record]:
        """Return the full authoritative snapshot."""
        ...

    @abstractmethod
    async def ping(self) -> bool:
        """Return True if the remote store is reachable."""
        ...

    async def close(self) -> None:  # noqa: B027
        """Release transport resources. No-op by default."""
