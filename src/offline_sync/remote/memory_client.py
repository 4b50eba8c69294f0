"""In-process remote client backed by a RecordRepository."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from offline_sync.core.record import Record
from offline_sync.remote.base import RemoteClient, RemoteRejected, RemoteUnreachable
from offline_sync.remote.repository import RecordRepository, RepositoryConflict

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RemoteCall:
    """One observed remote operation."""

    operation: str  # "create", "update", "delete", "get", "list_all"
    record_id: int | None = None


class InMemoryRemoteClient(RemoteClient):
    """
    Remote client that talks to a repository in the same process.

    Failure injection:
        client.reachable = False             # every call raises RemoteUnreachable
        client.fail_on("create", record_id=1)  # that call raises RemoteUnreachable
        client.fail_on("update", record_id=2, rejected=True)  # RemoteRejected
    """

    def __init__(self, repository: RecordRepository | None = None) -> None:
        self.repository = repository if repository is not None else RecordRepository()
        self.reachable = True
        self.calls: list[RemoteCall] = []
        self._failures: dict[tuple[str, int | None], bool] = {}

    def fail_on(
        self, operation: str, record_id: int | None = None, *, rejected: bool = False
    ) -> None:
        """Make a specific operation fail until clear_failures() is called."""
        self._failures[(operation, record_id)] = rejected

    def clear_failures(self) -> None:
        self._failures.clear()

    def _enter(self, operation: str, record_id: int | None = None) -> None:
        self.calls.append(RemoteCall(operation, record_id))
        if not self.reachable:
            raise RemoteUnreachable("Remote store is unreachable")
        for key in ((operation, record_id), (operation, None)):
            if key in self._failures:
                if self._failures[key]:
                    raise RemoteRejected(f"{operation} rejected", status_code=422)
                raise RemoteUnreachable(f"{operation} failed in transit")

    async def create(self, record: Record) -> Record:
        self._enter("create", record.id)
        try:
            return self.repository.create(record)
        except RepositoryConflict as e:
            raise RemoteRejected(str(e), status_code=409) from e

    async def update(self, record: Record) -> Record:
        self._enter("update", record.id)
        try:
            stored = self.repository.replace(record.id, record)
        except RepositoryConflict as e:
            raise RemoteRejected(str(e), status_code=409) from e
        if stored is None:
            raise RemoteRejected(f"Record {record.id} not found", status_code=404)
        return stored

    async def delete(self, record_id: int) -> bool:
        self._enter("delete", record_id)
        return self.repository.delete(record_id)

    async def get(self, record_id: int) -> Record | None:
        self._enter("get", record_id)
        return self.repository.get(record_id)

    async def list_all(self) -> list[Record]:
        self._enter("list_all")
        return self.repository.list_all()

    async def ping(self) -> bool:
        return self.reachable
