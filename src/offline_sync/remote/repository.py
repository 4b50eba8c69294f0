"""In-process authoritative record repository.

Backs the record server and the in-memory remote client. Each instance owns
its own state; nothing is shared between instances.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import replace

from offline_sync.core.record import Record

logger = logging.getLogger(__name__)


class RepositoryConflict(ValueError):
    """A write would duplicate another record's email."""


def default_seed() -> list[Record]:
    """Sample data loaded by the server when seeding is enabled."""
    return [
        Record.create(
            name="John Doe",
            email="john.doe@example.com",
            department="Engineering",
            position="Software Engineer",
        )
    ]


class RecordRepository:
    """Authoritative record set with server-assigned ids."""

    def __init__(self, seed: Iterable[Record] | None = None) -> None:
        self._records: dict[int, Record] = {}
        self._next_id = 1
        for record in seed or ():
            self.create(record)

    def __len__(self) -> int:
        return len(self._records)

    def list_all(self) -> list[Record]:
        return list(self._records.values())

    def get(self, record_id: int) -> Record | None:
        return self._records.get(record_id)

    def create(self, record: Record) -> Record:
        """Store a record under a newly assigned id (any incoming id is ignored)."""
        self._check_email(record.email, exclude_id=None)
        stored = replace(record, id=self._next_id)
        self._next_id += 1
        self._records[stored.id] = stored
        logger.debug("Repository created record %d", stored.id)
        return stored

    def replace(self, record_id: int, record: Record) -> Record | None:
        """Overwrite an existing record. Returns None if the id is unknown."""
        if record_id not in self._records:
            return None
        self._check_email(record.email, exclude_id=record_id)
        stored = replace(record, id=record_id)
        self._records[record_id] = stored
        return stored

    def delete(self, record_id: int) -> bool:
        return self._records.pop(record_id, None) is not None

    def put(self, record: Record) -> Record:
        """Insert or overwrite a record keeping its id (test and seeding helper)."""
        if record.id <= 0:
            raise ValueError("put requires a positive record id")
        self._check_email(record.email, exclude_id=record.id)
        self._records[record.id] = record
        self._next_id = max(self._next_id, record.id + 1)
        return record

    def _check_email(self, email: str, exclude_id: int | None) -> None:
        for existing in self._records.values():
            if existing.email == email and existing.id != exclude_id:
                raise RepositoryConflict(f"A record with email={email!r} already exists")
