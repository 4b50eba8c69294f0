"""Tests for the record write path."""

from __future__ import annotations

from datetime import datetime

import pytest

from offline_sync.core.pending_change import ChangeKind
from offline_sync.remote.memory_client import InMemoryRemoteClient, RemoteCall
from offline_sync.remote.repository import RecordRepository
from offline_sync.service import RecordNotFound, RecordService
from offline_sync.storage.base import ConstraintViolation
from offline_sync.storage.memory_store import InMemoryStorage
from offline_sync.sync.connectivity import StaticConnectivityMonitor

ADA = {"name": "Ada", "email": "ada@x.com", "department": "Research"}


class TestCreate:
    async def test_online_create_pushes_without_queueing(
        self,
        service: RecordService,
        storage: InMemoryStorage,
        remote: InMemoryRemoteClient,
        repository: RecordRepository,
    ) -> None:
        record = await service.create(ADA)

        assert record.id == 1
        assert remote.calls == [RemoteCall("create", 1)]
        assert len(repository) == 1
        assert await storage.list_pending() == []

    async def test_offline_create_queues(
        self,
        service: RecordService,
        storage: InMemoryStorage,
        remote: InMemoryRemoteClient,
        monitor: StaticConnectivityMonitor,
    ) -> None:
        monitor.set_online(False)

        record = await service.create(ADA)

        assert remote.calls == []
        [change] = await storage.list_pending()
        assert change.kind == ChangeKind.CREATE
        assert change.record == record

    async def test_remote_failure_queues(
        self,
        service: RecordService,
        storage: InMemoryStorage,
        remote: InMemoryRemoteClient,
    ) -> None:
        remote.reachable = False

        record = await service.create(ADA)

        assert await storage.get_record(record.id) == record
        [change] = await storage.list_pending()
        assert change.record.id == record.id

    async def test_remote_rejection_queues(
        self,
        service: RecordService,
        storage: InMemoryStorage,
        remote: InMemoryRemoteClient,
    ) -> None:
        remote.fail_on("create", rejected=True)

        await service.create(ADA)

        assert len(await storage.list_pending()) == 1

    async def test_constraint_violation_propagates_and_nothing_queued(
        self,
        service: RecordService,
        storage: InMemoryStorage,
        remote: InMemoryRemoteClient,
    ) -> None:
        await service.create(ADA)
        remote.calls.clear()

        with pytest.raises(ConstraintViolation):
            await service.create({"name": "Other", "email": "ada@x.com"})

        assert await storage.count_records() == 1
        assert await storage.list_pending() == []
        assert remote.calls == []


class TestUpdate:
    async def test_update_changes_fields_and_timestamp(
        self,
        service: RecordService,
        storage: InMemoryStorage,
        remote: InMemoryRemoteClient,
    ) -> None:
        created = await service.create({**ADA, "updated_at": "2020-01-01T00:00:00"})

        updated = await service.update(created.id, position="Lead")

        assert updated.position == "Lead"
        assert updated.updated_at > datetime(2020, 1, 1)
        assert await storage.get_record(created.id) == updated
        assert remote.calls[-1] == RemoteCall("update", created.id)

    async def test_update_missing_raises(self, service: RecordService) -> None:
        with pytest.raises(RecordNotFound) as exc_info:
            await service.update(99, name="Nobody")
        assert exc_info.value.record_id == 99

    async def test_update_unknown_field_raises(self, service: RecordService) -> None:
        created = await service.create(ADA)
        with pytest.raises(ValueError):
            await service.update(created.id, salary="lots")

    async def test_update_cannot_change_id(
        self,
        service: RecordService,
        storage: InMemoryStorage,
        monitor: StaticConnectivityMonitor,
    ) -> None:
        created = await service.create(ADA)
        monitor.set_online(False)

        with pytest.raises(ValueError, match="id"):
            await service.update(created.id, id=42, email="b@x.com")

        assert await storage.list_records() == [created]
        assert await storage.get_record(42) is None
        assert await storage.list_pending() == []

    async def test_update_cannot_set_timestamp(
        self, service: RecordService, storage: InMemoryStorage
    ) -> None:
        created = await service.create(ADA)

        with pytest.raises(ValueError, match="updated_at"):
            await service.update(created.id, updated_at=datetime(2030, 1, 1))

        assert await storage.get_record(created.id) == created

    async def test_offline_update_queues_snapshot(
        self,
        service: RecordService,
        storage: InMemoryStorage,
        monitor: StaticConnectivityMonitor,
    ) -> None:
        created = await service.create(ADA)
        monitor.set_online(False)

        await service.update(created.id, name="Ada King")

        [change] = await storage.list_pending()
        assert change.kind == ChangeKind.UPDATE
        assert change.record.name == "Ada King"

    async def test_update_email_collision(self, service: RecordService) -> None:
        await service.create(ADA)
        other = await service.create({"name": "Bob", "email": "bob@x.com"})

        with pytest.raises(ConstraintViolation):
            await service.update(other.id, email="ada@x.com")


class TestDelete:
    async def test_delete_existing_online(
        self,
        service: RecordService,
        storage: InMemoryStorage,
        remote: InMemoryRemoteClient,
        repository: RecordRepository,
    ) -> None:
        created = await service.create(ADA)

        assert await service.delete(created.id) is True

        assert await storage.get_record(created.id) is None
        assert remote.calls[-1] == RemoteCall("delete", created.id)
        assert len(repository) == 0
        assert await storage.list_pending() == []

    async def test_delete_offline_queues_snapshot(
        self,
        service: RecordService,
        storage: InMemoryStorage,
        monitor: StaticConnectivityMonitor,
    ) -> None:
        created = await service.create(ADA)
        monitor.set_online(False)

        await service.delete(created.id)

        [change] = await storage.list_pending()
        assert change.kind == ChangeKind.DELETE
        assert change.record == created

    async def test_delete_missing_does_not_queue(
        self,
        service: RecordService,
        storage: InMemoryStorage,
        remote: InMemoryRemoteClient,
        monitor: StaticConnectivityMonitor,
    ) -> None:
        monitor.set_online(False)

        assert await service.delete(42) is False
        assert await storage.list_pending() == []
        assert remote.calls == []


class TestQueries:
    async def test_get_and_list(self, service: RecordService) -> None:
        first = await service.create(ADA)
        second = await service.create({"name": "Bob", "email": "bob@x.com"})

        assert await service.get(first.id) == first
        assert await service.get(999) is None
        assert await service.list() == [first, second]

    async def test_pending_summaries(
        self,
        service: RecordService,
        monitor: StaticConnectivityMonitor,
    ) -> None:
        monitor.set_online(False)
        created = await service.create(ADA)
        await service.delete(created.id)

        summaries = await service.pending_summaries()

        assert len(summaries) == 2
        assert summaries[0].startswith("Create - Ada (")
        assert summaries[1].startswith("Delete - Ada (")
