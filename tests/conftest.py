"""Pytest configuration and fixtures."""

from __future__ import annotations

import pathlib
from collections.abc import AsyncGenerator
from datetime import datetime

import pytest
import pytest_asyncio

from offline_sync.core.record import Record
from offline_sync.remote.memory_client import InMemoryRemoteClient
from offline_sync.remote.repository import RecordRepository
from offline_sync.service import RecordService
from offline_sync.storage.base import SyncStorage
from offline_sync.storage.memory_store import InMemoryStorage
from offline_sync.storage.sqlite_store import SQLiteStorage
from offline_sync.sync.connectivity import StaticConnectivityMonitor
from offline_sync.sync.status import StatusChannel
from offline_sync.sync.sync_engine import SyncEngine


@pytest_asyncio.fixture
async def storage() -> AsyncGenerator[InMemoryStorage, None]:
    """Create an in-memory storage instance."""
    store = InMemoryStorage()
    await store.initialize()
    yield store
    await store.close()


@pytest_asyncio.fixture
async def sqlite_storage(tmp_path: pathlib.Path) -> AsyncGenerator[SQLiteStorage, None]:
    """Create an initialized SQLite storage in a temp directory."""
    store = SQLiteStorage(tmp_path / "records.db")
    await store.initialize()
    yield store
    await store.close()


@pytest_asyncio.fixture(params=["memory", "sqlite"])
async def any_storage(
    request: pytest.FixtureRequest, tmp_path: pathlib.Path
) -> AsyncGenerator[SyncStorage, None]:
    """Run the same test against both storage backends."""
    store: SyncStorage
    if request.param == "memory":
        store = InMemoryStorage()
    else:
        store = SQLiteStorage(tmp_path / "records.db")
    await store.initialize()
    yield store
    await store.close()


@pytest.fixture
def repository() -> RecordRepository:
    """Create an empty remote repository."""
    return RecordRepository()


@pytest.fixture
def remote(repository: RecordRepository) -> InMemoryRemoteClient:
    """Create an in-process remote client over the repository."""
    return InMemoryRemoteClient(repository)


@pytest.fixture
def monitor() -> StaticConnectivityMonitor:
    """Connectivity monitor that starts online."""
    return StaticConnectivityMonitor(online=True)


@pytest.fixture
def status() -> StatusChannel:
    return StatusChannel()


@pytest.fixture
def engine(
    storage: InMemoryStorage,
    remote: InMemoryRemoteClient,
    monitor: StaticConnectivityMonitor,
    status: StatusChannel,
) -> SyncEngine:
    """Sync engine wired to in-memory collaborators."""
    return SyncEngine(storage, remote, monitor, status)


@pytest.fixture
def service(
    storage: InMemoryStorage,
    remote: InMemoryRemoteClient,
    monitor: StaticConnectivityMonitor,
) -> RecordService:
    """Record service wired to in-memory collaborators."""
    return RecordService(storage, remote, monitor)


@pytest.fixture
def reference_time() -> datetime:
    """Standard reference time for tests."""
    return datetime(2024, 2, 4, 14, 30, 0)


@pytest.fixture
def sample_record(reference_time: datetime) -> Record:
    """An unsaved record."""
    return Record.create(
        name="Ada Lovelace",
        email="ada@example.com",
        department="Research",
        position="Analyst",
        updated_at=reference_time,
    )


@pytest.fixture(autouse=True)
def _isolated_config(monkeypatch: pytest.MonkeyPatch, tmp_path: pathlib.Path) -> None:
    """Keep client config and server env config out of the real home directory."""
    from offline_sync import client_config
    from offline_sync.utils import config as server_config

    monkeypatch.setenv("OFFLINE_SYNC_DIR", str(tmp_path / "offline-sync"))
    client_config.reset_config()
    server_config.reset_config()
