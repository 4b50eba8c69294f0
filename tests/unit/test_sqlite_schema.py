"""Tests for SQLite schema setup and migrations."""

from __future__ import annotations

import pathlib

import aiosqlite
import pytest

from offline_sync.storage.factory import create_storage
from offline_sync.storage.memory_store import InMemoryStorage
from offline_sync.storage.sqlite_schema import MIGRATIONS, SCHEMA_VERSION, run_migrations
from offline_sync.storage.sqlite_store import SQLiteStorage


async def _schema_version(db_path: pathlib.Path) -> int:
    async with aiosqlite.connect(db_path) as conn:
        async with conn.execute("SELECT version FROM schema_version") as cursor:
            row = await cursor.fetchone()
    assert row is not None
    return int(row[0])


class TestInitialize:
    async def test_new_database_stamped(self, tmp_path: pathlib.Path) -> None:
        db_path = tmp_path / "new.db"
        async with SQLiteStorage(db_path):
            pass
        assert await _schema_version(db_path) == SCHEMA_VERSION

    async def test_initialize_twice_is_noop(self, sqlite_storage: SQLiteStorage) -> None:
        await sqlite_storage.initialize()
        await sqlite_storage.create_record({"name": "A", "email": "a@x.com"})

    async def test_use_before_initialize_raises(self, tmp_path: pathlib.Path) -> None:
        store = SQLiteStorage(tmp_path / "x.db")
        with pytest.raises(RuntimeError, match="not initialized"):
            await store.list_records()

    async def test_creates_parent_directory(self, tmp_path: pathlib.Path) -> None:
        db_path = tmp_path / "nested" / "dir" / "records.db"
        async with SQLiteStorage(db_path) as store:
            assert store.db_path == db_path.resolve()
        assert db_path.exists()


class TestMigrations:
    def test_current_schema_has_no_pending_migrations(self) -> None:
        assert not [key for key in MIGRATIONS if key[1] > SCHEMA_VERSION]

    async def test_run_migrations_applies_steps_in_order(
        self, monkeypatch: pytest.MonkeyPatch, tmp_path: pathlib.Path
    ) -> None:
        monkeypatch.setitem(
            MIGRATIONS, (1, 2), ["ALTER TABLE records ADD COLUMN phone TEXT NOT NULL DEFAULT ''"]
        )
        monkeypatch.setitem(
            MIGRATIONS, (2, 3), ["CREATE INDEX IF NOT EXISTS idx_records_phone ON records(phone)"]
        )
        db_path = tmp_path / "old.db"
        async with SQLiteStorage(db_path) as store:
            await store.create_record({"name": "Old", "email": "old@x.com"})

        async with aiosqlite.connect(db_path) as conn:
            final = await run_migrations(conn, SCHEMA_VERSION, target_version=3)
            async with conn.execute("SELECT phone FROM records") as cursor:
                rows = await cursor.fetchall()

        assert final == 3
        assert [tuple(r) for r in rows] == [("",)]
        assert await _schema_version(db_path) == 3

    async def test_already_applied_column_is_tolerated(
        self, monkeypatch: pytest.MonkeyPatch, tmp_path: pathlib.Path
    ) -> None:
        monkeypatch.setitem(
            MIGRATIONS, (1, 2), ["ALTER TABLE records ADD COLUMN position TEXT"]
        )
        db_path = tmp_path / "partial.db"
        async with SQLiteStorage(db_path):
            pass

        async with aiosqlite.connect(db_path) as conn:
            assert await run_migrations(conn, SCHEMA_VERSION, target_version=2) == 2

        assert await _schema_version(db_path) == 2


class TestFactory:
    async def test_memory_without_path(self) -> None:
        store = await create_storage()
        assert isinstance(store, InMemoryStorage)

    async def test_sqlite_with_path(self, tmp_path: pathlib.Path) -> None:
        store = await create_storage(tmp_path / "f.db")
        try:
            assert isinstance(store, SQLiteStorage)
            await store.create_record({"name": "A", "email": "a@x.com"})
        finally:
            await store.close()
