"""Storage factory for creating storage based on configuration."""

from __future__ import annotations

import logging
from pathlib import Path

from offline_sync.storage.base import SyncStorage
from offline_sync.storage.memory_store import InMemoryStorage
from offline_sync.storage.sqlite_store import SQLiteStorage

logger = logging.getLogger(__name__)


async def create_storage(db_path: str | Path | None = None) -> SyncStorage:
    """
    Create and initialize a storage instance.

    Args:
        db_path: SQLite database file; in-memory storage when None

    Returns:
        Initialized storage providing both the record store and change queue

    Examples:
        storage = await create_storage("./records.db")
        storage = await create_storage()  # ephemeral, for tests
    """
    storage: SyncStorage
    if db_path is None:
        logger.debug("Using in-memory storage")
        storage = InMemoryStorage()
    else:
        storage = SQLiteStorage(db_path)
    await storage.initialize()
    return storage
