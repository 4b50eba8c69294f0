"""Storage backends for the local record store and change queue."""

from offline_sync.storage.base import ChangeQueue, ConstraintViolation, LocalStore, SyncStorage
from offline_sync.storage.factory import create_storage
from offline_sync.storage.memory_store import InMemoryStorage
from offline_sync.storage.sqlite_store import SQLiteStorage

__all__ = [
    "ChangeQueue",
    "ConstraintViolation",
    "InMemoryStorage",
    "LocalStore",
    "SQLiteStorage",
    "SyncStorage",
    "create_storage",
]
