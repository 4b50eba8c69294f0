"""Access to the authoritative remote record store."""

from offline_sync.remote.base import RemoteClient, RemoteError, RemoteRejected, RemoteUnreachable
from offline_sync.remote.http_client import HttpRemoteClient
from offline_sync.remote.memory_client import InMemoryRemoteClient, RemoteCall
from offline_sync.remote.repository import RecordRepository, RepositoryConflict, default_seed

__all__ = [
    "HttpRemoteClient",
    "InMemoryRemoteClient",
    "RecordRepository",
    "RemoteCall",
    "RemoteClient",
    "RemoteError",
    "RemoteRejected",
    "RemoteUnreachable",
    "RepositoryConflict",
    "default_seed",
]
