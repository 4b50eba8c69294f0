"""Sync engine, merge rule, connectivity monitors and status channel."""

from offline_sync.sync.connectivity import (
    ConnectivityMonitor,
    ProbeConnectivityMonitor,
    StaticConnectivityMonitor,
)
from offline_sync.sync.merge import should_apply_remote
from offline_sync.sync.status import StatusChannel
from offline_sync.sync.sync_engine import (
    SyncEngine,
    SyncEngineState,
    SyncOutcome,
    SyncResult,
    UploadFailure,
)

__all__ = [
    "ConnectivityMonitor",
    "ProbeConnectivityMonitor",
    "StaticConnectivityMonitor",
    "StatusChannel",
    "SyncEngine",
    "SyncEngineState",
    "SyncOutcome",
    "SyncResult",
    "UploadFailure",
    "should_apply_remote",
]
