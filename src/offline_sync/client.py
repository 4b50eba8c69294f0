"""Client bootstrap: wires storage, remote, connectivity, sync engine and service."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any

from offline_sync.client_config import ClientConfig, ConnectivityMode, get_config
from offline_sync.remote.http_client import HttpRemoteClient
from offline_sync.service import RecordService
from offline_sync.storage.factory import create_storage
from offline_sync.sync.connectivity import (
    ConnectivityMonitor,
    ProbeConnectivityMonitor,
    StaticConnectivityMonitor,
)
from offline_sync.sync.status import StatusChannel
from offline_sync.sync.sync_engine import SyncEngine, SyncResult

if TYPE_CHECKING:
    from offline_sync.remote.base import RemoteClient
    from offline_sync.storage.base import SyncStorage

logger = logging.getLogger(__name__)


class OfflineClient:
    """
    One offline-capable client process.

    Usage:
        async with await OfflineClient.from_config() as client:
            await client.service.create({"name": "Ada", "email": "ada@example.com"})
            result = await client.sync()

    With ``sync_on_reconnect`` a sync cycle is launched whenever the monitor
    reports an offline to online transition.
    """

    def __init__(
        self,
        storage: SyncStorage,
        remote: RemoteClient,
        monitor: ConnectivityMonitor,
        *,
        status: StatusChannel | None = None,
        sync_on_reconnect: bool = False,
    ) -> None:
        self._storage = storage
        self._remote = remote
        self._monitor = monitor
        self._status = status if status is not None else StatusChannel()
        self._sync_on_reconnect = sync_on_reconnect
        self._engine = SyncEngine(storage, remote, monitor, self._status)
        self._service = RecordService(storage, remote, monitor)
        self._unsubscribe: Any = None
        self._sync_tasks: set[asyncio.Task[SyncResult]] = set()
        self._started = False

    @classmethod
    async def from_config(
        cls,
        config: ClientConfig | None = None,
        *,
        offline: bool = False,
        sync_on_reconnect: bool | None = None,
    ) -> OfflineClient:
        """Build a client from the client configuration.

        Args:
            config: Configuration to use; the saved configuration when None
            offline: Force a static offline monitor regardless of the mode
            sync_on_reconnect: Override the configured reconnect behavior
        """
        config = config or get_config()
        storage = await create_storage(config.db_path)
        remote = HttpRemoteClient(config.remote.server_url, timeout=config.remote.timeout)

        monitor: ConnectivityMonitor
        mode = config.connectivity.mode
        if offline or mode == ConnectivityMode.OFFLINE:
            monitor = StaticConnectivityMonitor(online=False)
        elif mode == ConnectivityMode.ONLINE:
            monitor = StaticConnectivityMonitor(online=True)
        else:
            monitor = ProbeConnectivityMonitor(
                remote, interval=config.connectivity.probe_interval
            )

        return cls(
            storage,
            remote,
            monitor,
            status=StatusChannel(history_size=config.sync.status_history),
            sync_on_reconnect=(
                config.sync.sync_on_reconnect if sync_on_reconnect is None else sync_on_reconnect
            ),
        )

    @property
    def storage(self) -> SyncStorage:
        return self._storage

    @property
    def remote(self) -> RemoteClient:
        return self._remote

    @property
    def monitor(self) -> ConnectivityMonitor:
        return self._monitor

    @property
    def status(self) -> StatusChannel:
        return self._status

    @property
    def engine(self) -> SyncEngine:
        return self._engine

    @property
    def service(self) -> RecordService:
        return self._service

    async def start(self) -> None:
        """Subscribe to connectivity changes and start probing if applicable."""
        if self._started:
            return
        if self._sync_on_reconnect:
            self._unsubscribe = self._monitor.subscribe(self._on_connectivity_change)
        if isinstance(self._monitor, ProbeConnectivityMonitor):
            await self._monitor.start()
        self._started = True

    async def close(self) -> None:
        """Stop probing, wait for reconnect syncs and release resources."""
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        if isinstance(self._monitor, ProbeConnectivityMonitor):
            await self._monitor.stop()
        if self._sync_tasks:
            await asyncio.gather(*self._sync_tasks, return_exceptions=True)
        await self._remote.close()
        await self._storage.close()
        self._started = False

    async def __aenter__(self) -> OfflineClient:
        await self.start()
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    async def sync(self) -> SyncResult:
        """Run one sync cycle now."""
        return await self._engine.sync()

    async def status_report(self) -> dict[str, Any]:
        """Snapshot of connectivity, engine state and queue contents."""
        last = self._engine.last_result
        report: dict[str, Any] = {
            "online": self._monitor.is_online(),
            "engine_state": str(self._engine.state),
            "records": await self._storage.count_records(),
            "queue": await self._storage.get_queue_stats(),
            "last_sync": last.to_dict() if last is not None else None,
        }
        if isinstance(self._remote, HttpRemoteClient):
            report["server_url"] = self._remote.server_url
        return report

    def _on_connectivity_change(self, online: bool) -> None:
        if not online:
            return
        logger.info("Back online, starting sync")
        task = asyncio.create_task(self._engine.sync())
        self._sync_tasks.add(task)
        task.add_done_callback(self._on_sync_done)

    def _on_sync_done(self, task: asyncio.Task[SyncResult]) -> None:
        self._sync_tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Reconnect sync failed: %s", exc, exc_info=exc)
