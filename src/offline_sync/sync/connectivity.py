"""Connectivity monitors: current reachability plus transition events."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from offline_sync.remote.base import RemoteClient

logger = logging.getLogger(__name__)

ConnectivityHandler = Callable[[bool], Any]


class ConnectivityMonitor:
    """
    Base monitor holding the online flag and the subscriber list.

    Handlers receive ``True`` when the client comes online and ``False`` when
    it goes offline, once per actual transition. Coroutine handlers are
    scheduled on the running loop.
    """

    def __init__(self, online: bool = True) -> None:
        self._online = online
        self._handlers: list[ConnectivityHandler] = []
        self._tasks: set[asyncio.Task[Any]] = set()

    def is_online(self) -> bool:
        """Whether the remote store is currently considered reachable."""
        return self._online

    def subscribe(self, handler: ConnectivityHandler) -> Callable[[], None]:
        """Register a transition handler. Returns an unsubscribe callable."""
        self._handlers.append(handler)
        return lambda: self.unsubscribe(handler)

    def unsubscribe(self, handler: ConnectivityHandler) -> None:
        self._handlers = [h for h in self._handlers if h != handler]

    def _set_online(self, online: bool) -> bool:
        """Update the flag; notify subscribers if it changed. Returns True on change."""
        if online == self._online:
            return False
        self._online = online
        logger.info("Connectivity changed: %s", "online" if online else "offline")
        for handler in list(self._handlers):
            try:
                result = handler(online)
                if asyncio.iscoroutine(result):
                    task = asyncio.ensure_future(result)
                    self._tasks.add(task)
                    task.add_done_callback(self._tasks.discard)
            except Exception as e:
                logger.warning("Connectivity handler error: %s", e)
        return True


class StaticConnectivityMonitor(ConnectivityMonitor):
    """Monitor whose state is set explicitly (CLI flags, tests)."""

    def set_online(self, online: bool) -> bool:
        """Set the state. Returns True if this was a transition."""
        return self._set_online(online)


class ProbeConnectivityMonitor(ConnectivityMonitor):
    """
    Monitor that pings the remote store on a fixed interval.

    A ping that returns False or raises counts as offline.

    Usage:
        monitor = ProbeConnectivityMonitor(remote, interval=15.0)
        await monitor.start()
        ...
        await monitor.stop()
    """

    def __init__(
        self,
        remote: RemoteClient,
        *,
        interval: float = 15.0,
        online: bool = False,
    ) -> None:
        super().__init__(online=online)
        if interval <= 0:
            raise ValueError("Probe interval must be positive")
        self._remote = remote
        self._interval = interval
        self._probe_task: asyncio.Task[None] | None = None

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def is_running(self) -> bool:
        return self._probe_task is not None and not self._probe_task.done()

    async def probe_once(self) -> bool:
        """Ping the remote once and update the state. Returns the new state."""
        try:
            reachable = await self._remote.ping()
        except Exception:
            logger.debug("Connectivity probe raised", exc_info=True)
            reachable = False
        self._set_online(reachable)
        return reachable

    async def start(self) -> None:
        """Probe immediately, then keep probing in the background."""
        if self.is_running:
            return
        await self.probe_once()
        self._probe_task = asyncio.create_task(self._run())

    async def stop(self) -> None:
        """Stop background probing."""
        if self._probe_task is None:
            return
        self._probe_task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._probe_task
        self._probe_task = None

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self._interval)
            await self.probe_once()
