"""Tests for connectivity monitors."""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock

import pytest

from offline_sync.sync.connectivity import ProbeConnectivityMonitor, StaticConnectivityMonitor


class TestStaticMonitor:
    def test_initial_state(self) -> None:
        assert StaticConnectivityMonitor().is_online() is True
        assert StaticConnectivityMonitor(online=False).is_online() is False

    def test_handlers_called_on_transition_only(self) -> None:
        monitor = StaticConnectivityMonitor(online=True)
        events: list[bool] = []
        monitor.subscribe(events.append)

        assert monitor.set_online(True) is False
        assert monitor.set_online(False) is True
        assert monitor.set_online(False) is False
        assert monitor.set_online(True) is True

        assert events == [False, True]

    def test_unsubscribe_callable(self) -> None:
        monitor = StaticConnectivityMonitor(online=False)
        events: list[bool] = []
        unsubscribe = monitor.subscribe(events.append)

        unsubscribe()
        monitor.set_online(True)

        assert events == []

    def test_handler_error_does_not_propagate(self) -> None:
        monitor = StaticConnectivityMonitor(online=False)
        events: list[bool] = []

        def broken(online: bool) -> None:
            raise RuntimeError("handler failed")

        monitor.subscribe(broken)
        monitor.subscribe(events.append)

        monitor.set_online(True)

        assert monitor.is_online() is True
        assert events == [True]

    async def test_async_handler_scheduled(self) -> None:
        monitor = StaticConnectivityMonitor(online=False)
        seen = asyncio.Event()

        async def handler(online: bool) -> None:
            seen.set()

        monitor.subscribe(handler)
        monitor.set_online(True)

        await asyncio.wait_for(seen.wait(), timeout=1.0)


class TestProbeMonitor:
    def test_rejects_non_positive_interval(self) -> None:
        with pytest.raises(ValueError):
            ProbeConnectivityMonitor(AsyncMock(), interval=0)

    async def test_probe_once_updates_state(self) -> None:
        remote = AsyncMock()
        remote.ping = AsyncMock(return_value=True)
        monitor = ProbeConnectivityMonitor(remote, interval=10)
        events: list[bool] = []
        monitor.subscribe(events.append)

        assert monitor.is_online() is False
        assert await monitor.probe_once() is True
        assert monitor.is_online() is True

        remote.ping.return_value = False
        assert await monitor.probe_once() is False
        assert events == [True, False]

    async def test_ping_exception_means_offline(self) -> None:
        remote = AsyncMock()
        remote.ping = AsyncMock(side_effect=OSError("network down"))
        monitor = ProbeConnectivityMonitor(remote, interval=10, online=True)

        assert await monitor.probe_once() is False
        assert monitor.is_online() is False

    async def test_start_probes_and_stop_cancels(self) -> None:
        remote = AsyncMock()
        remote.ping = AsyncMock(return_value=True)
        monitor = ProbeConnectivityMonitor(remote, interval=0.01)

        await monitor.start()
        assert monitor.is_online() is True
        assert monitor.is_running is True

        await asyncio.sleep(0.05)
        assert remote.ping.await_count >= 2

        await monitor.stop()
        assert monitor.is_running is False
        calls = remote.ping.await_count
        await asyncio.sleep(0.03)
        assert remote.ping.await_count == calls

    async def test_background_probe_detects_transition(self) -> None:
        remote = AsyncMock()
        remote.ping = AsyncMock(return_value=False)
        monitor = ProbeConnectivityMonitor(remote, interval=0.01)
        came_online = asyncio.Event()
        monitor.subscribe(lambda online: came_online.set() if online else None)

        await monitor.start()
        assert monitor.is_online() is False

        remote.ping.return_value = True
        await asyncio.wait_for(came_online.wait(), timeout=1.0)
        await monitor.stop()

    async def test_stop_without_start(self) -> None:
        monitor = ProbeConnectivityMonitor(AsyncMock(), interval=1)
        await monitor.stop()
