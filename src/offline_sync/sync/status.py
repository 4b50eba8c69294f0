"""Sync status channel: advisory progress messages for subscribers."""

from __future__ import annotations

import asyncio
import logging
from collections import deque
from collections.abc import Callable
from typing import Any

logger = logging.getLogger(__name__)

StatusHandler = Callable[[str], Any]


class StatusChannel:
    """
    Publishes human-readable sync progress messages.

    Messages are observational only; nothing should depend on their text.

    Usage:
        channel = StatusChannel()
        unsubscribe = channel.subscribe(print)
        await channel.publish("Starting sync...")
        unsubscribe()
    """

    def __init__(self, history_size: int = 50) -> None:
        self._handlers: list[StatusHandler] = []
        self._history: deque[str] = deque(maxlen=history_size)

    @property
    def history(self) -> list[str]:
        """Most recent messages, oldest first."""
        return list(self._history)

    def subscribe(self, handler: StatusHandler) -> Callable[[], None]:
        """
        Register a handler (sync function or coroutine function).

        Returns:
            A callable that removes the handler
        """
        self._handlers.append(handler)
        return lambda: self.unsubscribe(handler)

    def unsubscribe(self, handler: StatusHandler) -> None:
        """Remove a handler. Unknown handlers are ignored."""
        self._handlers = [h for h in self._handlers if h != handler]

    async def publish(self, message: str) -> None:
        """Record a message and deliver it to every subscriber."""
        self._history.append(message)
        logger.info("%s", message)

        # Copy so handlers may unsubscribe while being called
        for handler in list(self._handlers):
            try:
                result = handler(message)
                if asyncio.iscoroutine(result):
                    await result
            except Exception as e:
                logger.warning("Status handler error for %r: %s", message, e)
