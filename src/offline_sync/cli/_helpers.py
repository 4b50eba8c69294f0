"""Shared CLI helpers for client setup, logging and output formatting."""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from collections.abc import AsyncIterator, Coroutine
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any, NoReturn, TypeVar

import typer

from offline_sync.client import OfflineClient
from offline_sync.client_config import ClientConfig

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class CLIState:
    """Options set by the top-level callback."""

    offline: bool = False
    verbose: bool = False


state = CLIState()


def configure_logging(verbose: bool) -> None:
    """Send log output to stderr; DEBUG with --verbose, WARNING otherwise."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        stream=sys.stderr,
        format="%(levelname)s %(name)s: %(message)s",
    )


def get_config() -> ClientConfig:
    """Get client configuration."""
    return ClientConfig.load()


def run_async(coro: Coroutine[Any, Any, T]) -> T:
    """Run an async CLI command.

    Yields once before the loop closes so aiosqlite worker thread callbacks
    are drained first.
    """

    async def _with_cleanup() -> T:
        try:
            return await coro
        finally:
            await asyncio.sleep(0)

    return asyncio.run(_with_cleanup())


@asynccontextmanager
async def open_client(config: ClientConfig | None = None) -> AsyncIterator[OfflineClient]:
    """Open a started client for one command and close it afterwards.

    Reconnect syncs are disabled; the CLI only syncs when asked to.
    """
    client = await OfflineClient.from_config(
        config or get_config(),
        offline=state.offline,
        sync_on_reconnect=False,
    )
    try:
        await client.start()
        yield client
    finally:
        await client.close()


def output_json(data: Any) -> None:
    typer.echo(json.dumps(data, indent=2, default=str))


def fail(message: str) -> NoReturn:
    """Print an error in red and exit with status 1."""
    typer.secho(f"Error: {message}", fg=typer.colors.RED, err=True)
    raise typer.Exit(1)
