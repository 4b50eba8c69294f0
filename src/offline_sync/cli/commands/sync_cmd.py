"""Sync commands: sync, status."""

from __future__ import annotations

from typing import Annotated

import typer

from offline_sync.cli._helpers import open_client, output_json, run_async
from offline_sync.cli.tui import render_status
from offline_sync.sync.sync_engine import SyncOutcome


def sync(
    json_output: Annotated[bool, typer.Option("--json", "-j", help="Output as JSON")] = False,
) -> None:
    """Upload pending changes and merge the server's records.

    Exits with status 1 when the device is offline or the cycle failed.

    Examples:
        osync sync
        osync sync --json
    """

    async def _sync() -> None:
        async with open_client() as client:
            if not json_output:
                client.status.subscribe(
                    lambda message: typer.secho(message, fg=typer.colors.BRIGHT_BLACK)
                )
            result = await client.sync()

        if json_output:
            output_json(result.to_dict())
        elif result.outcome == SyncOutcome.COMPLETED:
            typer.secho(
                f"Uploaded {result.uploaded}/{result.pending_found}, "
                f"downloaded {result.downloaded} "
                f"({result.inserted} new, {result.overwritten} updated)",
                fg=typer.colors.GREEN,
            )
            for failure in result.failures:
                typer.secho(
                    f"  still pending: {failure.kind} record {failure.record_id} "
                    f"({failure.reason})",
                    fg=typer.colors.YELLOW,
                )

        if result.outcome != SyncOutcome.COMPLETED:
            raise typer.Exit(1)

    run_async(_sync())


def status(
    json_output: Annotated[bool, typer.Option("--json", "-j", help="Output as JSON")] = False,
) -> None:
    """Show connectivity, record count and queue state."""

    async def _status() -> None:
        async with open_client() as client:
            report = await client.status_report()
        if json_output:
            output_json(report)
        else:
            render_status(report)

    run_async(_status())


def register(app: typer.Typer) -> None:
    """Register sync commands on the app."""
    app.command()(sync)
    app.command()(status)
