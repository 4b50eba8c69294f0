"""Record commands: add, update, delete, get, list, pending."""

from __future__ import annotations

import logging
from typing import Annotated, Any

import typer

from offline_sync.cli._helpers import fail, open_client, output_json, run_async
from offline_sync.cli.tui import render_records
from offline_sync.service import RecordNotFound
from offline_sync.storage.base import ConstraintViolation

logger = logging.getLogger(__name__)


def add(
    name: Annotated[str, typer.Argument(help="Display name")],
    email: Annotated[str, typer.Argument(help="Email address (must be unique)")],
    department: Annotated[str, typer.Option("--department", "-d", help="Department")] = "",
    position: Annotated[str, typer.Option("--position", "-p", help="Position / job title")] = "",
) -> None:
    """Create a record locally and push it if the server is reachable.

    Examples:
        osync add "Ada Lovelace" ada@example.com -d Research -p Analyst
        osync --offline add Bob bob@example.com
    """

    async def _add() -> None:
        async with open_client() as client:
            try:
                record = await client.service.create(
                    {"name": name, "email": email, "department": department, "position": position}
                )
            except ConstraintViolation as e:
                fail(str(e))
            pending = len(await client.storage.list_pending())

        typer.secho(f"Created record {record.id}: {record.name}", fg=typer.colors.GREEN)
        if pending:
            typer.secho(f"{pending} change(s) waiting to sync", fg=typer.colors.YELLOW)

    run_async(_add())


def update(
    record_id: Annotated[int, typer.Argument(help="Record id")],
    name: Annotated[str | None, typer.Option("--name", "-n", help="New name")] = None,
    email: Annotated[str | None, typer.Option("--email", "-e", help="New email")] = None,
    department: Annotated[
        str | None, typer.Option("--department", "-d", help="New department")
    ] = None,
    position: Annotated[str | None, typer.Option("--position", "-p", help="New position")] = None,
) -> None:
    """Change fields of an existing record.

    Examples:
        osync update 3 --position "Lead Engineer"
        osync update 3 -n "Ada King" -e ada.king@example.com
    """
    changes: dict[str, Any] = {
        key: value
        for key, value in (
            ("name", name),
            ("email", email),
            ("department", department),
            ("position", position),
        )
        if value is not None
    }
    if not changes:
        fail("Nothing to update; pass at least one of --name, --email, --department, --position")

    async def _update() -> None:
        async with open_client() as client:
            try:
                record = await client.service.update(record_id, **changes)
            except (RecordNotFound, ConstraintViolation) as e:
                fail(str(e))

        typer.secho(f"Updated record {record.id}: {record.name}", fg=typer.colors.GREEN)

    run_async(_update())


def delete(
    record_id: Annotated[int, typer.Argument(help="Record id")],
) -> None:
    """Delete a record locally; the deletion is synced to the server.

    Examples:
        osync delete 3
    """

    async def _delete() -> None:
        async with open_client() as client:
            deleted = await client.service.delete(record_id)
        if not deleted:
            fail(f"Record {record_id} not found")
        typer.secho(f"Deleted record {record_id}", fg=typer.colors.GREEN)

    run_async(_delete())


def get(
    record_id: Annotated[int, typer.Argument(help="Record id")],
    json_output: Annotated[bool, typer.Option("--json", "-j", help="Output as JSON")] = False,
) -> None:
    """Show one local record."""

    async def _get() -> None:
        async with open_client() as client:
            record = await client.service.get(record_id)
        if record is None:
            fail(f"Record {record_id} not found")
        if json_output:
            output_json(record.to_dict())
            return
        for key, value in record.to_dict().items():
            typer.echo(f"{key:>10}: {value}")

    run_async(_get())


def list_records(
    json_output: Annotated[bool, typer.Option("--json", "-j", help="Output as JSON")] = False,
) -> None:
    """List local records.

    Examples:
        osync list
        osync list --json
    """

    async def _list() -> None:
        async with open_client() as client:
            records = await client.service.list()
        if json_output:
            output_json([r.to_dict() for r in records])
        else:
            render_records(records)

    run_async(_list())


def pending() -> None:
    """Show local changes waiting to be synced."""

    async def _pending() -> None:
        async with open_client() as client:
            summaries = await client.service.pending_summaries()
        if not summaries:
            typer.secho("No pending changes.", fg=typer.colors.GREEN)
            return
        typer.secho(f"{len(summaries)} pending change(s):", fg=typer.colors.YELLOW)
        for summary in summaries:
            typer.echo(f"  {summary}")

    run_async(_pending())


def register(app: typer.Typer) -> None:
    """Register record commands on the app."""
    app.command()(add)
    app.command()(update)
    app.command()(delete)
    app.command()(get)
    app.command(name="list")(list_records)
    app.command()(pending)
