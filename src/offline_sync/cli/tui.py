"""Rich terminal rendering for records and sync status."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

if TYPE_CHECKING:
    from offline_sync.core.record import Record

console = Console()

OUTCOME_COLORS = {
    "completed": "green",
    "busy": "yellow",
    "offline": "yellow",
    "failed": "red",
}


def render_records(records: list[Record]) -> None:
    """Print records as a table."""
    if not records:
        console.print("[dim]No records.[/dim]")
        return

    table = Table(title=f"Records ({len(records)})")
    table.add_column("ID", justify="right", style="cyan")
    table.add_column("Name")
    table.add_column("Email")
    table.add_column("Department")
    table.add_column("Position")
    table.add_column("Updated", style="bright_black")

    for record in records:
        table.add_row(
            str(record.id),
            record.name,
            record.email,
            record.department,
            record.position,
            f"{record.updated_at:%Y-%m-%d %H:%M}",
        )
    console.print(table)


def render_status(report: dict[str, Any]) -> None:
    """Print the client status report as a panel."""
    online = report["online"]
    queue = report["queue"]
    lines = [
        f"Connectivity: {'[green]online[/green]' if online else '[yellow]offline[/yellow]'}",
        f"Engine:       {report['engine_state']}",
        f"Records:      {report['records']}",
        f"Pending:      {queue['pending']} (synced awaiting purge: {queue['synced']})",
    ]
    if report.get("server_url"):
        lines.append(f"Server:       {report['server_url']}")

    last = report.get("last_sync")
    if last:
        color = OUTCOME_COLORS.get(last["outcome"], "white")
        lines.append(f"Last sync:    [{color}]{last['outcome']}[/{color}]")

    console.print(Panel("\n".join(lines), title="offline-sync status", expand=False))
