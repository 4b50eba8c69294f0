"""offline-sync CLI main entry point."""

from __future__ import annotations

from typing import Annotated

import typer

from offline_sync.cli._helpers import configure_logging, state
from offline_sync.cli.commands import records, sync_cmd, tools
from offline_sync.cli.commands.config_cmd import config_app

app = typer.Typer(
    name="osync",
    help="offline-sync - offline-first records with queued changes and sync",
    no_args_is_help=True,
)


@app.callback()
def _global_options(
    offline: Annotated[
        bool, typer.Option("--offline", help="Treat the server as unreachable")
    ] = False,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Debug logging")] = False,
) -> None:
    state.offline = offline
    state.verbose = verbose
    configure_logging(verbose)


records.register(app)
sync_cmd.register(app)
tools.register(app)
app.add_typer(config_app, name="config")


def main() -> None:
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
