"""Client configuration commands."""

from __future__ import annotations

from typing import Annotated

import typer

from offline_sync.cli._helpers import fail, get_config, output_json
from offline_sync.client_config import ConnectivityMode

config_app = typer.Typer(help="Client configuration")


@config_app.command("show")
def config_show() -> None:
    """Print the client configuration as JSON."""
    output_json(get_config().to_dict())


@config_app.command("set-server")
def config_set_server(
    server_url: Annotated[str, typer.Argument(help="Record server URL (http:// or https://)")],
) -> None:
    """Point the client at a record server.

    Examples:
        osync config set-server http://localhost:8000
    """
    config = get_config()
    try:
        config.set_server(server_url)
    except ValueError as e:
        fail(str(e))
    typer.secho(f"Server set to {config.remote.server_url}", fg=typer.colors.GREEN)


@config_app.command("set-mode")
def config_set_mode(
    mode: Annotated[ConnectivityMode, typer.Argument(help="probe, online or offline")],
) -> None:
    """Choose how connectivity is decided.

    probe pings the server; online and offline force the state.
    """
    config = get_config()
    config.set_mode(mode)
    typer.secho(f"Connectivity mode set to {config.connectivity.mode}", fg=typer.colors.GREEN)
