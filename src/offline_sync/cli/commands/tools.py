"""Utility commands: serve, version."""

from __future__ import annotations

from typing import Annotated

import typer


def serve(
    host: Annotated[str | None, typer.Option("--host", "-h", help="Host to bind to")] = None,
    port: Annotated[int | None, typer.Option("--port", "-p", help="Port to bind to")] = None,
    reload: Annotated[
        bool, typer.Option("--reload", "-r", help="Enable auto-reload for development")
    ] = False,
) -> None:
    """Run the record server.

    Host and port default to OFFLINE_SYNC_HOST / OFFLINE_SYNC_PORT.

    Examples:
        osync serve                    # Run on localhost:8000
        osync serve -p 9000            # Run on port 9000
        osync serve --host 0.0.0.0     # Expose to network
    """
    import uvicorn

    from offline_sync.utils.config import get_config

    config = get_config()
    host = host or config.host
    port = port or config.port

    typer.echo(f"Starting offline-sync record server on http://{host}:{port}")
    typer.echo(f"  Records: http://{host}:{port}/api/records")
    typer.echo(f"  Docs:    http://{host}:{port}/docs")

    uvicorn.run(
        "offline_sync.server.app:create_app",
        host=host,
        port=port,
        reload=reload,
        factory=True,
    )


def version() -> None:
    """Show version information."""
    from offline_sync import __version__

    typer.echo(f"offline-sync v{__version__}")


def register(app: typer.Typer) -> None:
    """Register utility commands on the app."""
    app.command()(serve)
    app.command()(version)
