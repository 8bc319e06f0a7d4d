"""Serve command for configvault CLI.

Starts the HTTP API server for the config store.
"""

from pathlib import Path

import typer

from configvault.api.server import is_port_available, start_server
from configvault.cli_utils import (
    EXIT_CONFIG_ERROR,
    EXIT_ERROR,
    EXIT_SUCCESS,
    _error,
    _setup_logging,
    console,
)
from configvault.core.exceptions import SettingsError
from configvault.core.settings import PORT_ENV, load_settings


def serve_command(
    port: int | None = typer.Option(
        None,
        "--port",
        "-p",
        help=f"Port to listen on (default: ${PORT_ENV} or 3000)",
    ),
    host: str | None = typer.Option(
        None,
        "--host",
        help="Address to bind to (default: 127.0.0.1)",
    ),
    config: Path | None = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to the JSON config document (default: ./config.json)",
    ),
    backup_dir: Path | None = typer.Option(
        None,
        "--backup-dir",
        help="Directory for config backups (default: ./backups)",
    ),
    static_dir: Path | None = typer.Option(
        None,
        "--static-dir",
        help="Directory of static files to serve at /",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only log warnings and errors"),
) -> None:
    """Run the config API server.

    Examples:
        configvault serve                      # ./config.json on port $PORT or 3000
        configvault serve -p 8080 -c app.json  # custom port and document

    """
    _setup_logging(verbose=verbose, quiet=quiet)

    try:
        settings = load_settings(
            host=host,
            port=port,
            config_path=config,
            backup_dir=backup_dir,
            static_dir=static_dir,
        )
    except SettingsError as e:
        _error(str(e))
        raise typer.Exit(code=EXIT_CONFIG_ERROR) from None

    if not is_port_available(settings.port, settings.host):
        _error(f"Port {settings.port} is already in use on {settings.host}")
        raise typer.Exit(code=EXIT_ERROR)

    console.print(
        f"[bold green]Config API server[/bold green] on http://{settings.host}:{settings.port}"
    )
    console.print(f"  Config file: {settings.config_path}")
    console.print(f"  Backups:     {settings.backup_dir}")
    if settings.static_dir is not None:
        console.print(f"  Static:      {settings.static_dir}")
    console.print("[dim]Press Ctrl+C to stop[/dim]")

    try:
        start_server(settings, log_level="debug" if verbose else "info")
    except KeyboardInterrupt:
        console.print("[dim]Server stopped[/dim]")
    raise typer.Exit(code=EXIT_SUCCESS)
