"""Typer CLI entry point for configvault.

This module only wires commands together; each command lives in
configvault.commands and delegates to the core or the API server.
"""

import logging

import typer

from configvault import __version__
from configvault.cli_utils import console
from configvault.commands.backup import (
    backup_command,
    backups_command,
    restore_command,
    show_command,
)
from configvault.commands.serve import serve_command

# Module logger
logger = logging.getLogger(__name__)


app = typer.Typer(
    name="configvault",
    help="File-backed JSON configuration store with backup and restore",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"configvault {__version__}")
        raise typer.Exit()


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
) -> None:
    """File-backed JSON configuration store with backup and restore."""
    if ctx.invoked_subcommand is None:
        raise typer.Exit()


app.command(name="serve")(serve_command)
app.command(name="show")(show_command)
app.command(name="backup")(backup_command)
app.command(name="backups")(backups_command)
app.command(name="restore")(restore_command)
