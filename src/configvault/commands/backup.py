"""Offline store commands for configvault CLI.

Inspect the config document and manage backups without a running server.
Each command works directly on the files, using the same locking as the
server so it is safe to run alongside it.
"""

from pathlib import Path

import typer
from rich.table import Table

from configvault.cli_utils import (
    EXIT_CONFIG_ERROR,
    EXIT_ERROR,
    _error,
    _success,
    _warning,
    console,
)
from configvault.core.backups import BackupManager
from configvault.core.exceptions import (
    BackupNotFoundError,
    ConfigVaultError,
    SettingsError,
)
from configvault.core.settings import load_settings
from configvault.core.store import ConfigStore

CONFIG_OPTION = typer.Option(
    None,
    "--config",
    "-c",
    help="Path to the JSON config document (default: ./config.json)",
)
BACKUP_DIR_OPTION = typer.Option(
    None,
    "--backup-dir",
    help="Directory for config backups (default: ./backups)",
)


def _open(config: Path | None, backup_dir: Path | None) -> BackupManager:
    """Build a BackupManager (and its store) from CLI options."""
    try:
        settings = load_settings(config_path=config, backup_dir=backup_dir)
    except SettingsError as e:
        _error(str(e))
        raise typer.Exit(code=EXIT_CONFIG_ERROR) from None
    return BackupManager(ConfigStore(settings.config_path), settings.backup_dir)


def show_command(
    section: str | None = typer.Argument(None, help="Top-level section to show"),
    config: Path | None = CONFIG_OPTION,
) -> None:
    """Print the config document, or one section of it, as JSON."""
    store = _open(config, None).store
    try:
        data = store.read() if section is None else store.read_section(section)
    except ConfigVaultError as e:
        _error(str(e))
        raise typer.Exit(code=EXIT_ERROR) from None
    console.print_json(data=data)


def backup_command(
    config: Path | None = CONFIG_OPTION,
    backup_dir: Path | None = BACKUP_DIR_OPTION,
) -> None:
    """Snapshot the config document into the backup directory."""
    backups = _open(config, backup_dir)
    try:
        handle = backups.snapshot()
    except ConfigVaultError as e:
        _error(str(e))
        raise typer.Exit(code=EXIT_ERROR) from None
    _success(f"Backup created: {handle.filename}")


def backups_command(
    config: Path | None = CONFIG_OPTION,
    backup_dir: Path | None = BACKUP_DIR_OPTION,
) -> None:
    """List backups, newest first."""
    backups = _open(config, backup_dir)
    try:
        handles = backups.list_backups()
    except ConfigVaultError as e:
        _error(str(e))
        raise typer.Exit(code=EXIT_ERROR) from None

    if not handles:
        _warning(f"No backups in {backups.backup_dir}")
        return

    table = Table(title=f"Backups in {backups.backup_dir}")
    table.add_column("Filename", no_wrap=True)
    table.add_column("Created (UTC)", no_wrap=True)
    for handle in handles:
        table.add_row(handle.filename, handle.created.strftime("%Y-%m-%d %H:%M:%S"))
    console.print(table)


def restore_command(
    filename: str = typer.Argument(..., help="Backup filename to restore"),
    config: Path | None = CONFIG_OPTION,
    backup_dir: Path | None = BACKUP_DIR_OPTION,
) -> None:
    """Replace the config document with a backup's content."""
    backups = _open(config, backup_dir)
    try:
        backups.restore(filename)
    except BackupNotFoundError as e:
        _error(f"{e}: {filename}")
        raise typer.Exit(code=EXIT_ERROR) from None
    except ConfigVaultError as e:
        _error(str(e))
        raise typer.Exit(code=EXIT_ERROR) from None
    _success(f"Config restored from {filename}")
