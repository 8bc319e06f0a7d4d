"""Shared CLI helpers: rich console output, exit codes, logging setup."""

import logging

from rich.console import Console
from rich.logging import RichHandler

__all__ = [
    "EXIT_CONFIG_ERROR",
    "EXIT_ERROR",
    "EXIT_SUCCESS",
    "_error",
    "_info",
    "_setup_logging",
    "_success",
    "_warning",
    "console",
]

# Exit codes
EXIT_SUCCESS = 0
EXIT_ERROR = 1
EXIT_CONFIG_ERROR = 2

console = Console()


def _setup_logging(verbose: bool, quiet: bool) -> None:
    """Configure root logging with a rich handler.

    --verbose wins over --quiet when both are given.

    Args:
        verbose: Enable DEBUG level.
        quiet: Only show WARNING and above.

    """
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        level = logging.INFO

    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=verbose)],
        force=True,
    )


def _error(message: str) -> None:
    """Print an error message in red."""
    console.print(f"[red]Error:[/red] {message}")


def _warning(message: str) -> None:
    """Print a warning message in yellow."""
    console.print(f"[yellow]Warning:[/yellow] {message}")


def _success(message: str) -> None:
    """Print a success message in green."""
    console.print(f"[green]{message}[/green]")


def _info(message: str) -> None:
    """Print an informational message."""
    console.print(f"[blue]{message}[/blue]")
