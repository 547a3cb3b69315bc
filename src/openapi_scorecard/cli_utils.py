"""Shared console, exit codes and message helpers for the CLI."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

# Exit codes
EXIT_SUCCESS = 0
EXIT_ERROR = 1
EXIT_CONFIG_ERROR = 2

console = Console()
err_console = Console(stderr=True)


def _setup_logging(verbose: bool = False, quiet: bool = False) -> None:
    """Route package logging through rich on stderr.

    Args:
        verbose: Show DEBUG messages.
        quiet: Show only ERROR messages. Ignored when ``verbose`` is set.

    """
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.ERROR
    else:
        level = logging.WARNING

    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=verbose, rich_tracebacks=True)],
        force=True,
    )


def _error(message: str) -> None:
    console.print(f"[red]Error:[/red] {message}")


def _success(message: str) -> None:
    console.print(f"[green]✓[/green] {message}")


def _warning(message: str) -> None:
    console.print(f"[yellow]Warning:[/yellow] {message}")
