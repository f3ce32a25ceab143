"""Rich terminal output helpers for spocli."""

import logging

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

console = Console()
err_console = Console(stderr=True)


def configure_logging(debug: bool = False):
    """Send log records to stderr through rich."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def print_error(message: str):
    """Print an error message."""
    console.print(f"[red]Error:[/red] {escape(message)}", highlight=False, soft_wrap=True)


def print_warning(message: str):
    """Print a warning message."""
    console.print(f"[yellow]Warning:[/yellow] {escape(message)}")


def print_success(message: str):
    """Print a success message."""
    console.print(f"[green]✓[/green] {escape(message)}")


def print_info(message: str):
    """Print an info message."""
    console.print(f"[blue]ℹ[/blue] {escape(message)}")
