"""
Console output helpers for the runtimecfg CLI.

Command results go to stdout through `console`; errors and warnings go
to stderr so scripts can capture the result alone.
"""

from rich.console import Console
from rich.markup import escape

console = Console()
err_console = Console(stderr=True)


def print_error(message: str) -> None:
    """Print an error message to stderr."""
    err_console.print(
        f"[bold red]Error:[/bold red] {escape(message)}",
        highlight=False,
        soft_wrap=True,
    )


def print_warning(message: str) -> None:
    """Print a warning message to stderr."""
    err_console.print(
        f"[yellow]Warning:[/yellow] {escape(message)}",
        highlight=False,
        soft_wrap=True,
    )
