"""
runtimecfg unified CLI entry point.

Usage:
    runtimecfg [OPTIONS] COMMAND [ARGS]...

Commands:
    node-ip   Node IP tools
    version   Show version information
"""

from typing import Annotated

import typer

from runtimecfg.cli.commands import node_ip
from runtimecfg.cli.output import console
from runtimecfg.config import config
from runtimecfg.models.enums import LogLevel
from runtimecfg.utils.logger import configure_logging

app = typer.Typer(
    name="runtimecfg",
    help="Node runtime configuration tools",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

# Register command groups
app.add_typer(node_ip.app, name="node-ip", help="Node IP tools")


@app.callback()
def main(
    log_level: Annotated[
        LogLevel,
        typer.Option(
            "--log-level",
            "-l",
            help="Logging verbosity",
            envvar="RUNTIMECFG_LOG_LEVEL",
            case_sensitive=False,
        ),
    ] = LogLevel.INFO,
    log_file: Annotated[
        str | None,
        typer.Option(
            "--log-file", help="Also log to this file", envvar="RUNTIMECFG_LOG_FILE"
        ),
    ] = None,
):
    """
    runtimecfg node configuration CLI.

    Logs go to stderr; command results go to stdout.
    """
    config.LOG_LEVEL = log_level
    if log_file:
        config.LOG_FILE = log_file
    configure_logging(config.LOG_LEVEL, config.LOG_FILE)


@app.command("version")
def version():
    """Show version information."""
    from runtimecfg import __version__

    console.print(f"runtimecfg v{__version__}")


def run():
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    run()
