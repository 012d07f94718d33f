"""
gitpush CLI - Main application entry point.

This module sets up the Typer CLI application and its subcommands.
"""

import logging
import sys

import typer
from rich.console import Console

from gitpusher import __version__
from gitpusher.cli import start
from gitpusher.core.config.env import load_project_env

app = typer.Typer(
    name="gitpush",
    help="Interactive git publishing: commit, merge, push, and sync to other branches",
    no_args_is_help=True,
    add_completion=False,
    context_settings={"help_option_names": ["--help", "-h"]},
)

console = Console()


def _configure_logging(debug: bool) -> None:
    level = logging.DEBUG if debug else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"gitpush version {__version__}")
        raise typer.Exit(0)


@app.callback()
def main(
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Enable debug output with detailed logging",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show gitpush version and exit",
    ),
) -> None:
    """
    gitpush - Interactive git publishing assistant.

    Quick Start:
        gitpush start                # Commit, merge, push, sync
        gitpush --debug start        # Same, with git commands logged
    """
    # Exported variables win over the project .env
    load_project_env()
    _configure_logging(debug)


app.command(name="start")(start.start)


def cli_main() -> None:
    """Main CLI entry point."""
    app()


__all__ = ["app", "cli_main"]
