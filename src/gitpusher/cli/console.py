"""
Console prompt channel.

Rich/Typer implementation of the PromptChannel used by the publish workflow.
"""

from __future__ import annotations

from contextlib import AbstractContextManager

import typer
from rich.console import Console

LEVEL_STYLES = {
    "success": "green",
    "warning": "yellow",
    "error": "red",
}


class ConsolePromptChannel:
    """Rich Console-based implementation of PromptChannel."""

    def __init__(self, console: Console) -> None:
        """
        Initialize channel.

        Args:
            console: Rich console for output
        """
        self.console = console

    def ask(self, message: str) -> str:
        """Read a line of free text; an empty answer is allowed."""
        answer: str = typer.prompt(message, default="", show_default=False)
        return answer

    def confirm(self, message: str, default: bool = False) -> bool:
        """Ask a yes/no question."""
        return typer.confirm(message, default=default)

    def say(self, message: str, level: str = "info") -> None:
        """Display a message with styling for its level."""
        style = LEVEL_STYLES.get(level)
        if style:
            self.console.print(message, style=style, markup=False, highlight=False)
        else:
            self.console.print(message, markup=False, highlight=False)

    def working(self, message: str) -> AbstractContextManager[object]:
        """Show a spinner while a git or network call runs."""
        return self.console.status(f"{message}...")
