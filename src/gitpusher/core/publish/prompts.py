"""
Operator prompt contract and numbered branch selection.

The publish workflow never talks to the terminal directly; it goes through a
PromptChannel so the same logic can be driven by the Rich console or by a
scripted channel in tests.
"""

from __future__ import annotations

from collections.abc import Sequence
from contextlib import AbstractContextManager
from typing import Protocol


class PromptChannel(Protocol):
    """Protocol for line-oriented exchanges with the operator."""

    def ask(self, message: str) -> str:
        """Ask for free text and return the raw answer.

        Args:
            message: Prompt shown to the operator
        """
        ...

    def confirm(self, message: str, default: bool = False) -> bool:
        """Ask a yes/no question.

        Args:
            message: Question shown to the operator
            default: Answer used when the operator just presses enter
        """
        ...

    def say(self, message: str, level: str = "info") -> None:
        """Show a message.

        Args:
            message: Message text
            level: Message level (info, success, warning, error)
        """
        ...

    def working(self, message: str) -> AbstractContextManager[object]:
        """Show a status indicator while a long operation runs.

        Args:
            message: Description of the running operation
        """
        ...


class SelectionError(Exception):
    """No option is available to choose from."""

    pass


def read_keyword(prompts: PromptChannel, message: str = "gitpush> ") -> str:
    """Read a dialogue keyword, trimmed and lower-cased."""
    return prompts.ask(message).strip().lower()


def selectable_branches(branches: Sequence[str], exclude: str | None) -> list[str]:
    """
    Filter out the excluded branch, preserving order.

    Example:
        >>> selectable_branches(["main", "develop", "release"], "develop")
        ['main', 'release']
    """
    return [branch for branch in branches if branch != exclude]


def parse_choice(raw: str, count: int) -> int | None:
    """
    Parse a 1-based menu answer into a 0-based index.

    Returns:
        The index, or None if the answer is not a number in [1, count]
    """
    try:
        number = int(raw.strip())
    except ValueError:
        return None
    if 1 <= number <= count:
        return number - 1
    return None


def select_branch(
    prompts: PromptChannel,
    branches: Sequence[str],
    exclude: str | None,
    purpose: str,
) -> str:
    """
    Let the operator pick a branch from a numbered list.

    Invalid answers are rejected and the list is shown again.

    Args:
        prompts: Prompt channel to use
        branches: All candidate branches in display order
        exclude: Branch to leave out (normally the current branch)
        purpose: Completes "Select the branch to ..." in the heading

    Returns:
        The chosen branch name

    Raises:
        SelectionError: If no branch is left after exclusion
    """
    options = selectable_branches(branches, exclude)
    if not options:
        raise SelectionError(f"No other branch available to {purpose}")

    while True:
        prompts.say(f"Select the branch to {purpose}:", level="warning")
        for number, branch in enumerate(options, start=1):
            prompts.say(f"{number}. {branch}")

        index = parse_choice(prompts.ask("Branch number"), len(options))
        if index is not None:
            return options[index]
        prompts.say("Invalid branch number, please try again", level="error")
