"""
Standardized error handling and exit codes for the gitpush CLI.

This module provides consistent error messaging with actionable guidance
and standardized exit codes.
"""

from enum import IntEnum

from rich.console import Console
from rich.markup import escape

console = Console()


class ExitCode(IntEnum):
    """Standard exit codes for gitpush operations."""

    SUCCESS = 0
    """Operation completed successfully."""

    GENERAL_ERROR = 1
    """Aborted recovery, git failure, or merge request failure."""

    USER_ERROR = 2
    """User configuration or input error (actionable by user)."""

    SIGINT = 130
    """Terminated by SIGINT (Ctrl+C) - Unix standard."""


def print_error(
    problem: str,
    *,
    reason: str | None = None,
    solution: str | None = None,
) -> None:
    """
    Print a standardized error message with actionable guidance.

    Args:
        problem: Brief description of what went wrong
        reason: Optional explanation of why it happened
        solution: Optional command or action to fix it

    Example:
        >>> print_error(
        ...     "Merge of develop aborted",
        ...     solution="git merge develop  # finish by hand, then run gitpush again",
        ... )
    """
    console.print(f"[red]Error:[/red] {escape(problem)}", highlight=False)

    if reason:
        console.print(f"[dim]{escape(reason)}[/dim]", highlight=False)

    if solution:
        console.print(f"[cyan]→ Try:[/cyan] {escape(solution)}", highlight=False)


def print_not_git_repo_error(reason: str | None = None) -> None:
    """Print error when not in a git repository."""
    print_error(
        "Not a git repository",
        reason=reason,
        solution="cd to your project root  # or git init",
    )


def print_git_failure(message: str) -> None:
    """Print error for a git failure gitpush cannot recover from."""
    print_error(
        "git failed",
        reason=message,
        solution="Fix the problem by hand, then run gitpush start again",
    )


def print_recovery_aborted_error(problem: str, instructions: str) -> None:
    """Print error when the operator aborts a recovery dialogue."""
    print_error(problem, solution=instructions)


def print_merge_request_error(message: str) -> None:
    """Print error when the merge request could not be created."""
    print_error(
        "Could not create merge request",
        reason=message,
        solution="Check the access token and GITPUSHER_GITLAB_URL, or create it in the web UI",
    )


def print_invalid_config_error(message: str) -> None:
    """Print error when the configuration fails validation."""
    print_error(
        "Invalid gitpusher configuration",
        reason=message,
        solution="Fix .gitpusher.json or ~/.config/gitpusher/config.json",
    )


__all__ = [
    "ExitCode",
    "print_error",
    "print_git_failure",
    "print_invalid_config_error",
    "print_merge_request_error",
    "print_not_git_repo_error",
    "print_recovery_aborted_error",
]
