"""
gitpush CLI - Start command.

Runs the interactive publish workflow in the current repository.
"""

from __future__ import annotations

import logging
from pathlib import Path

import typer
from pydantic import ValidationError
from rich.console import Console

from gitpusher.cli.console import ConsolePromptChannel
from gitpusher.cli.errors import (
    ExitCode,
    print_error,
    print_git_failure,
    print_invalid_config_error,
    print_merge_request_error,
    print_not_git_repo_error,
    print_recovery_aborted_error,
)
from gitpusher.core.config import load_config
from gitpusher.core.git import GitCommandError, GitRepository, PublishResult
from gitpusher.core.merge_request import GitLabClientError, MergeRequestService
from gitpusher.core.publish import PublishOrchestrator, RecoveryAborted, SelectionError

logger = logging.getLogger(__name__)

console = Console()


def _print_summary(result: PublishResult) -> None:
    console.print()
    console.print(
        f"[green]Published {result.commit.short} to {result.branch}[/green] "
        f"(merged {result.source_branch})",
        highlight=False,
    )
    if result.merge_request_url:
        console.print(f"  Merge request: {result.merge_request_url}", highlight=False)
    for sync_round in result.sync_rounds:
        line = f"  Synced to {sync_round.target_branch}"
        if sync_round.merge_request_url:
            line += f" ({sync_round.merge_request_url})"
        console.print(line, highlight=False)


def start() -> None:
    """
    Commit, merge, push, and optionally sync the commit to other branches.

    Walks through the publish workflow step by step:

        1. Stage everything and commit with your message
        2. Merge a branch of your choice into the current branch
        3. Push the current branch
        4. Optionally open a GitLab merge request
        5. Optionally cherry-pick the commit onto other branches and push them

    When git reports a conflict or a rejected push, gitpush pauses and lets
    you fix things by hand. Type 'continue' when done, or 'abort' to stop.
    """
    project_dir = Path.cwd()
    logger.debug(f"Starting publish workflow in {project_dir}")

    try:
        config = load_config(project_dir)
    except ValidationError as e:
        print_invalid_config_error(str(e))
        raise typer.Exit(ExitCode.USER_ERROR)

    prompts = ConsolePromptChannel(console)
    repo = GitRepository(project_dir, remote=config.remote)

    try:
        repo.current_branch()
    except GitCommandError as e:
        print_not_git_repo_error(e.diagnostic or str(e))
        raise typer.Exit(ExitCode.GENERAL_ERROR)

    merge_requests = None
    if config.merge_request.enabled:
        merge_requests = MergeRequestService(repo, prompts, config.merge_request)

    orchestrator = PublishOrchestrator(repo, prompts, merge_requests=merge_requests)

    try:
        result = orchestrator.run()
    except RecoveryAborted as e:
        print_recovery_aborted_error(str(e), e.instructions)
        raise typer.Exit(ExitCode.GENERAL_ERROR)
    except GitCommandError as e:
        print_git_failure(str(e))
        raise typer.Exit(ExitCode.GENERAL_ERROR)
    except GitLabClientError as e:
        print_merge_request_error(str(e))
        raise typer.Exit(ExitCode.GENERAL_ERROR)
    except SelectionError as e:
        print_error(str(e), solution="git branch <name>  # create the branch first")
        raise typer.Exit(ExitCode.GENERAL_ERROR)
    except (KeyboardInterrupt, typer.Abort):
        # typer turns Ctrl+C or end of input at a prompt into Abort
        console.print("\n[yellow]Cancelled[/yellow]")
        raise typer.Exit(ExitCode.SIGINT)

    logger.debug(f"Published {result.commit.sha} with {len(result.sync_rounds)} sync round(s)")
    _print_summary(result)
