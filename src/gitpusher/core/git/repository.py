"""
Git repository adapter.

Wraps the `git` executable for the publish workflow. Operations that can
fail in a recoverable, git-specific way (merge, pull, push, cherry-pick and
the continuation of a stopped operation) return an OperationOutcome so the
caller can classify the failure. Everything else raises GitCommandError.
"""

from __future__ import annotations

import logging
import os
import subprocess
from pathlib import Path

from gitpusher.core.git.models import (
    CommitRef,
    GitCommandError,
    OperationKind,
    OperationOutcome,
)

logger = logging.getLogger(__name__)

# Environment applied to `--continue` invocations so git never opens an editor.
NON_INTERACTIVE_ENV = {"GIT_EDITOR": "true"}

# Marker paths (relative to the git dir) that exist while an operation is stopped
_IN_PROGRESS_MARKERS: dict[OperationKind, tuple[str, ...]] = {
    OperationKind.MERGE: ("MERGE_HEAD",),
    OperationKind.REBASE: ("rebase-merge", "rebase-apply"),
    OperationKind.CHERRY_PICK: ("CHERRY_PICK_HEAD",),
}

_RESUMABLE = frozenset(_IN_PROGRESS_MARKERS)

# Operations that can drop the commit they stopped on
_SKIPPABLE = frozenset({OperationKind.REBASE, OperationKind.CHERRY_PICK})


class GitRepository:
    """
    Adapter over a local git working tree.

    Example:
        >>> repo = GitRepository(Path.cwd())
        >>> repo.current_branch()
        'main'
        >>> outcome = repo.push("main")
        >>> outcome.success
        True
    """

    def __init__(self, project_dir: Path | None = None, remote: str = "origin") -> None:
        """
        Initialize GitRepository.

        Args:
            project_dir: Working tree directory (defaults to cwd)
            remote: Name of the remote to pull from and push to
        """
        self.project_dir = project_dir or Path.cwd()
        self.remote = remote

    # ------------------------------------------------------------------
    # Command plumbing
    # ------------------------------------------------------------------

    def _run(
        self,
        args: list[str],
        env_overrides: dict[str, str] | None = None,
    ) -> subprocess.CompletedProcess[str]:
        env = None
        if env_overrides:
            env = {**os.environ, **env_overrides}

        logger.debug(f"git {' '.join(args)}")
        try:
            return subprocess.run(
                ["git", *args],
                cwd=self.project_dir,
                capture_output=True,
                text=True,
                check=False,
                env=env,
            )
        except (OSError, FileNotFoundError) as e:
            raise GitCommandError(f"Failed to run git: {e}")

    @staticmethod
    def _diagnostic(result: subprocess.CompletedProcess[str]) -> str:
        parts = [result.stderr.strip(), result.stdout.strip()]
        return "\n".join(part for part in parts if part) or "Unknown error"

    def _outcome(
        self,
        operation: OperationKind,
        args: list[str],
        env_overrides: dict[str, str] | None = None,
    ) -> OperationOutcome:
        result = self._run(args, env_overrides=env_overrides)
        if result.returncode == 0:
            return OperationOutcome.succeeded(operation, result.stdout.strip())

        diagnostic = self._diagnostic(result)
        logger.debug(f"git {operation.value} failed ({result.returncode}): {diagnostic}")
        return OperationOutcome.failed(operation, diagnostic)

    def _check(self, operation: OperationKind | None, args: list[str], problem: str) -> str:
        result = self._run(args)
        if result.returncode != 0:
            diagnostic = self._diagnostic(result)
            raise GitCommandError(
                f"{problem}: {diagnostic}",
                operation=operation,
                diagnostic=diagnostic,
            )
        return result.stdout.strip()

    @staticmethod
    def _require_resumable(kind: OperationKind) -> None:
        if kind not in _RESUMABLE:
            raise ValueError(f"Operation cannot be continued or aborted: {kind.value}")

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def current_branch(self) -> str:
        """
        Get the checked-out branch name.

        Raises:
            GitCommandError: If the directory is not a git repository
        """
        return self._check(
            None, ["rev-parse", "--abbrev-ref", "HEAD"], "Could not determine current branch"
        )

    def list_branches(self) -> list[str]:
        """
        List local branches in git's listing order.

        Detached-HEAD pseudo entries such as ``(HEAD detached at abc123)`` are
        skipped.
        """
        output = self._check(
            None, ["branch", "--format=%(refname:short)"], "Could not list branches"
        )
        branches = []
        for line in output.splitlines():
            name = line.strip()
            if name.startswith("* "):
                name = name[2:]
            if not name or name.startswith("("):
                continue
            branches.append(name)
        return branches

    def head_commit_ref(self) -> CommitRef:
        """Get the CommitRef for HEAD."""
        return CommitRef(self._check(None, ["rev-parse", "HEAD"], "Could not resolve HEAD"))

    def remote_url(self) -> str | None:
        """Get the URL of the configured remote, or None if it is not set."""
        result = self._run(["remote", "get-url", self.remote])
        if result.returncode == 0:
            return result.stdout.strip() or None
        return None

    def operation_in_progress(self, kind: OperationKind) -> bool:
        """Check whether a merge, rebase or cherry-pick is currently stopped."""
        self._require_resumable(kind)
        for marker in _IN_PROGRESS_MARKERS[kind]:
            result = self._run(["rev-parse", "--git-path", marker])
            if result.returncode != 0:
                continue
            path = Path(result.stdout.strip())
            if not path.is_absolute():
                path = self.project_dir / path
            if path.exists():
                return True
        return False

    # ------------------------------------------------------------------
    # Fatal mutations
    # ------------------------------------------------------------------

    def stage_all(self) -> None:
        """Stage every change in the working tree."""
        self._check(None, ["add", "-A"], "Could not stage changes")

    def stage_and_commit(self, message: str) -> CommitRef:
        """
        Stage all changes and commit them.

        Args:
            message: Commit message

        Returns:
            CommitRef of the new commit

        Raises:
            GitCommandError: If the message is empty, nothing is staged, or
                the commit fails
        """
        if not message.strip():
            raise GitCommandError("Commit message must not be empty", operation=OperationKind.COMMIT)

        self.stage_all()

        staged = self._run(["diff", "--cached", "--quiet"])
        if staged.returncode == 0:
            raise GitCommandError("Nothing to commit", operation=OperationKind.COMMIT)

        self._check(OperationKind.COMMIT, ["commit", "-m", message], "Commit failed")
        return self.head_commit_ref()

    def amend_commit(self) -> CommitRef:
        """Fold all working tree changes into HEAD, keeping its message."""
        self.stage_all()
        self._check(
            OperationKind.COMMIT, ["commit", "--amend", "--no-edit"], "Could not amend commit"
        )
        return self.head_commit_ref()

    def checkout(self, branch: str) -> None:
        """
        Switch the working tree to a branch.

        Raises:
            GitCommandError: If the switch fails (e.g. uncommitted changes)
        """
        self._check(
            OperationKind.CHECKOUT, ["checkout", branch], f"Could not check out {branch}"
        )

    def abort_operation(self, kind: OperationKind) -> None:
        """Abort a stopped merge, rebase or cherry-pick."""
        self._require_resumable(kind)
        self._check(kind, [kind.value, "--abort"], f"Could not abort {kind.value}")

    def skip_operation(self, kind: OperationKind) -> None:
        """Drop the commit a stopped rebase or cherry-pick is applying and move on."""
        if kind not in _SKIPPABLE:
            raise ValueError(f"Operation cannot be skipped: {kind.value}")
        self._check(kind, [kind.value, "--skip"], f"Could not skip {kind.value}")

    # ------------------------------------------------------------------
    # Recoverable operations
    # ------------------------------------------------------------------

    def merge(self, source: str) -> OperationOutcome:
        """Pull `source` from the remote into the checked-out branch."""
        return self._outcome(OperationKind.MERGE, ["pull", self.remote, source])

    def pull(self, branch: str, rebase: bool = False) -> OperationOutcome:
        """Fetch `branch` from the remote and merge (or rebase onto) it."""
        args = ["pull"]
        if rebase:
            args.append("--rebase")
        args.extend([self.remote, branch])
        return self._outcome(OperationKind.PULL, args)

    def push(self, branch: str, force: bool = False) -> OperationOutcome:
        """Push `branch` to the remote, optionally forcing it."""
        args = ["push"]
        if force:
            args.append("--force")
        args.extend([self.remote, branch])
        return self._outcome(OperationKind.PUSH, args)

    def cherry_pick(self, commit: CommitRef) -> OperationOutcome:
        """Apply a single commit onto the checked-out branch."""
        return self._outcome(OperationKind.CHERRY_PICK, ["cherry-pick", commit.sha])

    def continue_operation(self, kind: OperationKind) -> OperationOutcome:
        """
        Resume a stopped merge, rebase or cherry-pick.

        The editor git would normally open is replaced by a no-op for this
        one child process only; the caller's environment is left untouched.
        """
        self._require_resumable(kind)
        return self._outcome(kind, [kind.value, "--continue"], env_overrides=NON_INTERACTIVE_ENV)
