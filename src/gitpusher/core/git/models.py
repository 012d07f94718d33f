"""
Data models for git operations.

Defines the operation and failure enumerations, the outcome of a single
git invocation, and the small records shared by the publish workflow.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class OperationKind(str, Enum):
    """Kind of git operation performed by the repository adapter."""

    COMMIT = "commit"
    MERGE = "merge"
    PULL = "pull"
    PUSH = "push"
    CHECKOUT = "checkout"
    CHERRY_PICK = "cherry-pick"
    REBASE = "rebase"


class FailureKind(str, Enum):
    """Recoverable failure categories derived from git diagnostics."""

    MERGE_CONFLICT = "MergeConflict"
    PUSH_FAST = "PushFast"
    PULL_DIVERGENT = "PullDivergent"
    PULL_CONFLICT = "PullConflict"
    CHERRY_PICK_CONFLICT = "CherryPickConflict"
    UNCLASSIFIED = "Unclassified"


@dataclass
class OperationOutcome:
    """Result of a recoverable git operation.

    Attributes:
        operation: The operation that produced this outcome
        success: Whether git exited with status 0
        output: Standard output of the command (stripped)
        diagnostic: Combined stderr and stdout when the command failed
    """

    operation: OperationKind
    success: bool
    output: str = ""
    diagnostic: str = ""

    @classmethod
    def succeeded(cls, operation: OperationKind, output: str = "") -> OperationOutcome:
        return cls(operation=operation, success=True, output=output)

    @classmethod
    def failed(cls, operation: OperationKind, diagnostic: str) -> OperationOutcome:
        return cls(operation=operation, success=False, diagnostic=diagnostic)


class GitCommandError(Exception):
    """Fatal error from a git operation."""

    def __init__(
        self,
        message: str,
        *,
        operation: OperationKind | None = None,
        diagnostic: str = "",
    ) -> None:
        super().__init__(message)
        self.operation = operation
        self.diagnostic = diagnostic

    @classmethod
    def from_outcome(cls, outcome: OperationOutcome) -> GitCommandError:
        """Build an error that re-raises a failed outcome."""
        return cls(
            f"git {outcome.operation.value} failed: {outcome.diagnostic}",
            operation=outcome.operation,
            diagnostic=outcome.diagnostic,
        )


@dataclass(frozen=True)
class CommitRef:
    """Immutable reference to a commit (the full hash)."""

    sha: str

    @property
    def short(self) -> str:
        return self.sha[:8]

    def __str__(self) -> str:
        return self.sha


@dataclass
class RecoverySession:
    """State of one conflict dialogue.

    Attributes:
        branch: Branch whose operation is being recovered
        kind: Failure kind that opened the dialogue
        resolved: Set once the operator has finished the operation
    """

    branch: str
    kind: FailureKind
    resolved: bool = False


@dataclass(frozen=True)
class SyncRound:
    """One replication of the published commit onto another branch."""

    target_branch: str
    commit: CommitRef
    merged_branch: str | None = None
    merge_request_url: str | None = None


@dataclass
class PublishResult:
    """Summary of a completed publish run."""

    branch: str
    commit: CommitRef
    source_branch: str
    merge_request_url: str | None = None
    sync_rounds: list[SyncRound] = field(default_factory=list)

    @property
    def synced_branches(self) -> list[str]:
        return [r.target_branch for r in self.sync_rounds]
