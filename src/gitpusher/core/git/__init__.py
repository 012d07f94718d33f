"""
Git integration for gitpusher.

Provides the repository adapter, the failure classifier and the data
models shared by the publish workflow.
"""

from gitpusher.core.git.classifier import (
    classify,
    classify_merge_step,
    classify_outcome,
    is_empty_pick,
)
from gitpusher.core.git.models import (
    CommitRef,
    FailureKind,
    GitCommandError,
    OperationKind,
    OperationOutcome,
    PublishResult,
    RecoverySession,
    SyncRound,
)
from gitpusher.core.git.repository import GitRepository

__all__ = [
    "CommitRef",
    "FailureKind",
    "GitCommandError",
    "GitRepository",
    "OperationKind",
    "OperationOutcome",
    "PublishResult",
    "RecoverySession",
    "SyncRound",
    "classify",
    "classify_merge_step",
    "classify_outcome",
    "is_empty_pick",
]
