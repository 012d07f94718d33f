"""
Guarded workflow steps.

Every step that can fail in a git-specific way goes through here: run the
adapter call, classify a failure, and hand classified failures to the
matching recovery dialogue. Unclassified failures are logged and raised.
"""

from __future__ import annotations

import logging

from gitpusher.core.git.classifier import classify_merge_step, classify_outcome
from gitpusher.core.git.models import (
    CommitRef,
    FailureKind,
    GitCommandError,
    OperationOutcome,
)
from gitpusher.core.git.repository import GitRepository
from gitpusher.core.publish.prompts import PromptChannel
from gitpusher.core.publish.recovery import ConflictRecovery

logger = logging.getLogger(__name__)


class GuardedSteps:
    """Adapter operations wrapped with classification and recovery."""

    def __init__(
        self,
        repo: GitRepository,
        prompts: PromptChannel,
        recovery: ConflictRecovery | None = None,
    ) -> None:
        self.repo = repo
        self.prompts = prompts
        self.recovery = recovery or ConflictRecovery(repo, prompts)

    def _settle(self, outcome: OperationOutcome, kind: FailureKind, branch: str) -> None:
        if kind == FailureKind.UNCLASSIFIED:
            logger.error(f"git {outcome.operation.value} failed: {outcome.diagnostic}")
            raise GitCommandError.from_outcome(outcome)
        self.recovery.recover(kind, branch, outcome)

    def merge(self, source: str, into: str) -> None:
        """Merge `source` into the checked-out branch `into`."""
        with self.prompts.working(f"Merging {source} into {into}"):
            outcome = self.repo.merge(source)

        if outcome.success:
            self.prompts.say(f"Merged {source} into {into}", level="success")
            return
        self._settle(outcome, classify_merge_step(outcome), source)

    def push(self, branch: str) -> None:
        """Push `branch` to the remote."""
        with self.prompts.working(f"Pushing {branch}"):
            outcome = self.repo.push(branch)

        if outcome.success:
            self.prompts.say(f"Pushed {branch}", level="success")
            return
        self._settle(outcome, classify_outcome(outcome), branch)

    def cherry_pick(self, commit: CommitRef, onto: str) -> None:
        """Cherry-pick `commit` onto the checked-out branch `onto`."""
        with self.prompts.working(f"Cherry-picking {commit.short} onto {onto}"):
            outcome = self.repo.cherry_pick(commit)

        if outcome.success:
            self.prompts.say(f"Cherry-picked {commit.short} onto {onto}", level="success")
            return
        self._settle(outcome, classify_outcome(outcome), onto)
