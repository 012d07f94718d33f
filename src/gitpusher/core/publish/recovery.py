"""
Conflict recovery dialogues.

Each recoverable failure kind has its own small state machine. A dialogue
starts in an awaiting-input state and ends either resolved (the workflow
continues) or aborted (RecoveryAborted is raised and the whole run stops).
Unrecognised input leaves the state unchanged and asks again.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from gitpusher.core.git.classifier import classify_outcome, is_empty_pick
from gitpusher.core.git.models import (
    FailureKind,
    GitCommandError,
    OperationKind,
    OperationOutcome,
    RecoverySession,
)
from gitpusher.core.git.repository import GitRepository
from gitpusher.core.publish.prompts import PromptChannel, read_keyword

logger = logging.getLogger(__name__)

FAILURE_LABELS: dict[FailureKind, str] = {
    FailureKind.MERGE_CONFLICT: "Merge conflict",
    FailureKind.PULL_CONFLICT: "Pull conflict",
    FailureKind.PULL_DIVERGENT: "Diverged history",
    FailureKind.PUSH_FAST: "Non-fast-forward push",
    FailureKind.CHERRY_PICK_CONFLICT: "Cherry-pick conflict",
}


class RecoveryAborted(Exception):
    """The operator aborted a recovery dialogue."""

    def __init__(
        self,
        kind: FailureKind | None,
        branch: str,
        instructions: str,
    ) -> None:
        label = FAILURE_LABELS[kind] if kind is not None else "Workflow"
        super().__init__(f"{label} on {branch} was aborted")
        self.kind = kind
        self.branch = branch
        self.instructions = instructions


class ConflictRecovery:
    """
    Dispatches a classified failure to the matching recovery dialogue.

    Example:
        >>> recovery = ConflictRecovery(repo, prompts)
        >>> recovery.recover(FailureKind.PUSH_FAST, "main", outcome)
    """

    def __init__(self, repo: GitRepository, prompts: PromptChannel) -> None:
        """
        Initialize ConflictRecovery.

        Args:
            repo: Repository adapter used to continue, retry or abort
            prompts: Channel used to talk to the operator
        """
        self.repo = repo
        self.prompts = prompts
        self._handlers: dict[
            FailureKind, Callable[[RecoverySession, OperationOutcome], None]
        ] = {
            FailureKind.MERGE_CONFLICT: self._resolve_merge_conflict,
            FailureKind.PULL_CONFLICT: self._resolve_merge_conflict,
            FailureKind.PULL_DIVERGENT: self._resolve_pull_divergent,
            FailureKind.PUSH_FAST: self._resolve_push_fast,
            FailureKind.CHERRY_PICK_CONFLICT: self._resolve_cherry_pick_conflict,
        }

    def recover(
        self, kind: FailureKind, branch: str, outcome: OperationOutcome
    ) -> RecoverySession:
        """
        Run the dialogue for a failure until it is resolved.

        Args:
            kind: Classified failure kind
            branch: Branch the failed operation was about (merge source,
                pushed branch, cherry-pick target)
            outcome: The failed outcome

        Returns:
            The resolved RecoverySession

        Raises:
            ValueError: If no dialogue exists for `kind`
            RecoveryAborted: If the operator aborts
            GitCommandError: If a retry fails in an unrecoverable way
        """
        handler = self._handlers.get(kind)
        if handler is None:
            raise ValueError(f"Unknown failure kind: {kind.value}")

        session = RecoverySession(branch=branch, kind=kind)
        logger.info(f"Recovering from {kind.value} on {branch}")
        self.prompts.say(f"{FAILURE_LABELS[kind]}: {outcome.diagnostic}", level="error")
        handler(session, outcome)
        return session

    # ------------------------------------------------------------------
    # Merge / pull conflicts
    # ------------------------------------------------------------------

    def _retry_merge(self, session: RecoverySession) -> OperationOutcome:
        if session.kind == FailureKind.PULL_CONFLICT:
            return self.repo.pull(session.branch)
        return self.repo.merge(session.branch)

    def _resolve_merge_conflict(
        self, session: RecoverySession, outcome: OperationOutcome
    ) -> None:
        self.prompts.say(
            "Resolve the conflicts by hand, then type 'continue'. "
            "Type 'abort' to cancel the merge.",
            level="warning",
        )

        while not session.resolved:
            answer = read_keyword(self.prompts)
            if answer == "continue":
                if self.repo.operation_in_progress(OperationKind.MERGE):
                    self.repo.stage_all()
                    continued = self.repo.continue_operation(OperationKind.MERGE)
                    if not continued.success:
                        self.prompts.say(
                            f"Could not conclude the merge: {continued.diagnostic}",
                            level="error",
                        )
                        continue

                retry = self._retry_merge(session)
                if retry.success:
                    session.resolved = True
                    self.prompts.say(f"Merged {session.branch}", level="success")
                elif classify_outcome(retry) in (
                    FailureKind.MERGE_CONFLICT,
                    FailureKind.PULL_CONFLICT,
                ):
                    self.prompts.say(
                        f"{session.branch} still conflicts: {retry.diagnostic}", level="error"
                    )
                else:
                    raise GitCommandError.from_outcome(retry)
            elif answer == "abort":
                if self.repo.operation_in_progress(OperationKind.MERGE):
                    self.repo.abort_operation(OperationKind.MERGE)
                raise RecoveryAborted(
                    session.kind,
                    session.branch,
                    f"Merge of {session.branch} aborted. Finish the merge by hand, "
                    "then run gitpush again.",
                )
            else:
                self.prompts.say("Invalid command, type 'continue' or 'abort'", level="error")

    # ------------------------------------------------------------------
    # Diverged history
    # ------------------------------------------------------------------

    def _resolve_pull_divergent(
        self, session: RecoverySession, outcome: OperationOutcome
    ) -> None:
        self.prompts.say(f"Retrying with git pull --rebase {session.branch}", level="warning")

        with self.prompts.working(f"Rebasing onto {session.branch}"):
            rebased = self.repo.pull(session.branch, rebase=True)

        if rebased.success:
            session.resolved = True
            self.prompts.say(f"Rebased onto {session.branch}", level="success")
            return

        if classify_outcome(rebased) != FailureKind.PULL_CONFLICT:
            logger.error(f"Rebase onto {session.branch} failed: {rebased.diagnostic}")
            raise GitCommandError.from_outcome(rebased)

        self.prompts.say(f"Rebase conflict: {rebased.diagnostic}", level="error")
        self.prompts.say(
            "Resolve the conflicts by hand, then type 'continue'. "
            "Type 'abort' to cancel the rebase.",
            level="warning",
        )

        while not session.resolved:
            answer = read_keyword(self.prompts)
            if answer == "continue":
                self.repo.stage_all()
                continued = self.repo.continue_operation(OperationKind.REBASE)
                if continued.success:
                    session.resolved = True
                    self.prompts.say("Conflicts resolved, rebase finished", level="success")
                else:
                    self.prompts.say(
                        f"Rebase could not continue, resolve the conflicts again: "
                        f"{continued.diagnostic}",
                        level="error",
                    )
            elif answer == "abort":
                self.repo.abort_operation(OperationKind.REBASE)
                raise RecoveryAborted(
                    session.kind,
                    session.branch,
                    "Rebase aborted. Bring the branch up to date by hand, "
                    "then run gitpush again.",
                )
            else:
                self.prompts.say("Invalid command, type 'continue' or 'abort'", level="error")

    # ------------------------------------------------------------------
    # Rejected push
    # ------------------------------------------------------------------

    def _resolve_push_fast(self, session: RecoverySession, outcome: OperationOutcome) -> None:
        while not session.resolved:
            if not self.prompts.confirm("Retry with a forced push?", default=False):
                raise GitCommandError.from_outcome(outcome)

            with self.prompts.working(f"Force pushing {session.branch}"):
                forced = self.repo.push(session.branch, force=True)

            if forced.success:
                session.resolved = True
                self.prompts.say(f"Force pushed {session.branch}", level="success")
            else:
                self.prompts.say(f"Forced push failed: {forced.diagnostic}", level="error")

    # ------------------------------------------------------------------
    # Cherry-pick conflicts
    # ------------------------------------------------------------------

    def _skip_empty_pick(self, session: RecoverySession) -> None:
        self.repo.skip_operation(OperationKind.CHERRY_PICK)
        session.resolved = True
        self.prompts.say(
            f"{session.branch} already contains these changes, cherry-pick skipped",
            level="warning",
        )

    def _resolve_cherry_pick_conflict(
        self, session: RecoverySession, outcome: OperationOutcome
    ) -> None:
        if is_empty_pick(outcome.diagnostic):
            self._skip_empty_pick(session)
            return

        self.prompts.say(
            "Resolve the conflicts by hand, then type 'continue'. "
            "Type 'abort' to cancel the cherry-pick.",
            level="warning",
        )

        while not session.resolved:
            answer = read_keyword(self.prompts)
            if answer == "continue":
                if not self.repo.operation_in_progress(OperationKind.CHERRY_PICK):
                    # Already concluded by hand
                    session.resolved = True
                    break

                self.repo.stage_all()
                continued = self.repo.continue_operation(OperationKind.CHERRY_PICK)
                if continued.success:
                    session.resolved = True
                    self.prompts.say("Conflicts resolved, cherry-pick finished", level="success")
                elif is_empty_pick(continued.diagnostic):
                    self._skip_empty_pick(session)
                else:
                    self.prompts.say(
                        f"Cherry-pick could not continue: {continued.diagnostic}",
                        level="error",
                    )
            elif answer == "abort":
                self.repo.abort_operation(OperationKind.CHERRY_PICK)
                raise RecoveryAborted(
                    session.kind,
                    session.branch,
                    f"Cherry-pick onto {session.branch} aborted. Apply the commit by hand, "
                    "then run gitpush again.",
                )
            else:
                self.prompts.say("Invalid command, type 'continue' or 'abort'", level="error")
