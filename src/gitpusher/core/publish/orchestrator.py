"""
Publish orchestrator.

Runs the whole publish workflow: commit, merge a source branch, push,
optionally open a merge request, then replicate the commit onto as many
other branches as the operator asks for.
"""

from __future__ import annotations

import logging

from gitpusher.core.git.models import PublishResult
from gitpusher.core.git.repository import GitRepository
from gitpusher.core.publish.prompts import PromptChannel, select_branch
from gitpusher.core.publish.recovery import ConflictRecovery
from gitpusher.core.publish.replicator import BranchSyncReplicator, MergeRequestOffer
from gitpusher.core.publish.steps import GuardedSteps

logger = logging.getLogger(__name__)


class PublishOrchestrator:
    """
    Top-level publish workflow.

    Each step only starts once the previous one has succeeded or been fully
    recovered. RecoveryAborted and GitCommandError propagate to the caller
    and stop the run.

    Example:
        >>> orchestrator = PublishOrchestrator(GitRepository(), prompts)
        >>> result = orchestrator.run()
        >>> result.commit.short
        '3f2a9c1e'
    """

    def __init__(
        self,
        repo: GitRepository,
        prompts: PromptChannel,
        merge_requests: MergeRequestOffer | None = None,
        recovery: ConflictRecovery | None = None,
    ) -> None:
        """
        Initialize PublishOrchestrator.

        Args:
            repo: Repository adapter
            prompts: Channel used to talk to the operator
            merge_requests: Merge request step (skipped when None)
            recovery: Recovery dialogues (built from repo and prompts if None)
        """
        self.repo = repo
        self.prompts = prompts
        self.merge_requests = merge_requests
        self.steps = GuardedSteps(repo, prompts, recovery)
        self.replicator = BranchSyncReplicator(repo, prompts, self.steps, merge_requests)

    def run(self) -> PublishResult:
        """
        Run the publish workflow.

        Returns:
            PublishResult describing what was published

        Raises:
            GitCommandError: On a fatal or unclassified git failure
            RecoveryAborted: If the operator aborts a recovery dialogue
            SelectionError: If there is no branch to merge from
        """
        current = self.repo.current_branch()
        logger.debug(f"current_branch={current!r}")

        message = self.prompts.ask("Commit message")
        with self.prompts.working("Creating commit"):
            commit = self.repo.stage_and_commit(message)
        self.prompts.say(f"Committed {commit.short} on {current}", level="success")

        source = select_branch(
            self.prompts, self.repo.list_branches(), current, f"merge into {current}"
        )
        self.steps.merge(source, into=current)
        self.steps.push(current)

        result = PublishResult(branch=current, commit=commit, source_branch=source)
        if self.merge_requests is not None:
            result.merge_request_url = self.merge_requests.offer(current, message)

        while self._wants_sync(current, result):
            sync_round = self.replicator.run_round(
                current, commit, message, synced=result.synced_branches
            )
            result.sync_rounds.append(sync_round)

        logger.debug(f"Published {commit.sha} to {[current, *result.synced_branches]}")
        return result

    def _wants_sync(self, current: str, result: PublishResult) -> bool:
        if not self.replicator.targets(current, result.synced_branches):
            return False
        if not result.sync_rounds:
            question = "Sync this commit to other branches?"
        else:
            question = "Sync this commit to another branch?"
        return self.prompts.confirm(question, default=False)
