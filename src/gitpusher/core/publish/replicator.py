"""
Branch sync replicator.

Replays the published commit onto other local branches, one round per
target branch chosen by the operator.
"""

from __future__ import annotations

import logging
from collections.abc import Collection
from typing import Protocol

from gitpusher.core.git.models import CommitRef, SyncRound
from gitpusher.core.git.repository import GitRepository
from gitpusher.core.publish.prompts import PromptChannel, read_keyword, select_branch
from gitpusher.core.publish.recovery import RecoveryAborted
from gitpusher.core.publish.steps import GuardedSteps

logger = logging.getLogger(__name__)


class MergeRequestOffer(Protocol):
    """Protocol for the optional merge request step."""

    def offer(self, source_branch: str, title: str) -> str | None:
        """Ask whether to open a merge request and create it if wanted.

        Args:
            source_branch: Branch the request merges from
            title: Request title

        Returns:
            URL of the created request, or None if the operator declined
        """
        ...


class BranchSyncReplicator:
    """
    Replicates one commit onto other branches.

    Example:
        >>> replicator = BranchSyncReplicator(repo, prompts, steps)
        >>> sync_round = replicator.run_round("feature", commit, "fix bug")
        >>> sync_round.target_branch
        'release'
    """

    def __init__(
        self,
        repo: GitRepository,
        prompts: PromptChannel,
        steps: GuardedSteps,
        merge_requests: MergeRequestOffer | None = None,
    ) -> None:
        self.repo = repo
        self.prompts = prompts
        self.steps = steps
        self.merge_requests = merge_requests

    def targets(self, origin_branch: str, synced: Collection[str] = ()) -> list[str]:
        """
        List the branches a sync round may pick.

        The branch the commit was published from, the checked-out branch and
        branches already synced in this run are left out.
        """
        skip = {origin_branch, self.repo.current_branch(), *synced}
        return [branch for branch in self.repo.list_branches() if branch not in skip]

    def run_round(
        self,
        origin_branch: str,
        commit: CommitRef,
        title: str,
        synced: Collection[str] = (),
    ) -> SyncRound:
        """
        Replicate `commit` onto one operator-chosen branch.

        Args:
            origin_branch: Branch the commit was published from
            commit: Commit captured when the run started
            title: Title for a merge request created for the target
            synced: Branches already synced in this run

        Returns:
            The completed SyncRound

        Raises:
            SelectionError: If no branch is left to sync to
        """
        target = select_branch(
            self.prompts, self.targets(origin_branch, synced), None, "sync the commit to"
        )
        logger.debug(f"Sync round: {commit.sha} -> {target}")

        self.repo.checkout(target)
        self.prompts.say(f"Switched to {target}", level="success")

        merged_branch: str | None = None
        if self.prompts.confirm(f"Merge another branch into {target} first?", default=False):
            merged_branch = select_branch(
                self.prompts, self.repo.list_branches(), target, f"merge into {target}"
            )
            self.steps.merge(merged_branch, into=target)

        self.steps.cherry_pick(commit, onto=target)

        if self.prompts.confirm("Keep editing files before pushing?", default=False):
            self._fold_in_edits(target)

        self.steps.push(target)
        self.prompts.say(f"Synced commit {commit.short} to {target}", level="success")

        url = None
        if self.merge_requests is not None:
            url = self.merge_requests.offer(target, title)

        return SyncRound(
            target_branch=target,
            commit=commit,
            merged_branch=merged_branch,
            merge_request_url=url,
        )

    def _fold_in_edits(self, target: str) -> None:
        """Wait for the operator's edits and amend them into the cherry-picked commit."""
        self.prompts.say(
            "Edit the files you need, then type 'continue' to fold the changes into "
            "the commit. Type 'abort' to stop here.",
            level="warning",
        )
        while True:
            answer = read_keyword(self.prompts)
            if answer == "continue":
                amended = self.repo.amend_commit()
                self.prompts.say(f"Amended commit on {target} ({amended.short})", level="success")
                return
            if answer == "abort":
                raise RecoveryAborted(
                    None,
                    target,
                    f"Stopped while editing {target}. Commit and push it by hand.",
                )
            self.prompts.say("Invalid command, type 'continue' or 'abort'", level="error")
