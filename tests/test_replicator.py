"""
Tests for the branch sync replicator.
"""

from unittest.mock import MagicMock

import pytest

from gitpusher.core.git.models import CommitRef, OperationKind, OperationOutcome
from gitpusher.core.publish.prompts import SelectionError
from gitpusher.core.publish.recovery import RecoveryAborted
from gitpusher.core.publish.replicator import BranchSyncReplicator
from gitpusher.core.publish.steps import GuardedSteps

COMMIT = CommitRef("3f2a9c1e7b6d5a4f3e2d1c0b9a8f7e6d5c4b3a29")


def _replicator(repo, prompts, merge_requests=None):
    steps = GuardedSteps(repo, prompts)
    return BranchSyncReplicator(repo, prompts, steps, merge_requests)


class TestRunRound:
    """Tests for BranchSyncReplicator.run_round."""

    def test_plain_round(self, repo, make_prompts):
        """Checkout, cherry-pick, push, in that order."""
        # Targets exclude 'feature': main, develop, release
        prompts = make_prompts(answers=["3"], confirms=[False, False])

        sync_round = _replicator(repo, prompts).run_round("feature", COMMIT, "fix bug")

        assert sync_round.target_branch == "release"
        assert sync_round.commit == COMMIT
        assert sync_round.merged_branch is None
        assert sync_round.merge_request_url is None
        assert repo.calls == [
            ("checkout", "release"),
            ("cherry_pick", COMMIT.sha),
            ("push", "release", False),
        ]

    def test_origin_branch_is_never_offered(self, repo, make_prompts):
        prompts = make_prompts(answers=["1"], confirms=[False, False])

        _replicator(repo, prompts).run_round("feature", COMMIT, "fix bug")

        assert "feature" not in " ".join(prompts.said("info"))

    def test_checked_out_and_synced_branches_are_not_offered(self, make_repo, make_prompts):
        """A later round never offers the branch that already holds the commit."""
        repo = make_repo(current="release")
        # Targets exclude feature (origin) and release (checked out, synced): main, develop
        prompts = make_prompts(answers=["2"], confirms=[False, False])

        sync_round = _replicator(repo, prompts).run_round(
            "feature", COMMIT, "fix bug", synced=["release"]
        )

        assert sync_round.target_branch == "develop"
        assert prompts.said("info") == ["1. main", "2. develop"]

    def test_no_target_left(self, make_repo, make_prompts):
        repo = make_repo(current="release", branches=["feature", "release"])
        replicator = _replicator(repo, make_prompts())

        assert replicator.targets("feature", ["release"]) == []
        with pytest.raises(SelectionError):
            replicator.run_round("feature", COMMIT, "fix bug", synced=["release"])

        assert repo.calls == []

    def test_merge_another_branch_first(self, repo, make_prompts):
        """The optional merge excludes the target and runs before the cherry-pick."""
        # Target: release. Merge options exclude release: main, develop, feature
        prompts = make_prompts(answers=["3", "2"], confirms=[True, False])

        sync_round = _replicator(repo, prompts).run_round("feature", COMMIT, "fix bug")

        assert sync_round.merged_branch == "develop"
        assert repo.names() == ["checkout", "merge", "cherry_pick", "push"]

    def test_edits_are_amended_before_push(self, repo, make_prompts):
        prompts = make_prompts(answers=["3", "wait", "Continue"], confirms=[False, True])

        _replicator(repo, prompts).run_round("feature", COMMIT, "fix bug")

        assert repo.names() == ["checkout", "cherry_pick", "amend", "push"]
        assert "Invalid command, type 'continue' or 'abort'" in prompts.said("error")

    def test_abort_while_editing_skips_push(self, repo, make_prompts):
        prompts = make_prompts(answers=["3", "abort"], confirms=[False, True])

        with pytest.raises(RecoveryAborted) as exc_info:
            _replicator(repo, prompts).run_round("feature", COMMIT, "fix bug")

        assert exc_info.value.kind is None
        assert exc_info.value.branch == "release"
        assert "push" not in repo.names()

    def test_cherry_pick_abort_skips_push(self, repo, make_prompts):
        repo.queue(
            "cherry_pick",
            OperationOutcome.failed(OperationKind.CHERRY_PICK, "CONFLICT (content)"),
        )
        prompts = make_prompts(answers=["3", "abort"], confirms=[False])

        with pytest.raises(RecoveryAborted):
            _replicator(repo, prompts).run_round("feature", COMMIT, "fix bug")

        assert repo.names() == ["checkout", "cherry_pick", "abort"]

    def test_merge_request_offered_for_target(self, repo, make_prompts):
        merge_requests = MagicMock()
        merge_requests.offer.return_value = "https://gitlab.com/team/app/-/merge_requests/7"
        prompts = make_prompts(answers=["3"], confirms=[False, False])

        sync_round = _replicator(repo, prompts, merge_requests).run_round(
            "feature", COMMIT, "fix bug"
        )

        merge_requests.offer.assert_called_once_with("release", "fix bug")
        assert sync_round.merge_request_url == "https://gitlab.com/team/app/-/merge_requests/7"
