"""
Pytest configuration and shared fixtures.

Provides an in-memory stand-in for the git repository adapter, a scripted
prompt channel, and helpers for building real throwaway git repositories.
"""

import subprocess
from collections import defaultdict
from contextlib import nullcontext
from pathlib import Path

import pytest

from gitpusher.core.config import clear_cache
from gitpusher.core.git.classifier import classify_outcome
from gitpusher.core.git.models import (
    CommitRef,
    FailureKind,
    GitCommandError,
    OperationKind,
    OperationOutcome,
)

COMMIT_SHA = "3f2a9c1e7b6d5a4f3e2d1c0b9a8f7e6d5c4b3a29"

# Failure kind -> operation left stopped in the working tree
_STOPPED_BY = {
    FailureKind.MERGE_CONFLICT: OperationKind.MERGE,
    FailureKind.PULL_CONFLICT: OperationKind.MERGE,
    FailureKind.CHERRY_PICK_CONFLICT: OperationKind.CHERRY_PICK,
}


# ==============================================================================
# Fakes
# ==============================================================================


class FakeRepository:
    """
    In-memory GitRepository replacement.

    Mutating calls are recorded in `calls`. Recoverable operations return
    queued outcomes (see `queue`) and succeed once the queue is empty.
    Conflicting outcomes mark the matching operation as in progress.
    """

    def __init__(
        self,
        current: str = "feature",
        branches: list[str] | None = None,
        commit_sha: str = COMMIT_SHA,
    ) -> None:
        self.remote = "origin"
        self.current = current
        self.branches = branches or ["main", "develop", "feature", "release"]
        self.commit = CommitRef(commit_sha)
        self.url: str | None = "git@gitlab.com:team/app.git"
        self.calls: list[tuple] = []
        self.in_progress: set[OperationKind] = set()
        self._outcomes: dict[str, list[OperationOutcome]] = defaultdict(list)
        self._amend_count = 0

    def queue(self, name: str, *outcomes: OperationOutcome) -> None:
        self._outcomes[name].extend(outcomes)

    def names(self) -> list[str]:
        return [call[0] for call in self.calls]

    def _next(self, name: str, operation: OperationKind) -> OperationOutcome:
        if self._outcomes[name]:
            outcome = self._outcomes[name].pop(0)
        else:
            outcome = OperationOutcome.succeeded(operation)

        if not outcome.success:
            kind = classify_outcome(outcome)
            if name == "pull --rebase":
                if kind == FailureKind.PULL_CONFLICT:
                    self.in_progress.add(OperationKind.REBASE)
            elif kind in _STOPPED_BY:
                self.in_progress.add(_STOPPED_BY[kind])
        return outcome

    # Queries

    def current_branch(self) -> str:
        return self.current

    def list_branches(self) -> list[str]:
        return list(self.branches)

    def head_commit_ref(self) -> CommitRef:
        return self.commit

    def remote_url(self) -> str | None:
        return self.url

    def operation_in_progress(self, kind: OperationKind) -> bool:
        return kind in self.in_progress

    # Fatal mutations

    def stage_all(self) -> None:
        self.calls.append(("stage_all",))

    def stage_and_commit(self, message: str) -> CommitRef:
        if not message.strip():
            raise GitCommandError("Commit message must not be empty", operation=OperationKind.COMMIT)
        self.calls.append(("commit", message))
        return self.commit

    def amend_commit(self) -> CommitRef:
        self._amend_count += 1
        self.calls.append(("amend",))
        return CommitRef(f"{self._amend_count:040d}")

    def checkout(self, branch: str) -> None:
        self.calls.append(("checkout", branch))
        self.current = branch

    def abort_operation(self, kind: OperationKind) -> None:
        self.calls.append(("abort", kind))
        self.in_progress.discard(kind)

    def skip_operation(self, kind: OperationKind) -> None:
        self.calls.append(("skip", kind))
        self.in_progress.discard(kind)

    # Recoverable operations

    def merge(self, source: str) -> OperationOutcome:
        self.calls.append(("merge", source))
        return self._next("merge", OperationKind.MERGE)

    def pull(self, branch: str, rebase: bool = False) -> OperationOutcome:
        self.calls.append(("pull", branch, rebase))
        return self._next("pull --rebase" if rebase else "pull", OperationKind.PULL)

    def push(self, branch: str, force: bool = False) -> OperationOutcome:
        self.calls.append(("push", branch, force))
        return self._next("push --force" if force else "push", OperationKind.PUSH)

    def cherry_pick(self, commit: CommitRef) -> OperationOutcome:
        self.calls.append(("cherry_pick", commit.sha))
        return self._next("cherry_pick", OperationKind.CHERRY_PICK)

    def continue_operation(self, kind: OperationKind) -> OperationOutcome:
        self.calls.append(("continue", kind))
        outcome = self._next("continue", kind)
        if outcome.success:
            self.in_progress.discard(kind)
        return outcome


class ScriptedPrompts:
    """
    PromptChannel replacement that replays scripted answers.

    Running out of answers fails the test with the prompt that was not
    expected.
    """

    def __init__(
        self,
        answers: list[str] | None = None,
        confirms: list[bool] | None = None,
    ) -> None:
        self.answers = list(answers or [])
        self.confirms = list(confirms or [])
        self.asked: list[str] = []
        self.confirmed: list[str] = []
        self.messages: list[tuple[str, str]] = []

    def ask(self, message: str) -> str:
        self.asked.append(message)
        if not self.answers:
            raise AssertionError(f"Unexpected prompt: {message}")
        return self.answers.pop(0)

    def confirm(self, message: str, default: bool = False) -> bool:
        self.confirmed.append(message)
        if not self.confirms:
            raise AssertionError(f"Unexpected confirmation: {message}")
        return self.confirms.pop(0)

    def say(self, message: str, level: str = "info") -> None:
        self.messages.append((level, message))

    def working(self, message: str) -> nullcontext:
        return nullcontext()

    def said(self, level: str) -> list[str]:
        return [m for lvl, m in self.messages if lvl == level]


# ==============================================================================
# Fixtures
# ==============================================================================


@pytest.fixture
def repo():
    """Provide a FakeRepository checked out on 'feature'."""
    return FakeRepository()


@pytest.fixture
def make_repo():
    """Provide the FakeRepository class for custom construction."""
    return FakeRepository


@pytest.fixture
def make_prompts():
    """Provide the ScriptedPrompts class for scripting a dialogue."""
    return ScriptedPrompts


@pytest.fixture(autouse=True)
def clear_config_cache():
    """Make every test load configuration from scratch."""
    clear_cache()
    yield
    clear_cache()


def git(cwd: Path, *args: str) -> str:
    """Run a git command for test setup and return its stdout."""
    result = subprocess.run(
        ["git", *args],
        cwd=cwd,
        capture_output=True,
        text=True,
        check=True,
    )
    return result.stdout.strip()


@pytest.fixture
def run_git():
    """Provide the git setup helper."""
    return git


@pytest.fixture
def git_env(tmp_path, monkeypatch):
    """Isolate git from the user's global and system configuration."""
    gitconfig = tmp_path / ".gitconfig"
    gitconfig.write_text(
        "[user]\n"
        "\tname = Test User\n"
        "\temail = test@example.com\n"
        "[init]\n"
        "\tdefaultBranch = main\n"
        "[pull]\n"
        "\trebase = false\n"
        "[commit]\n"
        "\tgpgsign = false\n"
    )
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setenv("GIT_CONFIG_GLOBAL", str(gitconfig))
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    monkeypatch.delenv("GIT_EDITOR", raising=False)
    return gitconfig


@pytest.fixture
def work_repo(tmp_path, git_env):
    """
    Provide a real git repository on 'main' with one commit.

    Creates:
    - a.txt containing "base"
    """
    path = tmp_path / "work"
    path.mkdir()
    git(path, "init", "-q")
    (path / "a.txt").write_text("base\n")
    git(path, "add", "a.txt")
    git(path, "commit", "-q", "-m", "base")
    git(path, "checkout", "-q", "-B", "main")
    return path
