"""
Failure classification for git diagnostics.

git does not report failures programmatically, so the kind of a failure is
recovered from the text it prints. Matching is case-sensitive substring
containment and the rules are tested in order; anything that matches none
of them is reported as ``FailureKind.UNCLASSIFIED`` so new diagnostic
formats fail loudly instead of being routed to the wrong dialogue.
"""

from __future__ import annotations

from gitpusher.core.git.models import FailureKind, OperationKind, OperationOutcome

CONFLICT_MARKERS = ("CONFLICT", "conflicts")

# Printed when a cherry-pick would add nothing to the branch
EMPTY_PICK_MARKERS = ("is now empty", "nothing to commit")


def _has_conflict(diagnostic: str) -> bool:
    return any(marker in diagnostic for marker in CONFLICT_MARKERS)


def is_empty_pick(diagnostic: str) -> bool:
    """Check whether a cherry-pick stopped only because its changes are already applied."""
    return any(marker in diagnostic for marker in EMPTY_PICK_MARKERS)


def classify(operation: OperationKind, diagnostic: str) -> FailureKind:
    """
    Map a failed operation's diagnostic text to a failure kind.

    Args:
        operation: The operation that failed
        diagnostic: Raw stderr/stdout text printed by git

    Returns:
        The matching FailureKind, or FailureKind.UNCLASSIFIED

    Example:
        >>> classify(OperationKind.PUSH, "! [rejected] main -> main (non-fast-forward)")
        <FailureKind.PUSH_FAST: 'PushFast'>
        >>> classify(OperationKind.PUSH, "fatal: Authentication failed")
        <FailureKind.UNCLASSIFIED: 'Unclassified'>
    """
    if operation == OperationKind.PUSH:
        if "rejected" in diagnostic and "non-fast-forward" in diagnostic:
            return FailureKind.PUSH_FAST
    elif operation == OperationKind.PULL:
        if "divergent branches" in diagnostic:
            return FailureKind.PULL_DIVERGENT
        if _has_conflict(diagnostic):
            return FailureKind.PULL_CONFLICT
    elif operation == OperationKind.MERGE:
        if _has_conflict(diagnostic):
            return FailureKind.MERGE_CONFLICT
    elif operation == OperationKind.CHERRY_PICK:
        if _has_conflict(diagnostic) or is_empty_pick(diagnostic):
            return FailureKind.CHERRY_PICK_CONFLICT

    return FailureKind.UNCLASSIFIED


def classify_outcome(outcome: OperationOutcome) -> FailureKind:
    """Classify a failed outcome using its own operation kind."""
    return classify(outcome.operation, outcome.diagnostic)


def classify_merge_step(outcome: OperationOutcome) -> FailureKind:
    """
    Classify the failure of a merge step.

    The merge step pulls the source branch, so when the text carries no
    conflict markers it is read again as a pull to catch diverged history.
    """
    kind = classify(OperationKind.MERGE, outcome.diagnostic)
    if kind == FailureKind.UNCLASSIFIED:
        kind = classify(OperationKind.PULL, outcome.diagnostic)
    return kind
