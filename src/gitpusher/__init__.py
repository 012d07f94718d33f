"""
gitpusher - Interactive git publishing assistant.

A CLI tool that commits local changes, merges a source branch, pushes,
opens a merge request and syncs the commit to other branches, pausing for
the operator whenever git needs a hand.
"""

__version__ = "0.4.0.dev0"

# Re-export core models for convenience
from gitpusher.core.git.models import CommitRef, FailureKind, OperationKind, OperationOutcome

__all__ = ["CommitRef", "FailureKind", "OperationKind", "OperationOutcome", "__version__"]
