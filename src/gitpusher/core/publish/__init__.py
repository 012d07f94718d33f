"""
Publish workflow module.

Provides the orchestrated commit/merge/push workflow, the conflict recovery
dialogues and the branch sync replicator.
"""

from gitpusher.core.publish.orchestrator import PublishOrchestrator
from gitpusher.core.publish.prompts import PromptChannel, SelectionError, select_branch
from gitpusher.core.publish.recovery import ConflictRecovery, RecoveryAborted
from gitpusher.core.publish.replicator import BranchSyncReplicator, MergeRequestOffer
from gitpusher.core.publish.steps import GuardedSteps

__all__ = [
    "BranchSyncReplicator",
    "ConflictRecovery",
    "GuardedSteps",
    "MergeRequestOffer",
    "PromptChannel",
    "PublishOrchestrator",
    "RecoveryAborted",
    "SelectionError",
    "select_branch",
]
