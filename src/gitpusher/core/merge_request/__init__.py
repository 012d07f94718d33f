"""
GitLab merge request module.

Provides the GitLab API client, persisted token storage and the service
that offers merge requests during the publish workflow.
"""

from gitpusher.core.merge_request.client import GitLabAuthError, GitLabClient, GitLabClientError
from gitpusher.core.merge_request.credentials import TokenStore
from gitpusher.core.merge_request.models import MergeRequest, RemoteInfo
from gitpusher.core.merge_request.service import MergeRequestService

__all__ = [
    "GitLabAuthError",
    "GitLabClient",
    "GitLabClientError",
    "MergeRequest",
    "MergeRequestService",
    "RemoteInfo",
    "TokenStore",
]
