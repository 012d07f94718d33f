"""
GitLab REST client for gitpusher.

Creates merge requests through the GitLab v4 API using httpx.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from gitpusher.core.merge_request.models import MergeRequest, RemoteInfo

logger = logging.getLogger(__name__)


class GitLabClientError(Exception):
    """Error from GitLab client operations."""

    pass


class GitLabAuthError(GitLabClientError):
    """The access token was rejected."""

    pass


def _error_message(response: httpx.Response) -> str:
    """Pull the human-readable message out of a GitLab error body."""
    try:
        data: Any = response.json()
    except ValueError:
        return response.text.strip() or response.reason_phrase

    if isinstance(data, dict):
        message = data.get("message") or data.get("error") or data
        if isinstance(message, list):
            return "; ".join(str(m) for m in message)
        return str(message)
    return str(data)


class GitLabClient:
    """
    Client for the GitLab merge request API.

    Example:
        >>> remote = RemoteInfo.from_remote_url("git@gitlab.com:team/app.git")
        >>> client = GitLabClient(remote, token="glpat-...")
        >>> mr = client.create_merge_request("feature", "main", "Fix bug")
        >>> print(mr.web_url)
    """

    def __init__(
        self,
        remote: RemoteInfo,
        token: str,
        *,
        api_url: str | None = None,
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """
        Initialize GitLabClient.

        Args:
            remote: Project the requests are created in
            token: Personal or project access token
            api_url: API base URL (defaults to the remote host's /api/v4)
            timeout: Request timeout in seconds
            transport: Optional httpx transport (used by tests)
        """
        self.remote = remote
        self.token = token
        self.api_url = (api_url or remote.api_url).rstrip("/")
        self.timeout = timeout
        self._transport = transport

    def create_merge_request(
        self,
        source_branch: str,
        target_branch: str,
        title: str,
    ) -> MergeRequest:
        """
        Create a merge request.

        Args:
            source_branch: Branch to merge from
            target_branch: Branch to merge into
            title: Merge request title

        Returns:
            The created MergeRequest

        Raises:
            GitLabAuthError: If the token is rejected (401/403)
            GitLabClientError: On any other API or network failure
        """
        url = f"{self.api_url}/projects/{self.remote.project_id}/merge_requests"
        payload = {
            "source_branch": source_branch,
            "target_branch": target_branch,
            "title": title,
        }
        logger.debug(f"POST {url} {payload}")

        try:
            with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
                response = client.post(url, json=payload, headers={"PRIVATE-TOKEN": self.token})
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status_code = e.response.status_code
            message = _error_message(e.response)
            logger.debug(f"GitLab API error {status_code}: {message}")
            if status_code in (401, 403):
                raise GitLabAuthError(f"GitLab rejected the access token (HTTP {status_code})")
            if status_code == 409:
                raise GitLabClientError(
                    f"A merge request from {source_branch} to {target_branch} "
                    f"already exists: {message}"
                )
            raise GitLabClientError(f"HTTP {status_code}: {message}")
        except httpx.TimeoutException as e:
            raise GitLabClientError(f"Request timed out after {self.timeout}s: {e}")
        except httpx.RequestError as e:
            raise GitLabClientError(f"Network error: {e}")

        try:
            data = response.json()
        except ValueError as e:
            raise GitLabClientError(f"Failed to parse GitLab API response: {e}")

        return MergeRequest.from_api(data)
