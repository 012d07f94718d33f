"""
Merge request service.

Offers the operator a merge request after a push, resolves the GitLab
project and access token, creates the request and opens it in the browser.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from gitpusher.core.config.models import MergeRequestConfig
from gitpusher.core.git.repository import GitRepository
from gitpusher.core.merge_request.client import GitLabAuthError, GitLabClient, GitLabClientError
from gitpusher.core.merge_request.credentials import TokenStore
from gitpusher.core.merge_request.models import MergeRequest, RemoteInfo
from gitpusher.core.publish.prompts import PromptChannel, select_branch
from gitpusher.utils.browser import open_url

logger = logging.getLogger(__name__)

ClientFactory = Callable[[RemoteInfo, str], GitLabClient]


class MergeRequestService:
    """
    Creates GitLab merge requests on the operator's request.

    Example:
        >>> service = MergeRequestService(repo, prompts, config.merge_request)
        >>> url = service.offer("feature", "Fix bug")
    """

    def __init__(
        self,
        repo: GitRepository,
        prompts: PromptChannel,
        config: MergeRequestConfig | None = None,
        token_store: TokenStore | None = None,
        client_factory: ClientFactory | None = None,
        opener: Callable[[str], bool] = open_url,
    ) -> None:
        """
        Initialize MergeRequestService.

        Args:
            repo: Repository adapter (for branches and the remote URL)
            prompts: Channel used to talk to the operator
            config: Merge request settings (defaults if None)
            token_store: Persisted tokens (~/.gitpusher if None)
            client_factory: Builds a GitLabClient for a project and token
            opener: Opens a URL in the browser
        """
        self.repo = repo
        self.prompts = prompts
        self.config = config or MergeRequestConfig()
        self.token_store = token_store or TokenStore()
        self._client_factory = client_factory or self._default_client
        self._opener = opener

    def _default_client(self, remote: RemoteInfo, token: str) -> GitLabClient:
        return GitLabClient(
            remote,
            token,
            api_url=self.config.api_url,
            timeout=self.config.timeout,
        )

    def offer(self, source_branch: str, title: str) -> str | None:
        """
        Ask whether to create a merge request and create it if wanted.

        Args:
            source_branch: Branch the request merges from
            title: Request title (the commit message)

        Returns:
            URL of the created request, or None if the operator declined
        """
        if not self.prompts.confirm("Create a merge request?", default=False):
            return None

        target = select_branch(
            self.prompts, self.repo.list_branches(), source_branch, "merge the request into"
        )
        return self.create(source_branch, target, title).web_url

    def resolve_remote(self) -> RemoteInfo:
        """
        Parse the GitLab project from the repository remote.

        Raises:
            GitLabClientError: If the remote is missing or unparseable
        """
        remote_url = self.repo.remote_url()
        if not remote_url:
            raise GitLabClientError(f"No git remote '{self.repo.remote}' found")

        remote = RemoteInfo.from_remote_url(remote_url)
        if remote is None:
            raise GitLabClientError(f"Cannot parse a GitLab project from {remote_url}")
        return remote

    def resolve_token(self, host: str) -> str:
        """
        Find the access token for a host.

        Order: configuration/env, stored token, operator prompt (remembered).
        """
        if self.config.token:
            return self.config.token

        stored = self.token_store.get(host)
        if stored:
            return stored

        token = self.prompts.ask(f"GitLab access token for {host}").strip()
        if not token:
            raise GitLabClientError(f"No access token for {host}")
        self.token_store.save(host, token)
        self.prompts.say(f"Token saved to {self.token_store.path}", level="info")
        return token

    def create(self, source_branch: str, target_branch: str, title: str) -> MergeRequest:
        """
        Create a merge request and open it in the browser.

        Raises:
            GitLabClientError: If the request cannot be created
        """
        remote = self.resolve_remote()
        token = self.resolve_token(remote.host)
        client = self._client_factory(remote, token)

        try:
            with self.prompts.working(f"Creating merge request {source_branch} -> {target_branch}"):
                merge_request = client.create_merge_request(source_branch, target_branch, title)
        except GitLabAuthError:
            if self.token_store.forget(remote.host):
                logger.info(f"Forgot rejected token for {remote.host}")
            raise

        self.prompts.say(f"Merge request created: {merge_request.web_url}", level="success")
        if self.config.open_browser and merge_request.web_url:
            if not self._opener(merge_request.web_url):
                self.prompts.say(
                    f"Could not open a browser. Open this URL manually: {merge_request.web_url}",
                    level="warning",
                )
        return merge_request
