"""GitHub API client for the pull request dashboard.

Two layers live here:
- GitHubTransport: a single authenticated GET, run off the event loop
- GitHubFetcher: the resource fetchers the pipeline is built on
  (repositories, pull requests, comments, reactions, commit status)

Only one page of results is requested per listing call.
"""

import asyncio
import logging
from typing import Any, Optional

import requests

from models.data_models import PullRequest, RepoRef

logger = logging.getLogger(__name__)

REACTIONS_PREVIEW_MEDIA_TYPE = "application/vnd.github.squirrel-girl-preview"


class TransportError(Exception):
    """A GET request failed (connection error, timeout or HTTP error status)."""

    def __init__(self, url: str, message: str, status_code: Optional[int] = None):
        self.url = url
        self.status_code = status_code
        super().__init__(f"GET {url} failed: {message}")


class GitHubTransport:
    """Perform authenticated GET requests and return the decoded JSON body."""

    def __init__(self, token: Optional[str] = None, timeout: float = 10.0):
        """Initialize transport.

        Args:
            token: Optional personal access token, sent as 'Authorization: token <TOKEN>'
            timeout: Per-request timeout in seconds
        """
        self.token = token
        self.timeout = timeout

    def build_headers(self, headers: Optional[dict[str, str]] = None) -> dict[str, str]:
        """Merge the authorization header into caller-supplied headers."""
        merged = dict(headers or {})
        if self.token:
            merged["Authorization"] = f"token {self.token}"
        return merged

    def _get(self, url: str, headers: dict[str, str]) -> Any:
        try:
            response = requests.get(url, headers=headers, timeout=self.timeout)
        except requests.RequestException as e:
            raise TransportError(url, str(e)) from e

        remaining = response.headers.get("X-RateLimit-Remaining")
        limit = response.headers.get("X-RateLimit-Limit")
        if remaining and limit:
            logger.debug(f"Rate limit: {remaining}/{limit} remaining")

        try:
            response.raise_for_status()
        except requests.HTTPError as e:
            raise TransportError(url, str(e), status_code=response.status_code) from e

        try:
            return response.json()
        except ValueError as e:
            raise TransportError(url, f"invalid JSON body: {e}", status_code=response.status_code) from e

    async def call(self, url: str, headers: Optional[dict[str, str]] = None) -> Any:
        """GET a URL without blocking the event loop.

        Args:
            url: Absolute URL to request
            headers: Optional extra headers (authorization is merged in)

        Returns:
            Decoded JSON response body

        Raises:
            TransportError: On connection errors, timeouts, HTTP errors or bad JSON
        """
        return await asyncio.to_thread(self._get, url, self.build_headers(headers))


class GitHubFetcher:
    """Resource fetchers for repositories and pull requests."""

    def __init__(self, base_url: str, transport: GitHubTransport):
        self.base_url = base_url.rstrip("/")
        self.transport = transport

    @classmethod
    def from_config(cls, config) -> "GitHubFetcher":
        """Build a fetcher from the `github` section of the app Config."""
        transport = GitHubTransport(
            token=config.github.token,
            timeout=config.github.request_timeout,
        )
        return cls(config.github.api_base_url, transport)

    async def list_account_repos(self, account: str) -> list[RepoRef]:
        """List the repositories owned by an account.

        Raises:
            TransportError: If the listing call fails
        """
        url = f"{self.base_url}/users/{account}/repos"
        repos = await self.transport.call(url)
        refs = [RepoRef.from_api(repo) for repo in repos]
        logger.debug(f"Account {account} has {len(refs)} repositories")
        return refs

    async def list_pull_requests(self, repo: RepoRef) -> list[PullRequest]:
        """List open pull requests of one repository (bare records).

        Raises:
            TransportError: If the listing call fails
        """
        url = f"{self.base_url}/repos/{repo.owner}/{repo.name}/pulls"
        pulls = await self.transport.call(url)
        logger.debug(f"Fetched {len(pulls)} open PRs from {repo}")
        return [PullRequest.model_validate(pull) for pull in pulls]

    async def get_pull_request(self, repo: RepoRef, number: int) -> dict[str, Any]:
        """Fetch the single pull request resource (has `_links` and `head.sha`)."""
        url = f"{self.base_url}/repos/{repo.owner}/{repo.name}/pulls/{number}"
        return await self.transport.call(url)

    async def list_comments(self, comments_url: str) -> list[dict[str, Any]]:
        """Fetch comments through the href returned by the pull request resource."""
        return await self.transport.call(comments_url)

    async def list_reactions(self, repo: RepoRef, number: int) -> list[dict[str, Any]]:
        """Fetch reactions on the pull request's issue."""
        url = f"{self.base_url}/repos/{repo.owner}/{repo.name}/issues/{number}/reactions"
        return await self.transport.call(url, {"Accept": REACTIONS_PREVIEW_MEDIA_TYPE})

    async def get_commit_status(self, repo: RepoRef, sha: str) -> dict[str, Any]:
        """Fetch the combined commit status for a sha."""
        url = f"{self.base_url}/repos/{repo.owner}/{repo.name}/commits/{sha}/status"
        return await self.transport.call(url)
