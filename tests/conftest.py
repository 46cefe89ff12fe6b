"""Shared pytest fixtures and configuration."""

from unittest.mock import AsyncMock, Mock
import pytest

from models.config_models import Config, DashboardConfig, GitHubConfig
from models.data_models import PullRequest, RepoRef

API = "https://api.github.com"


def pr_payload(owner="octocat", repo="hello", number=1, updated_at="2025-01-15T10:30:00Z", sha=None, title=None):
    """Build a pull request object shaped like the GitHub list/detail endpoints."""
    sha = sha or f"sha-{repo}-{number}"
    return {
        "number": number,
        "title": title or f"PR {number} in {repo}",
        "html_url": f"https://github.com/{owner}/{repo}/pull/{number}",
        "user": {"login": "contributor"},
        "created_at": "2025-01-01T00:00:00Z",
        "updated_at": updated_at,
        "base": {"repo": {"name": repo, "owner": {"login": owner}}},
        "head": {"sha": sha},
        "_links": {"comments": {"href": f"{API}/repos/{owner}/{repo}/issues/{number}/comments"}},
    }


def make_pr(**kwargs) -> PullRequest:
    return PullRequest.model_validate(pr_payload(**kwargs))


@pytest.fixture
def make_config():
    """Factory for valid configs; keyword arguments go to DashboardConfig."""
    def _make(**dashboard):
        return Config(
            github=GitHubConfig(api_base_url=API, token="ghp_test_token_1234567890"),
            dashboard=DashboardConfig(**dashboard),
        )
    return _make


@pytest.fixture
def fetcher():
    """
    Mock fetcher backed by a dict of repos per account and PRs per repo.

    Tests fill `fetcher.accounts` ({account: [RepoRef]}) and `fetcher.pulls`
    ({"owner/name": [PullRequest] or Exception}). Detail, comments, reactions
    and status return simple defaults and can be overridden per test.
    """
    mock = Mock()
    mock.accounts = {}
    mock.pulls = {}

    async def list_account_repos(account):
        repos = mock.accounts[account]
        if isinstance(repos, Exception):
            raise repos
        return repos

    async def list_pull_requests(repo: RepoRef):
        pulls = mock.pulls[repo.full_name]
        if isinstance(pulls, Exception):
            raise pulls
        return pulls

    async def get_pull_request(repo: RepoRef, number: int):
        return pr_payload(owner=repo.owner, repo=repo.name, number=number)

    mock.list_account_repos = AsyncMock(side_effect=list_account_repos)
    mock.list_pull_requests = AsyncMock(side_effect=list_pull_requests)
    mock.get_pull_request = AsyncMock(side_effect=get_pull_request)
    mock.list_comments = AsyncMock(return_value=[{"id": 1, "body": "LGTM"}])
    mock.list_reactions = AsyncMock(return_value=[{"content": "+1"}])
    mock.get_commit_status = AsyncMock(return_value={"state": "success", "statuses": []})
    return mock


@pytest.fixture
def test_env(monkeypatch, tmp_path):
    """
    Point the config loader at a temporary config file and set test env vars.
    """
    config_file = tmp_path / "config.json"
    config_file.write_text(
        '{"apiBaseUrl": "https://api.github.com", "users": ["octocat"], '
        '"repos": ["octocat/extra"], "reactions": false, "groupByRepo": true}'
    )
    monkeypatch.setenv("DASHBOARD_CONFIG", str(config_file))
    monkeypatch.setenv("GITHUB_TOKEN", "ghp_test_token_1234567890")
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")
    monkeypatch.delenv("GITHUB_API_URL", raising=False)
    monkeypatch.delenv("DASHBOARD_USERS", raising=False)

    return {
        "config_file": config_file,
        "github_token": "ghp_test_token_1234567890",
        "log_level": "DEBUG",
    }


@pytest.fixture
def invalid_env(monkeypatch, tmp_path):
    """
    Config file without a usable API base URL.
    """
    config_file = tmp_path / "config.json"
    config_file.write_text('{"apiBaseUrl": "", "users": ["octocat"]}')
    monkeypatch.setenv("DASHBOARD_CONFIG", str(config_file))
    monkeypatch.delenv("GITHUB_API_URL", raising=False)
    monkeypatch.delenv("DASHBOARD_USERS", raising=False)
