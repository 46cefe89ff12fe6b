"""Tests for the CLI entrypoint helpers."""

import pytest

from conftest import make_pr
from fetchers.github import TransportError
from main import format_pull_request, load_pull_requests
from models.data_models import RepoRef
from store import DashboardStore


class TestFormatPullRequest:

    def test_pending(self):
        pr = make_pr(repo="hello", number=12, title="Fix typo")
        assert format_pull_request(pr) == "octocat/hello#12  Fix typo  [pending]"

    def test_enriched(self):
        pr = make_pr(repo="hello", number=12, title="Fix typo").model_copy(
            update={
                "computed_comments": [{}, {}, {}],
                "computed_reactions": [{}, {}],
                "status": {"state": "success"},
                "enrichment_status": "success",
            }
        )
        assert format_pull_request(pr) == "octocat/hello#12  Fix typo  [success] 3 comments, 2 reactions"

    def test_failed_enrichment_flagged(self):
        pr = make_pr(repo="hello", number=12, title="Fix typo").model_copy(
            update={
                "computed_comments": [],
                "computed_reactions": [],
                "status": {"state": "unknown", "statuses": []},
                "enrichment_status": "failed",
            }
        )
        assert format_pull_request(pr).endswith("[unknown] 0 comments, 0 reactions  (enrichment failed)")


class TestLoadPullRequests:

    @pytest.mark.asyncio
    async def test_load_waits_for_enrichment(self, fetcher, make_config):
        fetcher.accounts = {"octocat": [RepoRef.parse("octocat/a")]}
        fetcher.pulls = {"octocat/a": [make_pr(repo="a", number=1)]}
        store = DashboardStore()

        success = await load_pull_requests(make_config(users=["octocat"]), fetcher=fetcher, store=store)

        assert success is True
        assert store.get_state().pull_requests[0].is_enriched

    @pytest.mark.asyncio
    async def test_load_without_waiting_leaves_records_bare(self, fetcher, make_config):
        fetcher.accounts = {"octocat": [RepoRef.parse("octocat/a")]}
        fetcher.pulls = {"octocat/a": [make_pr(repo="a", number=1)]}
        store = DashboardStore()

        success = await load_pull_requests(make_config(users=["octocat"]), wait=False, fetcher=fetcher, store=store)

        assert success is True
        assert not store.get_state().pull_requests[0].is_enriched

    @pytest.mark.asyncio
    async def test_load_fails_on_discovery_error(self, fetcher, make_config):
        fetcher.accounts = {"ghost": TransportError("https://api.github.com/users/ghost/repos", "404", 404)}

        success = await load_pull_requests(make_config(users=["ghost"]), fetcher=fetcher)

        assert success is False
