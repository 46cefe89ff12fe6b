"""Tests for per-pull-request enrichment."""

import pytest

from conftest import make_pr, pr_payload
from fetchers.github import TransportError
from pipeline.enrichment import enrich_pull_request


def boom(what):
    return TransportError(f"https://api.github.com/{what}", "502 Bad Gateway", 502)


@pytest.mark.asyncio
async def test_all_three_fetched(fetcher):
    pr = make_pr(repo="hello", number=3)

    enriched = await enrich_pull_request(fetcher, pr, comments_enabled=True, reactions_enabled=True)

    fetcher.get_pull_request.assert_awaited_once_with(pr.repo_ref, 3)
    fetcher.list_comments.assert_awaited_once_with("https://api.github.com/repos/octocat/hello/issues/3/comments")
    fetcher.list_reactions.assert_awaited_once_with(pr.repo_ref, 3)
    fetcher.get_commit_status.assert_awaited_once_with(pr.repo_ref, "sha-hello-3")

    assert enriched.computed_comments == [{"id": 1, "body": "LGTM"}]
    assert enriched.computed_reactions == [{"content": "+1"}]
    assert enriched.status == {"state": "success", "statuses": []}
    assert enriched.enrichment_status == "success"
    assert enriched.enrichment_error is None


@pytest.mark.asyncio
async def test_identity_unchanged_and_input_not_mutated(fetcher):
    pr = make_pr(repo="hello", number=3)

    enriched = await enrich_pull_request(fetcher, pr)

    assert enriched.identity == pr.identity
    assert enriched.updated_at == pr.updated_at
    assert pr.computed_comments is None
    assert pr.enrichment_status == "pending"


@pytest.mark.asyncio
async def test_comments_disabled_makes_no_call(fetcher):
    """Comments off, reactions on: no comments call and 3 reactions."""
    fetcher.list_reactions.return_value = [{"content": "+1"}, {"content": "heart"}, {"content": "rocket"}]

    enriched = await enrich_pull_request(fetcher, make_pr(), comments_enabled=False, reactions_enabled=True)

    fetcher.list_comments.assert_not_awaited()
    assert enriched.computed_comments == []
    assert len(enriched.computed_reactions) == 3
    assert enriched.enrichment_status == "success"


@pytest.mark.asyncio
async def test_reactions_disabled_makes_no_call(fetcher):
    enriched = await enrich_pull_request(fetcher, make_pr(), comments_enabled=True, reactions_enabled=False)

    fetcher.list_reactions.assert_not_awaited()
    assert enriched.computed_reactions == []
    assert enriched.computed_comments == [{"id": 1, "body": "LGTM"}]


@pytest.mark.asyncio
async def test_status_uses_head_sha_from_detail(fetcher):
    """The single-PR resource is authoritative for the head sha."""
    pr = make_pr(repo="hello", number=3, sha="stale-sha")
    fetcher.get_pull_request.side_effect = None
    fetcher.get_pull_request.return_value = pr_payload(repo="hello", number=3, sha="fresh-sha")

    await enrich_pull_request(fetcher, pr)

    fetcher.get_commit_status.assert_awaited_once_with(pr.repo_ref, "fresh-sha")


@pytest.mark.asyncio
async def test_status_failure_degrades_only_status(fetcher):
    fetcher.get_commit_status.side_effect = boom("status")

    enriched = await enrich_pull_request(fetcher, make_pr(), comments_enabled=True)

    assert enriched.status == {"state": "unknown", "statuses": []}
    assert enriched.computed_comments == [{"id": 1, "body": "LGTM"}]
    assert enriched.computed_reactions == [{"content": "+1"}]
    assert enriched.enrichment_status == "failed"
    assert "status" in enriched.enrichment_error


@pytest.mark.asyncio
async def test_every_sub_fetch_failing_still_sets_all_fields(fetcher):
    fetcher.list_comments.side_effect = boom("comments")
    fetcher.list_reactions.side_effect = boom("reactions")
    fetcher.get_commit_status.side_effect = boom("status")

    enriched = await enrich_pull_request(fetcher, make_pr(), comments_enabled=True)

    assert enriched.computed_comments == []
    assert enriched.computed_reactions == []
    assert enriched.status == {"state": "unknown", "statuses": []}
    assert enriched.enrichment_status == "failed"
    for part in ("comments", "reactions", "status"):
        assert part in enriched.enrichment_error


@pytest.mark.asyncio
async def test_detail_failure_falls_back_to_bare_record(fetcher):
    pr = make_pr(repo="hello", number=3)
    fetcher.get_pull_request.side_effect = boom("pulls/3")

    enriched = await enrich_pull_request(fetcher, pr, comments_enabled=True)

    fetcher.list_comments.assert_awaited_once_with(pr.comments_url)
    fetcher.get_commit_status.assert_awaited_once_with(pr.repo_ref, "sha-hello-3")
    assert enriched.computed_comments == [{"id": 1, "body": "LGTM"}]
    assert enriched.enrichment_status == "failed"
    assert "pull request" in enriched.enrichment_error


@pytest.mark.asyncio
async def test_default_status_not_shared_between_records(fetcher):
    fetcher.get_commit_status.side_effect = boom("status")

    first = await enrich_pull_request(fetcher, make_pr(number=1))
    second = await enrich_pull_request(fetcher, make_pr(number=2))

    first.status["state"] = "changed"
    assert second.status["state"] == "unknown"
