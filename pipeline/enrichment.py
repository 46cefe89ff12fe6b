"""Per-pull-request enrichment with comments, reactions and commit status.

Each pull request is enriched as an isolated unit: any failed sub-fetch
degrades only the affected field of that pull request and is reported through
`enrichment_status` / `enrichment_error` instead of being raised.
"""

import asyncio
import logging
from typing import Any

from models.data_models import PullRequest, default_commit_status
from pipeline.errors import EnrichmentError

logger = logging.getLogger(__name__)


async def _skipped() -> list[dict[str, Any]]:
    return []


async def enrich_pull_request(
    fetcher,
    pull_request: PullRequest,
    comments_enabled: bool = False,
    reactions_enabled: bool = True,
) -> PullRequest:
    """Fetch comments, reactions and commit status for one pull request.

    The single pull request resource is fetched first for its comments link
    and head sha (the bare record's values are used if that call fails), then
    the three sub-resources are fetched concurrently. A record is only
    produced once all three have finished.

    Args:
        fetcher: GitHubFetcher (or anything with the same coroutine methods)
        pull_request: Bare pull request from aggregation
        comments_enabled: Fetch comments; otherwise no call is made and the
            comments are empty
        reactions_enabled: Fetch reactions; otherwise no call is made and the
            reactions are empty

    Returns:
        A copy of `pull_request` with `computed_comments`, `computed_reactions`
        and `status` all set. Identity fields are never changed.
    """
    repo = pull_request.repo_ref
    failures: list[str] = []

    comments_url = pull_request.comments_url
    sha = pull_request.head.sha
    try:
        detail = await fetcher.get_pull_request(repo, pull_request.number)
        comments_url = ((detail.get("_links") or {}).get("comments") or {}).get("href") or comments_url
        sha = (detail.get("head") or {}).get("sha") or sha
    except Exception as e:
        failures.append(f"pull request: {e}")

    if comments_enabled and comments_url:
        comments_call = fetcher.list_comments(comments_url)
    else:
        comments_call = _skipped()
    if reactions_enabled:
        reactions_call = fetcher.list_reactions(repo, pull_request.number)
    else:
        reactions_call = _skipped()

    comments, reactions, status = await asyncio.gather(
        comments_call,
        reactions_call,
        fetcher.get_commit_status(repo, sha),
        return_exceptions=True,
    )

    if isinstance(comments, BaseException):
        failures.append(f"comments: {comments}")
        comments = []
    if isinstance(reactions, BaseException):
        failures.append(f"reactions: {reactions}")
        reactions = []
    if isinstance(status, BaseException):
        failures.append(f"status: {status}")
        status = default_commit_status()

    enrichment_error = None
    if failures:
        error = EnrichmentError(pull_request.identity, failures)
        logger.warning(str(error))
        enrichment_error = str(error)
    else:
        logger.debug(
            f"Enriched {repo}#{pull_request.number}: {len(comments)} comments, "
            f"{len(reactions)} reactions, status {status.get('state')}"
        )

    return pull_request.model_copy(
        update={
            "computed_comments": comments,
            "computed_reactions": reactions,
            "status": status,
            "enrichment_status": "failed" if failures else "success",
            "enrichment_error": enrichment_error,
        }
    )
