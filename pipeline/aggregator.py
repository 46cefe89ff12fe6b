"""Pull request aggregation across repositories.

Every repository is fetched concurrently and in isolation: a failing repository
is recorded in `failed_repos` and never aborts the others. The merged result is
only returned once every fetch has finished.
"""

import asyncio
import logging
from functools import cmp_to_key
from typing import Sequence

from models.data_models import AggregationResult, PullRequest, RepoRef
from pipeline.errors import RepoFetchError

logger = logging.getLogger(__name__)


def compare_grouped(a: PullRequest, b: PullRequest) -> int:
    """Order by repository name ascending, then most recently updated first."""
    if a.repo_name != b.repo_name:
        return -1 if a.repo_name < b.repo_name else 1
    if a.updated_at != b.updated_at:
        return -1 if a.updated_at > b.updated_at else 1
    return 0


def sort_pull_requests(pull_requests: Sequence[PullRequest], group_by_repo: bool = False) -> list[PullRequest]:
    """Return a new list in dashboard order. Ties keep their input order."""
    if group_by_repo:
        return sorted(pull_requests, key=cmp_to_key(compare_grouped))
    return sorted(pull_requests, key=lambda pr: pr.updated_at, reverse=True)


async def _fetch_repo(fetcher, repo: RepoRef) -> list[PullRequest]:
    try:
        return await fetcher.list_pull_requests(repo)
    except Exception as e:
        raise RepoFetchError(repo.full_name, e) from e


async def aggregate_pull_requests(
    fetcher,
    repos: Sequence[RepoRef],
    group_by_repo: bool = False,
) -> AggregationResult:
    """Fetch and merge open pull requests for all repositories.

    Args:
        fetcher: Object providing `list_pull_requests(repo)`
        repos: Repositories to fetch (may be empty)
        group_by_repo: Group by repository name instead of pure recency

    Returns:
        A fresh AggregationResult. `failed_repos` holds 'owner/name' of every
        repository whose listing failed, in input order.
    """
    results = await asyncio.gather(
        *(_fetch_repo(fetcher, repo) for repo in repos),
        return_exceptions=True,
    )

    merged: list[PullRequest] = []
    failed_repos: list[str] = []
    seen: set[tuple[str, str, int]] = set()

    for repo, result in zip(repos, results):
        if isinstance(result, BaseException):
            logger.warning(str(result))
            failed_repos.append(repo.full_name)
            continue
        for pull_request in result:
            if pull_request.identity in seen:
                logger.debug(f"Dropping duplicate PR {repo}#{pull_request.number}")
                continue
            seen.add(pull_request.identity)
            merged.append(pull_request)

    logger.info(
        f"Aggregated {len(merged)} PRs from {len(repos) - len(failed_repos)}/{len(repos)} repositories"
    )

    return AggregationResult(
        pull_requests=sort_pull_requests(merged, group_by_repo=group_by_repo),
        failed_repos=failed_repos,
    )
