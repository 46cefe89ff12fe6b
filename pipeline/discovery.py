"""Repository discovery: expand account names into repository identifiers."""

import asyncio
import logging
from typing import Iterable, Sequence

from models.data_models import RepoRef
from pipeline.errors import ConfigurationError, DiscoveryError

logger = logging.getLogger(__name__)


async def discover_repositories(
    fetcher,
    accounts: Sequence[str],
    extra_repos: Iterable[RepoRef] = (),
) -> list[RepoRef]:
    """Discover the repositories of every account.

    One listing call is issued per account. Unlike pull request aggregation,
    discovery is all-or-nothing: the first failing account aborts the run.

    Args:
        fetcher: Object providing `list_account_repos(account)`
        accounts: Account names, in order
        extra_repos: Explicitly configured repositories appended after the
            discovered ones

    Returns:
        Flat list of RepoRef, deduplicated, in first-seen order

    Raises:
        ConfigurationError: If an account name is empty or not a string
        DiscoveryError: If any account's listing call fails
    """
    for account in accounts:
        if not isinstance(account, str) or not account.strip():
            raise ConfigurationError(f"Account names must be non-empty strings, got {account!r}")

    results = await asyncio.gather(
        *(fetcher.list_account_repos(account) for account in accounts),
        return_exceptions=True,
    )

    discovered: list[RepoRef] = []
    for account, result in zip(accounts, results):
        if isinstance(result, BaseException):
            logger.error(f"Repository discovery failed for {account}: {result}")
            raise DiscoveryError(account, result) from result
        discovered.extend(result)

    repos = list(dict.fromkeys([*discovered, *extra_repos]))
    logger.info(f"Discovered {len(repos)} repositories across {len(accounts)} accounts")
    return repos
