"""Orchestration entry point: discovery, aggregation, then enrichment.

The merged collection is published as soon as aggregation finishes. Enrichment
runs afterwards as one task per pull request and each completed task publishes
its own UPDATE_PULL_REQUEST action, in completion order.
"""

import asyncio
import logging
from typing import Any, Callable, Optional, Sequence

from models.config_models import Config
from models.data_models import AggregationResult, PullRequest, default_commit_status
from pipeline.aggregator import aggregate_pull_requests
from pipeline.discovery import discover_repositories
from pipeline.enrichment import enrich_pull_request
from pipeline.errors import ConfigurationError, DiscoveryError
from store import actions

logger = logging.getLogger(__name__)

Dispatch = Callable[..., Any]


class DashboardOrchestrator:
    """Run the fetch pipeline and publish its results through `dispatch`."""

    def __init__(self, config: Config, fetcher, dispatch: Dispatch):
        """
        Args:
            config: Validated application config
            fetcher: GitHubFetcher (or a stand-in with the same coroutines)
            dispatch: Callable accepting one or more actions; actions passed
                in a single call must be applied atomically
        """
        self.config = config
        self.fetcher = fetcher
        self.dispatch = dispatch
        self._generation = 0
        self._tasks: set[asyncio.Task] = set()
        self._semaphore = asyncio.Semaphore(config.dashboard.max_concurrency)

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def pending_enrichments(self) -> int:
        return len(self._tasks)

    async def load_pull_requests(self, accounts: Optional[Sequence[str]] = None) -> Optional[AggregationResult]:
        """Load, publish and schedule enrichment of all open pull requests.

        Does not wait for enrichment; see `wait_for_enrichment`.

        Args:
            accounts: Accounts to discover; defaults to the configured users

        Returns:
            The aggregation result, or None when discovery or configuration
            failed (a SET_ERROR action has been published in that case)
        """
        self._generation += 1
        generation = self._generation
        self.dispatch(actions.start_loading(generation))

        accounts = list(accounts) if accounts else list(self.config.dashboard.users)
        dashboard = self.config.dashboard

        try:
            repos = await discover_repositories(self.fetcher, accounts, dashboard.repo_refs)
        except (DiscoveryError, ConfigurationError) as e:
            if generation != self._generation:
                logger.info(f"Run {generation} was superseded by run {self._generation}, dropping error: {e}")
                return None
            logger.error(f"Loading pull requests failed: {e}")
            self.dispatch(actions.set_error(e, generation))
            return None

        result = await aggregate_pull_requests(self.fetcher, repos, group_by_repo=dashboard.group_by_repo)

        if generation != self._generation:
            logger.info(f"Run {generation} was superseded by run {self._generation}, not publishing")
            return result

        self.dispatch(
            actions.add_pull_requests(result.pull_requests, generation),
            actions.set_failed_repos(result.failed_repos, generation),
        )

        for pull_request in result.pull_requests:
            task = asyncio.create_task(self._enrich_and_publish(pull_request, generation))
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)

        logger.info(f"Scheduled enrichment for {len(result.pull_requests)} PRs")
        return result

    async def refresh(self) -> Optional[AggregationResult]:
        """Discard published state and run the whole load again."""
        self.dispatch(actions.refresh())
        return await self.load_pull_requests()

    async def wait_for_enrichment(self) -> None:
        """Wait until every scheduled enrichment task has published."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def cancel_enrichment(self) -> None:
        """Cancel outstanding enrichment tasks (used on shutdown)."""
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)

    async def _enrich_and_publish(self, pull_request: PullRequest, generation: int) -> None:
        dashboard = self.config.dashboard
        try:
            async with self._semaphore:
                enriched = await enrich_pull_request(
                    self.fetcher,
                    pull_request,
                    comments_enabled=dashboard.comments_enabled,
                    reactions_enabled=dashboard.reactions_enabled,
                )
        except Exception as e:
            logger.error(f"Unexpected error enriching {pull_request.identity}: {e}", exc_info=True)
            enriched = pull_request.model_copy(
                update={
                    "computed_comments": [],
                    "computed_reactions": [],
                    "status": default_commit_status(),
                    "enrichment_status": "failed",
                    "enrichment_error": str(e),
                }
            )

        self.dispatch(actions.update_pull_request(enriched, generation))
