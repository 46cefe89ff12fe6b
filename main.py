#!/usr/bin/env python3
"""
Pull Request Dashboard - Main CLI entrypoint

Aggregates open pull requests across the configured accounts, enriches them
with comments, reactions and commit status, and either prints them or serves
them to the frontend.

Usage:
    python main.py load                        # accounts from config/config.json
    python main.py load octocat torvalds       # override the account list
    python main.py load --no-wait              # skip waiting for enrichment
    python main.py serve --port 8080           # JSON API for the frontend
"""

import argparse
import asyncio
import logging
import sys
from typing import Optional, Sequence

from fetchers.github import GitHubFetcher
from models.config_models import Config
from models.data_models import PullRequest
from pipeline.orchestrator import DashboardOrchestrator
from store import DashboardStore
from utils.config_loader import load_config
from utils.logger import setup_logger

logger = logging.getLogger(__name__)


def format_pull_request(pr: PullRequest) -> str:
    """
    One summary line for a pull request.

    Examples:
        "octocat/hello#12  Fix typo  [success] 3 comments, 2 reactions"
        "octocat/hello#13  WIP  [pending]"
    """
    line = f"{pr.repo_ref}#{pr.number}  {pr.title}"
    if not pr.is_enriched:
        return f"{line}  [pending]"

    state = (pr.status or {}).get("state", "unknown")
    line = (
        f"{line}  [{state}] {len(pr.computed_comments or [])} comments, "
        f"{len(pr.computed_reactions or [])} reactions"
    )
    if pr.enrichment_status == "failed":
        line += "  (enrichment failed)"
    return line


async def load_pull_requests(
    config: Config,
    accounts: Optional[Sequence[str]] = None,
    wait: bool = True,
    fetcher=None,
    store: Optional[DashboardStore] = None,
) -> bool:
    """
    Run one load and log the resulting dashboard.

    Args:
        config: Validated config
        accounts: Accounts to discover (defaults to the configured users)
        wait: Wait for enrichment to finish before printing
        fetcher: Fetcher instance (optional, built from config if not provided)
        store: Store to publish into (optional, a fresh one if not provided)

    Returns:
        bool: True if the load succeeded, False on discovery/config errors
    """
    fetcher = fetcher or GitHubFetcher.from_config(config)
    store = store or DashboardStore()
    orchestrator = DashboardOrchestrator(config, fetcher, store.dispatch)

    logger.info("=" * 80)
    logger.info(f"LOADING PULL REQUESTS: {', '.join(accounts or config.dashboard.users) or '(no accounts)'}")
    logger.info("=" * 80)

    result = await orchestrator.load_pull_requests(accounts)
    if result is None:
        logger.error(f"✗ Load failed: {store.get_state().error}")
        return False

    if wait:
        logger.info(f"Waiting for enrichment of {len(result.pull_requests)} PRs...")
        await orchestrator.wait_for_enrichment()
    else:
        await orchestrator.cancel_enrichment()

    state = store.get_state()
    logger.info("-" * 80)
    for pr in state.pull_requests:
        logger.info(format_pull_request(pr))
    logger.info("-" * 80)

    logger.info(f"Open PRs: {len(state.pull_requests)}")
    if state.failed_repos:
        logger.warning(f"⚠ Failed repositories ({len(state.failed_repos)}): {', '.join(state.failed_repos)}")

    failed = [pr for pr in state.pull_requests if pr.enrichment_status == "failed"]
    if failed:
        logger.warning(f"⚠ {len(failed)} PRs could not be fully enriched")

    return True


def main():
    """Main CLI entrypoint."""
    parser = argparse.ArgumentParser(
        description="Pull Request Dashboard - open PRs across accounts",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Load PRs for the accounts in config/config.json
  python main.py load

  # Load PRs for specific accounts
  python main.py load octocat github

  # Serve the JSON API on port 8080
  python main.py serve --port 8080
        """
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    load_parser = subparsers.add_parser(
        "load",
        help="Load, enrich and print open PRs"
    )
    load_parser.add_argument(
        "accounts",
        nargs="*",
        help="Account names to discover repositories for (default: configured users)"
    )
    load_parser.add_argument(
        "--no-wait",
        action="store_true",
        help="Print the aggregated PRs without waiting for enrichment"
    )

    serve_parser = subparsers.add_parser(
        "serve",
        help="Start the dashboard API"
    )
    serve_parser.add_argument(
        "--port",
        type=int,
        default=8000,
        help="Port to run the API server on (default: 8000)"
    )
    serve_parser.add_argument(
        "--host",
        type=str,
        default="127.0.0.1",
        help="Host to bind the server to (default: 127.0.0.1)"
    )
    serve_parser.add_argument(
        "--reload",
        action="store_true",
        help="Enable auto-reload (development)"
    )

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    config = load_config()
    setup_logger(config.log_level)

    if args.command == "load":
        success = asyncio.run(
            load_pull_requests(config, accounts=args.accounts or None, wait=not args.no_wait)
        )
        sys.exit(0 if success else 1)

    elif args.command == "serve":
        logger.info("=" * 80)
        logger.info("Starting Pull Request Dashboard API")
        logger.info("=" * 80)
        logger.info(f"API will be available at: http://{args.host}:{args.port}")
        logger.info(f"API docs available at: http://{args.host}:{args.port}/docs")
        logger.info("Press Ctrl+C to stop the server")
        logger.info("=" * 80)

        import uvicorn
        uvicorn.run(
            "backend.app:create_app",
            factory=True,
            host=args.host,
            port=args.port,
            reload=args.reload,
            log_level=config.log_level.lower()
        )
        sys.exit(0)


if __name__ == "__main__":
    main()
