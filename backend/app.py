"""
FastAPI application serving the dashboard state.

The display layer polls these endpoints; the pipeline runs in the same event
loop and publishes into the app's DashboardStore.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from fetchers.github import GitHubFetcher
from models.config_models import Config
from pipeline.orchestrator import DashboardOrchestrator
from store import DashboardStore
from utils.config_loader import load_config
from utils.logger import setup_logger

logger = logging.getLogger(__name__)


def create_app(
    config: Optional[Config] = None,
    fetcher=None,
    load_on_startup: bool = True,
) -> FastAPI:
    """
    Build the API app.

    Args:
        config: Validated config (loaded from file/env when omitted)
        fetcher: Resource fetcher (built from config when omitted)
        load_on_startup: Start the first load as soon as the app starts

    Returns:
        FastAPI app; `app.state` carries `config`, `store` and, while running,
        `orchestrator`
    """
    if config is None:
        # Started through the uvicorn factory, so nothing has configured logging yet
        config = load_config()
        setup_logger(config.log_level)
    fetcher = fetcher or GitHubFetcher.from_config(config)
    store = DashboardStore()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        orchestrator = DashboardOrchestrator(config, fetcher, store.dispatch)
        app.state.orchestrator = orchestrator
        app.state.background = set()
        if load_on_startup:
            schedule(app, orchestrator.load_pull_requests())
        logger.info(f"Dashboard API started for {len(config.dashboard.users)} accounts")
        yield
        for task in list(app.state.background):
            task.cancel()
        await orchestrator.cancel_enrichment()

    app = FastAPI(
        title="Pull Request Dashboard API",
        description="Open pull requests across configured accounts, enriched with comments, reactions and status",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.config = config
    app.state.store = store

    # Vite dev server for the frontend
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["http://localhost:5173"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    from backend.routes import router
    app.include_router(router)

    return app


def schedule(app: FastAPI, coro) -> asyncio.Task:
    """Run a coroutine in the background, keeping a reference until it finishes."""
    task = asyncio.create_task(coro)
    app.state.background.add(task)
    task.add_done_callback(app.state.background.discard)
    return task
