"""
API routes for the dashboard.

Read endpoints serve snapshots of the DashboardStore; refresh reruns the
pipeline.
"""

import logging
from typing import List, Optional
from fastapi import APIRouter, Query, Request, Response
from pydantic import BaseModel

from models.data_models import PullRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["pull-requests"])


class PullRequestListResponse(BaseModel):
    """Response model for the pull request list endpoint."""
    pull_requests: List[PullRequest]
    total: int
    loading: bool


class FailedReposResponse(BaseModel):
    failed_repos: List[str]


class StatusResponse(BaseModel):
    """Loading state of the dashboard."""
    loading: bool
    error: Optional[str] = None
    generation: int
    total: int
    enriched: int
    failed_repos: int
    pending_enrichments: int


class RefreshResponse(BaseModel):
    status: str
    generation: int
    total: Optional[int] = None
    failed_repos: Optional[List[str]] = None


@router.get("/pull-requests", response_model=PullRequestListResponse)
def list_pull_requests(
    request: Request,
    repo: Optional[str] = Query(None, description="Only PRs of this repository ('owner/name')"),
):
    """
    List published pull requests in dashboard order.

    Records that have not been enriched yet have `enrichment_status="pending"`
    and null comments/reactions/status.
    """
    state = request.app.state.store.get_state()
    pull_requests = state.pull_requests
    if repo:
        pull_requests = [pr for pr in pull_requests if pr.repo_ref.full_name == repo]
    return PullRequestListResponse(
        pull_requests=pull_requests,
        total=len(pull_requests),
        loading=state.loading,
    )


@router.get("/failed-repos", response_model=FailedReposResponse)
def list_failed_repos(request: Request):
    """Repositories whose pull requests could not be fetched in the last run."""
    return FailedReposResponse(failed_repos=request.app.state.store.get_state().failed_repos)


@router.get("/status", response_model=StatusResponse)
def get_status(request: Request):
    """Loading flag, global error and enrichment progress."""
    state = request.app.state.store.get_state()
    orchestrator = getattr(request.app.state, "orchestrator", None)
    return StatusResponse(
        loading=state.loading,
        error=state.error,
        generation=state.generation,
        total=len(state.pull_requests),
        enriched=sum(1 for pr in state.pull_requests if pr.is_enriched),
        failed_repos=len(state.failed_repos),
        pending_enrichments=orchestrator.pending_enrichments if orchestrator else 0,
    )


@router.post("/refresh", response_model=RefreshResponse, status_code=202)
async def refresh(
    request: Request,
    response: Response,
    wait: bool = Query(False, description="Block until the load and all enrichment have finished"),
):
    """
    Discard the current state and run the whole pipeline again.

    Without `wait` the refresh runs in the background and 202 is returned
    immediately. With `wait=true` the response (200) is sent once every pull
    request has been enriched.
    """
    from backend.app import schedule

    orchestrator = request.app.state.orchestrator

    if not wait:
        schedule(request.app, orchestrator.refresh())
        logger.info("Refresh scheduled")
        return RefreshResponse(status="refreshing", generation=orchestrator.generation + 1)

    result = await orchestrator.refresh()
    await orchestrator.wait_for_enrichment()
    response.status_code = 200

    if result is None:
        return RefreshResponse(status="error", generation=orchestrator.generation)
    return RefreshResponse(
        status="done",
        generation=orchestrator.generation,
        total=len(result.pull_requests),
        failed_repos=result.failed_repos,
    )
