"""Actions published by the pipeline and consumed by DashboardStore."""

from enum import Enum
from typing import Optional
from pydantic import BaseModel

from models.data_models import PullRequest


class ActionType(str, Enum):
    ADD_PULL_REQUESTS = "ADD_PULL_REQUESTS"
    UPDATE_PULL_REQUEST = "UPDATE_PULL_REQUEST"
    SET_FAILED_REPOS = "SET_FAILED_REPOS"
    REFRESH = "REFRESH"
    START_LOADING = "START_LOADING"
    SET_ERROR = "SET_ERROR"


class Action(BaseModel):
    """A state change event.

    `generation` identifies the load run that produced the action, so updates
    from a run that has since been replaced can be recognised and dropped.
    """

    type: ActionType
    generation: int = 0
    pull_requests: Optional[list[PullRequest]] = None
    pull_request: Optional[PullRequest] = None
    failed_repos: Optional[list[str]] = None
    error: Optional[str] = None


def start_loading(generation: int) -> Action:
    return Action(type=ActionType.START_LOADING, generation=generation)


def refresh() -> Action:
    return Action(type=ActionType.REFRESH)


def set_error(error, generation: int = 0) -> Action:
    return Action(type=ActionType.SET_ERROR, generation=generation, error=str(error))


def add_pull_requests(pull_requests: list[PullRequest], generation: int) -> Action:
    return Action(type=ActionType.ADD_PULL_REQUESTS, generation=generation, pull_requests=list(pull_requests))


def set_failed_repos(failed_repos: list[str], generation: int) -> Action:
    return Action(type=ActionType.SET_FAILED_REPOS, generation=generation, failed_repos=list(failed_repos))


def update_pull_request(pull_request: PullRequest, generation: int) -> Action:
    return Action(type=ActionType.UPDATE_PULL_REQUEST, generation=generation, pull_request=pull_request)
