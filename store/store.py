"""In-memory state container fed by pipeline actions.

The store is the only place the published pull request collection lives.
Aggregation replaces it wholesale; enrichment replaces single records, found
by identity. Both happen under one lock, so a refresh in the middle of
enrichment cannot interleave with a record update.
"""

import logging
import threading
from typing import Callable, Optional
from pydantic import BaseModel, Field

from models.data_models import PullRequest
from store.actions import Action, ActionType

logger = logging.getLogger(__name__)

Listener = Callable[[Action], None]


class DashboardState(BaseModel):
    """Snapshot of what the display layer renders."""

    pull_requests: list[PullRequest] = Field(default_factory=list)
    failed_repos: list[str] = Field(default_factory=list)
    loading: bool = False
    error: Optional[str] = None
    generation: int = 0


class DashboardStore:
    """Reducer-style store: `dispatch` applies actions, listeners observe them."""

    def __init__(self):
        self._state = DashboardState()
        self._lock = threading.Lock()
        self._listeners: list[Listener] = []

    def get_state(self) -> DashboardState:
        """Return a snapshot that later dispatches will not mutate."""
        with self._lock:
            return self._state.model_copy(
                update={
                    "pull_requests": list(self._state.pull_requests),
                    "failed_repos": list(self._state.failed_repos),
                }
            )

    def find(self, identity: tuple[str, str, int]) -> Optional[PullRequest]:
        with self._lock:
            index = self._index_of(identity)
            return self._state.pull_requests[index] if index is not None else None

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener called with every applied action.

        Returns:
            Function that removes the listener again
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def dispatch(self, *actions: Action) -> list[Action]:
        """Apply one or more actions atomically.

        Returns:
            The actions that were applied (stale updates are dropped)
        """
        with self._lock:
            applied = [action for action in actions if self._reduce(action)]

        for action in applied:
            for listener in list(self._listeners):
                listener(action)
        return applied

    def _index_of(self, identity: tuple[str, str, int]) -> Optional[int]:
        for index, pull_request in enumerate(self._state.pull_requests):
            if pull_request.identity == identity:
                return index
        return None

    def _reduce(self, action: Action) -> bool:
        state = self._state

        if action.type == ActionType.START_LOADING:
            state.loading = True
            state.error = None
            state.generation = action.generation
            return True

        if action.type == ActionType.REFRESH:
            state.pull_requests = []
            state.failed_repos = []
            state.error = None
            return True

        if action.type == ActionType.SET_ERROR:
            # Generation 0 marks an error raised outside any load run
            if action.generation and action.generation != state.generation:
                logger.debug(f"Dropping error from stale run {action.generation}: {action.error}")
                return False
            state.error = action.error
            state.loading = False
            return True

        if action.generation != state.generation:
            logger.debug(f"Dropping {action.type.value} from stale run {action.generation}")
            return False

        if action.type == ActionType.ADD_PULL_REQUESTS:
            state.pull_requests = list(action.pull_requests or [])
            state.loading = False
            return True

        if action.type == ActionType.SET_FAILED_REPOS:
            state.failed_repos = list(action.failed_repos or [])
            return True

        if action.type == ActionType.UPDATE_PULL_REQUEST:
            index = self._index_of(action.pull_request.identity)
            if index is None:
                logger.debug(f"Dropping update for unknown PR {action.pull_request.identity}")
                return False
            state.pull_requests[index] = action.pull_request
            return True

        logger.warning(f"Unhandled action type: {action.type}")
        return False
