"""State container for published dashboard data."""

from store.actions import Action, ActionType
from store.store import DashboardState, DashboardStore

__all__ = [
    "Action",
    "ActionType",
    "DashboardState",
    "DashboardStore",
]
