"""Data models for the pull request dashboard."""

from models.config_models import Config, DashboardConfig, GitHubConfig
from models.data_models import AggregationResult, PullRequest, RepoRef

__all__ = [
    "Config",
    "DashboardConfig",
    "GitHubConfig",
    "AggregationResult",
    "PullRequest",
    "RepoRef",
]
