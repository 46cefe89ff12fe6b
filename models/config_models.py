"""Configuration models for validation using Pydantic."""

from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

from models.data_models import RepoRef


class GitHubConfig(BaseModel):
    """Connection settings for the code-hosting API."""

    model_config = ConfigDict(populate_by_name=True)

    api_base_url: str = Field(..., alias="apiBaseUrl", description="API root, e.g. https://api.github.com")
    token: Optional[str] = Field(None, description="Personal access token (sent as 'Authorization: token ...')")
    request_timeout: float = Field(default=10.0, gt=0, alias="requestTimeout", description="Per-request timeout in seconds")

    @field_validator("api_base_url")
    @classmethod
    def validate_api_base_url(cls, v: str) -> str:
        """Validate base URL format and strip the trailing slash."""
        if not v:
            raise ValueError("API base URL must be set (apiBaseUrl or GITHUB_API_URL)")
        if not v.startswith(("https://", "http://")):
            raise ValueError("API base URL must start with http:// or https://")
        return v.rstrip("/")

    @field_validator("token")
    @classmethod
    def empty_token_is_none(cls, v: Optional[str]) -> Optional[str]:
        """Treat an empty token as no token."""
        return v or None


class DashboardConfig(BaseModel):
    """Which accounts to watch and how to present their pull requests."""

    model_config = ConfigDict(populate_by_name=True)

    users: list[str] = Field(default_factory=list, description="Accounts whose repositories are discovered")
    repos: list[str] = Field(default_factory=list, description="Extra 'owner/name' repositories to include")

    # Comments are only fetched when switched on; reactions unless switched off
    comments: Optional[bool] = None
    reactions: Optional[bool] = None
    group_by_repo: bool = Field(default=False, alias="groupByRepo")
    max_concurrency: int = Field(default=10, ge=1, alias="maxConcurrency", description="Concurrent enrichment tasks")

    @field_validator("users")
    @classmethod
    def validate_users(cls, v: list[str]) -> list[str]:
        """Ensure every account name is a non-empty string."""
        cleaned = [user.strip() for user in v]
        if any(not user for user in cleaned):
            raise ValueError("Account names must be non-empty strings")
        return cleaned

    @field_validator("repos")
    @classmethod
    def validate_repos(cls, v: list[str]) -> list[str]:
        """Ensure every repository is in 'owner/name' form, sorted."""
        for repo in v:
            RepoRef.parse(repo)
        return sorted(v)

    @property
    def comments_enabled(self) -> bool:
        # Only an explicit true turns comments on; "comments": false skips them
        return self.comments is True

    @property
    def reactions_enabled(self) -> bool:
        return self.reactions is not False

    @property
    def repo_refs(self) -> list[RepoRef]:
        return [RepoRef.parse(repo) for repo in self.repos]


class Config(BaseModel):
    """Application configuration."""

    github: GitHubConfig
    dashboard: DashboardConfig = Field(default_factory=DashboardConfig)
    log_level: str = Field(default="INFO", description="Logging level")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is one of the standard levels."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Log level must be one of: {', '.join(valid_levels)}")
        return v_upper
