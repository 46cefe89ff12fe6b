"""Data models for repositories and pull requests shown on the dashboard."""

from datetime import datetime
from typing import Any, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field, model_validator

from pipeline.errors import ConfigurationError


def default_commit_status() -> dict[str, Any]:
    """Status used when the commit status cannot be fetched."""
    return {"state": "unknown", "statuses": []}


class RepoRef(BaseModel):
    """Owner + name pair identifying a repository."""

    model_config = ConfigDict(frozen=True)

    owner: str
    name: str

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"

    @classmethod
    def parse(cls, full_name: str) -> "RepoRef":
        """Parse an 'owner/name' identifier.

        Raises:
            ConfigurationError: If the identifier is not exactly two non-empty parts
        """
        parts = full_name.strip().split("/") if isinstance(full_name, str) else []
        if len(parts) != 2 or not all(parts):
            raise ConfigurationError(f"Invalid repository identifier '{full_name}', expected 'owner/name'")
        return cls(owner=parts[0], name=parts[1])

    @classmethod
    def from_api(cls, repo: dict[str, Any]) -> "RepoRef":
        """Build from a repository object returned by the listing endpoint."""
        owner = (repo.get("owner") or {}).get("login")
        name = repo.get("name")
        if owner and name:
            return cls(owner=owner, name=name)
        return cls.parse(repo.get("full_name", ""))

    def __str__(self) -> str:
        return self.full_name


class Owner(BaseModel):
    login: str


class BaseRepository(BaseModel):
    name: str
    owner: Owner


class BaseBranch(BaseModel):
    repo: BaseRepository


class HeadCommit(BaseModel):
    sha: str


class PullRequest(BaseModel):
    """Open pull request as published to the display layer.

    Records start out bare (straight from the list endpoint) and are enriched
    exactly once with comments, reactions and commit status. Enrichment only
    touches the computed_* fields, status and the tracking fields.
    """

    number: int
    title: str = ""
    html_url: Optional[str] = None
    user: Optional[Owner] = None
    created_at: Optional[datetime] = None
    updated_at: datetime
    base: BaseBranch
    head: HeadCommit
    comments_url: Optional[str] = None

    # Enrichment (None while bare)
    computed_comments: Optional[list[dict[str, Any]]] = None
    computed_reactions: Optional[list[dict[str, Any]]] = None
    status: Optional[dict[str, Any]] = None

    # Enrichment tracking
    enrichment_status: Literal["pending", "success", "failed"] = "pending"
    enrichment_error: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def extract_comments_link(cls, data: Any) -> Any:
        """Pick the comments href out of the '_links' block of API payloads."""
        if isinstance(data, dict) and not data.get("comments_url"):
            href = ((data.get("_links") or {}).get("comments") or {}).get("href")
            if href:
                data = {**data, "comments_url": href}
        return data

    @property
    def owner(self) -> str:
        return self.base.repo.owner.login

    @property
    def repo_name(self) -> str:
        return self.base.repo.name

    @property
    def repo_ref(self) -> RepoRef:
        return RepoRef(owner=self.owner, name=self.repo_name)

    @property
    def identity(self) -> tuple[str, str, int]:
        return (self.owner, self.repo_name, self.number)

    @property
    def is_enriched(self) -> bool:
        return self.enrichment_status != "pending"


class AggregationResult(BaseModel):
    """Merged pull requests and the repositories that could not be fetched.

    Built fresh by every aggregation run.
    """

    pull_requests: list[PullRequest] = Field(default_factory=list)
    failed_repos: list[str] = Field(default_factory=list)
