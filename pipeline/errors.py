"""Error taxonomy for the fetch pipeline.

Only DiscoveryError and ConfigurationError abort a run and reach the display
as a global error. RepoFetchError ends up in the failed-repo list and
EnrichmentError on the affected pull request.
"""


class DashboardError(Exception):
    """Base class for pipeline errors."""


class ConfigurationError(DashboardError, ValueError):
    """Missing base URL or malformed account/repository identifier."""


class DiscoveryError(DashboardError):
    """Listing the repositories of an account failed."""

    def __init__(self, account: str, cause: Exception):
        self.account = account
        self.cause = cause
        super().__init__(f"Failed to list repositories for '{account}': {cause}")


class RepoFetchError(DashboardError):
    """Listing the pull requests of one repository failed."""

    def __init__(self, repo: str, cause: Exception):
        self.repo = repo
        self.cause = cause
        super().__init__(f"Failed to fetch pull requests for {repo}: {cause}")


class EnrichmentError(DashboardError):
    """One or more enrichment sub-fetches for a pull request failed."""

    def __init__(self, identity: tuple[str, str, int], failures: list[str]):
        self.identity = identity
        self.failures = failures
        owner, repo, number = identity
        super().__init__(f"Enrichment of {owner}/{repo}#{number} failed: {'; '.join(failures)}")
