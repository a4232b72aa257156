"""GitHub metrics engine — commit aggregation without DB access, plus its runner."""

from commitledger.engines.github_metrics.accountant import AuthorDateAccountant, truncate_date
from commitledger.engines.github_metrics.collector import collect_team_metrics
from commitledger.engines.github_metrics.github_client import GitHubClient, RateLimitError
from commitledger.engines.github_metrics.models import (
    NOT_A_PULL_REQUEST,
    NOT_AVAILABLE,
    CommitRecord,
    HeadRef,
    PullRequestSummary,
    TeamMetrics,
    TeamRunResult,
)
from commitledger.engines.github_metrics.paginator import (
    PaginationOutcome,
    PaginationState,
    paginate,
)
from commitledger.engines.github_metrics.runner import TeamMetricsRunner

__all__ = [
    "NOT_AVAILABLE",
    "NOT_A_PULL_REQUEST",
    "AuthorDateAccountant",
    "CommitRecord",
    "GitHubClient",
    "HeadRef",
    "PaginationOutcome",
    "PaginationState",
    "PullRequestSummary",
    "RateLimitError",
    "TeamMetrics",
    "TeamMetricsRunner",
    "TeamRunResult",
    "collect_team_metrics",
    "paginate",
    "truncate_date",
]
