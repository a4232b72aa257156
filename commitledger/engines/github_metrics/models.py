"""Data models for the GitHub metrics engine — no DB dependencies."""

from __future__ import annotations

import uuid
from dataclasses import asdict, dataclass, field
from typing import Union

NOT_AVAILABLE = "Not Available"
NOT_A_PULL_REQUEST = "Not A Pull Request"
# Key used in ``merge_status`` when a pull request could not be read.
INVALID_PULL_NUMBER = -1
MERGED = "MERGED"

# A summed total, or NOT_AVAILABLE once any contributing pull request failed.
Total = Union[int, str]


@dataclass(frozen=True)
class CommitRecord:
    """One commit as seen by the accountant."""

    author_name: str
    author_email: str
    committed_date: str  # YYYY-MM-DD


@dataclass
class PullRequestSummary:
    """Headline numbers of one pull request."""

    number: int
    additions: int
    deletions: int
    changed_files: int
    total_commits: int
    merged: bool
    mergeable: str | None
    head_commit_sha: str | None

    @property
    def merge_status(self) -> str:
        if self.merged:
            return MERGED
        return self.mergeable or NOT_AVAILABLE


@dataclass(frozen=True)
class HeadRef:
    """Anchor for a status lookup, keyed by pull number in ``TeamMetrics.head_refs``.

    ``head_commit_sha`` is None when the pull request could not be read.
    """

    owner: str
    repository: str
    head_commit_sha: str | None


@dataclass
class TeamMetrics:
    """Everything one team run produced, ready for display and storage."""

    authors: dict[str, str] = field(default_factory=dict)
    commits_by_author: dict[str, dict[str, int]] = field(default_factory=dict)
    dates: list[str] = field(default_factory=list)
    author_totals: dict[str, int] = field(default_factory=dict)
    total_additions: Total = 0
    total_deletions: Total = 0
    total_files_changed: Total = 0
    total_commits: int = 0
    merge_status: dict[int, str] = field(default_factory=dict)
    head_refs: dict[int, HeadRef] = field(default_factory=dict)
    check_statuses: dict[int, str] = field(default_factory=dict)
    pull_requests: list[PullRequestSummary] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    def add_pull_request(self, summary: PullRequestSummary) -> None:
        """Fold one pull request into the team totals.

        Line and file totals stay NOT_AVAILABLE once set.
        """
        self.pull_requests.append(summary)
        self.total_commits += summary.total_commits
        self.merge_status[summary.number] = summary.merge_status
        if isinstance(self.total_additions, int):
            self.total_additions += summary.additions
        if isinstance(self.total_deletions, int):
            self.total_deletions += summary.deletions
        if isinstance(self.total_files_changed, int):
            self.total_files_changed += summary.changed_files

    def mark_pull_request_unavailable(self) -> None:
        self.total_additions = NOT_AVAILABLE
        self.total_deletions = NOT_AVAILABLE
        self.total_files_changed = NOT_AVAILABLE
        self.merge_status[INVALID_PULL_NUMBER] = NOT_A_PULL_REQUEST

    def to_dict(self) -> dict:
        """JSON-compatible rendering (dict keys become strings)."""
        return {
            "authors": dict(self.authors),
            "commits_by_author": {k: dict(v) for k, v in self.commits_by_author.items()},
            "dates": list(self.dates),
            "author_totals": dict(self.author_totals),
            "total_additions": self.total_additions,
            "total_deletions": self.total_deletions,
            "total_files_changed": self.total_files_changed,
            "total_commits": self.total_commits,
            "merge_status": {str(k): v for k, v in self.merge_status.items()},
            "check_statuses": {str(k): v for k, v in self.check_statuses.items()},
            "pull_requests": [asdict(pr) for pr in self.pull_requests],
            "errors": list(self.errors),
        }


@dataclass
class TeamRunResult:
    """Summary of a single TeamMetricsRunner.run()."""

    team_id: uuid.UUID
    metrics: TeamMetrics | None = None
    stored: int = 0
    errors: list[str] = field(default_factory=list)


@dataclass
class PullRequestResult:
    """Outcome of aggregating one pull-request link.

    ``summary`` is None when no page ever contained a pull request object.
    """

    pull_number: int
    head_ref: HeadRef
    summary: PullRequestSummary | None = None
    commits_recorded: int = 0
    error: str | None = None


@dataclass
class RepositoryResult:
    """Outcome of aggregating one repository link."""

    owner: str
    repository: str
    commits_recorded: int = 0
    pages: int = 0
    error: str | None = None
