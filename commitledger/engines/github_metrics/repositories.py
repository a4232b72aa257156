"""Repository aggregation: default-branch commits since a point in time."""

from __future__ import annotations

from datetime import datetime, timezone

import structlog

from commitledger.core.github import parse_submission_link
from commitledger.engines.github_metrics.accountant import AuthorDateAccountant, truncate_date
from commitledger.engines.github_metrics.github_client import GitHubClient
from commitledger.engines.github_metrics.models import RepositoryResult
from commitledger.engines.github_metrics.paginator import DEFAULT_MAX_PAGES, paginate
from commitledger.engines.github_metrics.queries import REPOSITORY_HISTORY_QUERY
from commitledger.engines.github_metrics.schemas import repository_history

log = structlog.get_logger("commitledger.engine")


def git_timestamp(value: datetime) -> str:
    """ISO-8601 ``GitTimestamp``; naive datetimes are taken as UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.isoformat()


async def aggregate_repository(
    client: GitHubClient,
    link: str,
    accountant: AuthorDateAccountant,
    *,
    since: datetime,
    max_pages: int = DEFAULT_MAX_PAGES,
) -> RepositoryResult:
    """Drain default-branch history of the repository at *link* into *accountant*.

    Only commits on or after *since* are requested. Raises ValueError if
    *link* is not a plain ``github.com/<owner>/<repo>`` URL. There is no
    summary object in repository mode; only author/date accounting.
    """
    parsed = parse_submission_link(link)
    if parsed.pull_number is not None:
        raise ValueError(f"not a repository link: {link!r}")

    outcome = await paginate(
        client,
        REPOSITORY_HISTORY_QUERY,
        {"owner": parsed.owner, "repo": parsed.repository, "since": git_timestamp(since)},
        repository_history,
        max_pages=max_pages,
    )

    recorded = 0
    for edge in outcome.items:
        author = edge.node.author
        if author is None or not author.name:
            continue
        if accountant.record(author.name, author.email or "", truncate_date(author.date)):
            recorded += 1

    log.info(
        "repository.aggregated",
        owner=parsed.owner,
        repo=parsed.repository,
        pages=outcome.pages,
        commits=len(outcome.items),
        recorded=recorded,
        state=outcome.state.value,
    )

    return RepositoryResult(
        owner=parsed.owner,
        repository=parsed.repository,
        commits_recorded=recorded,
        pages=outcome.pages,
        error=outcome.error,
    )
