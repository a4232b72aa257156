"""GitHub metrics collector — pure API aggregation for one team, no DB access."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime

import structlog

from commitledger.core.github import classify_links
from commitledger.engines.github_metrics.accountant import AuthorDateAccountant
from commitledger.engines.github_metrics.github_client import GitHubClient
from commitledger.engines.github_metrics.merge_status import resolve_merge_statuses
from commitledger.engines.github_metrics.models import TeamMetrics
from commitledger.engines.github_metrics.paginator import DEFAULT_MAX_PAGES
from commitledger.engines.github_metrics.pull_requests import aggregate_pull_request
from commitledger.engines.github_metrics.repositories import aggregate_repository

log = structlog.get_logger("commitledger.engine")


async def collect_team_metrics(
    client: GitHubClient,
    links: Iterable[str],
    *,
    since: datetime,
    excluded: Iterable[str] = (),
    max_pages: int = DEFAULT_MAX_PAGES,
) -> TeamMetrics:
    """Aggregate commit activity behind a team's submitted links.

    Pull-request links win over repository links (see
    :func:`commitledger.core.github.classify_links`). Links are processed
    one at a time; a malformed link or a failed remote call is recorded in
    ``errors`` and the remaining links are still processed.
    """
    classified = classify_links(list(links))
    accountant = AuthorDateAccountant(excluded)
    metrics = TeamMetrics()

    for link in classified.pull_requests:
        try:
            result = await aggregate_pull_request(client, link, accountant, max_pages=max_pages)
        except ValueError as exc:
            log.warning("collector.link_skipped", link=link, error=str(exc))
            metrics.errors.append(str(exc))
            continue

        metrics.head_refs[result.pull_number] = result.head_ref
        if result.summary is not None:
            metrics.add_pull_request(result.summary)
        else:
            metrics.mark_pull_request_unavailable()
        if result.error:
            metrics.errors.append(f"pull request {link}: {result.error}")

    for link in classified.repositories:
        try:
            result = await aggregate_repository(
                client, link, accountant, since=since, max_pages=max_pages
            )
        except ValueError as exc:
            log.warning("collector.link_skipped", link=link, error=str(exc))
            metrics.errors.append(str(exc))
            continue
        if result.error:
            metrics.errors.append(f"repository {link}: {result.error}")

    if metrics.head_refs:
        statuses, status_errors = await resolve_merge_statuses(client, metrics.head_refs)
        metrics.check_statuses = statuses
        metrics.errors.extend(status_errors)

    metrics.authors = accountant.authors
    metrics.commits_by_author = accountant.commits_by_author
    metrics.author_totals = accountant.author_totals()
    metrics.dates = accountant.sorted_dates()
    return metrics
