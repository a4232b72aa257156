"""Pull-request aggregation: all commits of one PR plus its summary fields."""

from __future__ import annotations

import structlog

from commitledger.core.github import parse_submission_link
from commitledger.engines.github_metrics.accountant import AuthorDateAccountant, truncate_date
from commitledger.engines.github_metrics.github_client import GitHubClient
from commitledger.engines.github_metrics.models import (
    CommitRecord,
    HeadRef,
    PullRequestResult,
    PullRequestSummary,
)
from commitledger.engines.github_metrics.paginator import DEFAULT_MAX_PAGES, paginate
from commitledger.engines.github_metrics.queries import PULL_REQUEST_COMMITS_QUERY
from commitledger.engines.github_metrics.schemas import (
    PullRequestCommitEdge,
    pull_request_commits,
    pull_request_from,
)

log = structlog.get_logger("commitledger.engine")


async def aggregate_pull_request(
    client: GitHubClient,
    link: str,
    accountant: AuthorDateAccountant,
    *,
    max_pages: int = DEFAULT_MAX_PAGES,
) -> PullRequestResult:
    """Drain the commit history of the pull request at *link* into *accountant*.

    Raises ValueError if *link* is not a pull-request URL. Remote failures
    do not raise: commits gathered before the failure are still recorded and
    the error is reported on the result.
    """
    parsed = parse_submission_link(link)
    if parsed.pull_number is None:
        raise ValueError(f"not a pull request link: {link!r}")

    outcome = await paginate(
        client,
        PULL_REQUEST_COMMITS_QUERY,
        {"owner": parsed.owner, "repo": parsed.repository, "number": parsed.pull_number},
        pull_request_commits,
        max_pages=max_pages,
    )

    pull_request = pull_request_from(outcome.last_response)
    summary = None
    if pull_request is not None:
        total = None
        if pull_request.commits is not None:
            total = pull_request.commits.total_count
        summary = PullRequestSummary(
            number=pull_request.number,
            additions=pull_request.additions,
            deletions=pull_request.deletions,
            changed_files=pull_request.changed_files,
            total_commits=total if total is not None else len(outcome.items),
            merged=pull_request.merged,
            mergeable=pull_request.mergeable,
            head_commit_sha=pull_request.head_ref_oid,
        )

    recorded = 0
    for edge in outcome.items:
        record = _commit_record(edge)
        if record is not None and accountant.record(
            record.author_name, record.author_email, record.committed_date
        ):
            recorded += 1

    log.info(
        "pull_request.aggregated",
        owner=parsed.owner,
        repo=parsed.repository,
        number=parsed.pull_number,
        pages=outcome.pages,
        commits=len(outcome.items),
        recorded=recorded,
        state=outcome.state.value,
    )

    return PullRequestResult(
        pull_number=parsed.pull_number,
        head_ref=HeadRef(
            owner=parsed.owner,
            repository=parsed.repository,
            head_commit_sha=summary.head_commit_sha if summary else None,
        ),
        summary=summary,
        commits_recorded=recorded,
        error=outcome.error,
    )


def _commit_record(edge: PullRequestCommitEdge) -> CommitRecord | None:
    commit = edge.node.commit
    author = commit.author
    if author is None or not author.name:
        log.debug("pull_request.commit_without_author")
        return None
    return CommitRecord(
        author_name=author.name,
        author_email=author.email or "",
        committed_date=truncate_date(commit.committed_date or author.date),
    )
