"""Combined commit-status lookup for pull-request head commits."""

from __future__ import annotations

import httpx
import structlog

from commitledger.engines.github_metrics.github_client import GitHubClient, RateLimitError
from commitledger.engines.github_metrics.models import HeadRef

log = structlog.get_logger("commitledger.engine")


async def resolve_merge_statuses(
    client: GitHubClient,
    head_refs: dict[int, HeadRef],
) -> tuple[dict[int, str], list[str]]:
    """Look up the combined status of every head commit.

    Returns ``(statuses, errors)``: *statuses* maps pull number to the
    status ``state`` string. A failed lookup leaves its pull number out of
    *statuses* and adds one message to *errors*; entries without a head
    commit are skipped.
    """
    statuses: dict[int, str] = {}
    errors: list[str] = []
    for pull_number, ref in head_refs.items():
        if not ref.head_commit_sha:
            continue
        try:
            payload = await client.commit_status(ref.owner, ref.repository, ref.head_commit_sha)
        except (httpx.HTTPError, RateLimitError, ValueError) as exc:
            msg = f"status lookup failed for {ref.owner}/{ref.repository}#{pull_number}: {exc}"
            log.warning(
                "merge_status.failed",
                pull_number=pull_number,
                repo=f"{ref.owner}/{ref.repository}",
                error=str(exc),
            )
            errors.append(msg)
            continue
        state = payload.get("state") if isinstance(payload, dict) else None
        if state:
            statuses[pull_number] = state
    return statuses, errors
