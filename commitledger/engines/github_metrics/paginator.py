"""Cursor pagination over GitHub GraphQL connections.

A paged query runs as a small state machine::

    FETCHING ──page ok, hasNextPage──▶ FETCHING (next cursor)
    FETCHING ──page ok, last page────▶ DONE
    FETCHING ──bad page / exception──▶ FAILED (items so far kept)

Nothing raises out of :func:`paginate`; a FAILED outcome carries whatever
was accumulated before the failure.
"""

from __future__ import annotations

import enum
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, Generic, Protocol, TypeVar

import httpx
import structlog

from commitledger.engines.github_metrics.github_client import GitHubClient, RateLimitError
from commitledger.engines.github_metrics.schemas import PageInfo

log = structlog.get_logger("commitledger.engine")

DEFAULT_MAX_PAGES = 50

ItemT = TypeVar("ItemT")


class Connection(Protocol[ItemT]):
    page_info: PageInfo
    edges: list[ItemT]


class PaginationState(str, enum.Enum):
    DONE = "done"
    FAILED = "failed"


@dataclass
class PaginationOutcome(Generic[ItemT]):
    """Result of draining one paged query."""

    items: list[ItemT] = field(default_factory=list)
    page_info: PageInfo | None = None
    # Last page that validated; None when no page did.
    last_response: dict[str, Any] | None = None
    state: PaginationState = PaginationState.DONE
    error: str | None = None
    pages: int = 0

    @property
    def truncated(self) -> bool:
        return self.state is PaginationState.FAILED


async def paginate(
    client: GitHubClient,
    query: str,
    variables: dict[str, Any],
    extract: Callable[[dict[str, Any] | None], Connection[ItemT] | None],
    *,
    max_pages: int = DEFAULT_MAX_PAGES,
) -> PaginationOutcome[ItemT]:
    """Run *query* page by page until the server reports no next page.

    *extract* maps a raw response to its connection (``page_info`` +
    ``edges``) or None when the response is an error payload or lacks the
    expected nesting. The cursor from ``endCursor`` is passed back verbatim.
    """
    outcome: PaginationOutcome[ItemT] = PaginationOutcome()
    cursor: str | None = None

    while True:
        if outcome.pages >= max_pages:
            return _fail(outcome, f"page budget of {max_pages} exhausted", variables)

        try:
            response = await client.graphql(query, {**variables, "cursor": cursor})
        except (httpx.HTTPError, RateLimitError, ValueError) as exc:
            return _fail(outcome, f"{type(exc).__name__}: {exc}", variables)

        connection = extract(response)
        if connection is None:
            return _fail(outcome, _describe_invalid(response), variables)

        outcome.pages += 1
        outcome.items.extend(connection.edges)
        outcome.page_info = connection.page_info
        outcome.last_response = response

        if not connection.page_info.has_next_page:
            outcome.state = PaginationState.DONE
            return outcome

        cursor = connection.page_info.end_cursor
        if cursor is None:
            return _fail(outcome, "hasNextPage without endCursor", variables)


def _fail(
    outcome: PaginationOutcome[ItemT], error: str, variables: dict[str, Any]
) -> PaginationOutcome[ItemT]:
    log.warning(
        "paginator.failed",
        error=error,
        pages=outcome.pages,
        items=len(outcome.items),
        owner=variables.get("owner"),
        repo=variables.get("repo"),
    )
    outcome.state = PaginationState.FAILED
    outcome.error = error
    return outcome


def _describe_invalid(response: Any) -> str:
    if not isinstance(response, dict):
        return "empty response"
    errors = response.get("errors")
    if errors:
        messages = [
            e.get("message", str(e)) if isinstance(e, dict) else str(e) for e in errors
        ]
        return "GraphQL errors: " + "; ".join(messages)
    return "unexpected response shape"
