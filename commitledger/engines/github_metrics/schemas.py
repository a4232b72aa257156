"""Typed views over GitHub GraphQL responses.

Each query kind has its own model tree. Every nesting level is optional so
that an error payload, a deleted pull request or a repository without a
default branch validates to a tree with a ``None`` somewhere on the path,
instead of a ``KeyError`` deep inside the aggregators.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError


class _Payload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class PageInfo(_Payload):
    has_next_page: bool = Field(alias="hasNextPage")
    end_cursor: str | None = Field(default=None, alias="endCursor")


class GitActor(_Payload):
    name: str | None = None
    email: str | None = None
    date: str | None = None


# ── pull request commits ──────────────────────────────────────────────────


class PullRequestCommit(_Payload):
    committed_date: str | None = Field(default=None, alias="committedDate")
    author: GitActor | None = None


class PullRequestCommitNode(_Payload):
    commit: PullRequestCommit


class PullRequestCommitEdge(_Payload):
    node: PullRequestCommitNode


class PullRequestCommitConnection(_Payload):
    total_count: int | None = Field(default=None, alias="totalCount")
    page_info: PageInfo = Field(alias="pageInfo")
    edges: list[PullRequestCommitEdge] = Field(default_factory=list)


class PullRequest(_Payload):
    number: int
    additions: int = 0
    deletions: int = 0
    changed_files: int = Field(default=0, alias="changedFiles")
    merged: bool = False
    mergeable: str | None = None
    head_ref_oid: str | None = Field(default=None, alias="headRefOid")
    commits: PullRequestCommitConnection | None = None


class PullRequestRepository(_Payload):
    pull_request: PullRequest | None = Field(default=None, alias="pullRequest")


class PullRequestData(_Payload):
    repository: PullRequestRepository | None = None


class PullRequestResponse(_Payload):
    data: PullRequestData | None = None
    errors: list[Any] | None = None


# ── repository history ────────────────────────────────────────────────────


class HistoryNode(_Payload):
    oid: str | None = None
    author: GitActor | None = None


class HistoryEdge(_Payload):
    node: HistoryNode


class HistoryConnection(_Payload):
    page_info: PageInfo = Field(alias="pageInfo")
    edges: list[HistoryEdge] = Field(default_factory=list)


class HistoryTarget(_Payload):
    history: HistoryConnection | None = None


class BranchRef(_Payload):
    target: HistoryTarget | None = None


class HistoryRepository(_Payload):
    default_branch_ref: BranchRef | None = Field(default=None, alias="defaultBranchRef")


class HistoryData(_Payload):
    repository: HistoryRepository | None = None


class RepositoryHistoryResponse(_Payload):
    data: HistoryData | None = None
    errors: list[Any] | None = None


# ── extraction ────────────────────────────────────────────────────────────


def pull_request_from(payload: dict[str, Any] | None) -> PullRequest | None:
    """Return the pull request object of a valid response, else None."""
    if not payload:
        return None
    try:
        response = PullRequestResponse.model_validate(payload)
    except ValidationError:
        return None
    if response.errors or response.data is None or response.data.repository is None:
        return None
    return response.data.repository.pull_request


def pull_request_commits(
    payload: dict[str, Any] | None,
) -> PullRequestCommitConnection | None:
    """Commit connection of a pull-request page, or None if the page is invalid."""
    pull_request = pull_request_from(payload)
    if pull_request is None:
        return None
    return pull_request.commits


def repository_history(payload: dict[str, Any] | None) -> HistoryConnection | None:
    """History connection of a repository page, or None if the page is invalid."""
    if not payload:
        return None
    try:
        response = RepositoryHistoryResponse.model_validate(payload)
    except ValidationError:
        return None
    if response.errors or response.data is None:
        return None
    repository = response.data.repository
    if repository is None or repository.default_branch_ref is None:
        return None
    target = repository.default_branch_ref.target
    if target is None:
        return None
    return target.history
