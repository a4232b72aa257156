"""TeamMetricsRunner — orchestrates the collector + Service-layer DB writes."""

from __future__ import annotations

import asyncio
import uuid
from collections.abc import Iterable

import structlog
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from commitledger.engines.github_metrics.collector import collect_team_metrics
from commitledger.engines.github_metrics.github_client import GitHubClient
from commitledger.engines.github_metrics.models import TeamRunResult
from commitledger.engines.github_metrics.paginator import DEFAULT_MAX_PAGES
from commitledger.services import MissingCredentialError, NotFoundError
from commitledger.services.metric_service import MetricService
from commitledger.services.team_service import TeamService

log = structlog.get_logger("commitledger.engine")

_MAX_CONCURRENCY = 5


def require_credential(client: GitHubClient) -> None:
    """Raise :class:`MissingCredentialError` unless *client* carries a token."""
    if not client.has_token:
        raise MissingCredentialError("a GitHub access token is required")


class TeamMetricsRunner:
    """Orchestration layer: pure collector → Service-layer DB writes."""

    def __init__(
        self,
        team_service: TeamService,
        metric_service: MetricService,
        *,
        excluded: Iterable[str] = (),
        max_pages: int = DEFAULT_MAX_PAGES,
        max_concurrency: int = _MAX_CONCURRENCY,
    ) -> None:
        self._team_service = team_service
        self._metric_service = metric_service
        self._excluded = frozenset(excluded)
        self._max_pages = max_pages
        self._max_concurrency = max_concurrency

    async def run(
        self,
        session: AsyncSession,
        team_id: uuid.UUID,
        client: GitHubClient,
    ) -> TeamRunResult:
        """Collect metrics for a single team and persist them.

        1. Read team and assignment via TeamService
        2. Call collector ``collect_team_metrics()``
        3. Upsert one metric per github identity via MetricService

        Raises :class:`MissingCredentialError` before any remote call if the
        client has no token.
        """
        require_credential(client)
        result = TeamRunResult(team_id=team_id)

        team = await self._team_service.get_team(session, team_id)
        if team is None:
            result.errors.append(f"team {team_id} not found")
            return result

        try:
            assignment = await self._team_service.get_assignment(session, team.assignment_id)
        except NotFoundError as exc:
            result.errors.append(f"team {team_id}: {exc}")
            return result

        metrics = await collect_team_metrics(
            client,
            team.submitted_links or [],
            since=assignment.created_at,
            excluded=self._excluded,
            max_pages=self._max_pages,
        )
        result.metrics = metrics
        result.errors.extend(metrics.errors)

        stored = await self._metric_service.record_team_metrics(
            session, team.id, metrics.authors, metrics.author_totals
        )
        result.stored = len(stored)

        log.info(
            "runner.team_done",
            team_id=str(team_id),
            authors=len(metrics.author_totals),
            stored=result.stored,
            errors=len(result.errors),
        )
        return result

    async def run_all(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        assignment_id: uuid.UUID,
        client: GitHubClient,
    ) -> list[TeamRunResult]:
        """Collect metrics for every team of an assignment with bounded concurrency.

        Each team runs in its own session and transaction; a team that fails
        is reported in its result and does not affect the others.
        """
        require_credential(client)

        async with session_factory() as session:
            async with session.begin():
                teams = await self._team_service.list_teams(session, assignment_id)

        if not teams:
            return []

        sem = asyncio.Semaphore(self._max_concurrency)

        async def _run_one(team_id: uuid.UUID) -> TeamRunResult:
            async with sem:
                try:
                    async with session_factory() as session:
                        async with session.begin():
                            return await self.run(session, team_id, client)
                except Exception as exc:
                    log.error("runner.team_failed", team_id=str(team_id), error=str(exc))
                    r = TeamRunResult(team_id=team_id)
                    r.errors.append(str(exc))
                    return r

        tasks = [_run_one(team.id) for team in teams]
        return list(await asyncio.gather(*tasks))
