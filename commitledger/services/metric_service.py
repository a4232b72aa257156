"""MetricService — turn per-author commit totals into stored metric rows."""

from __future__ import annotations

import uuid
from collections.abc import Mapping

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from commitledger.core.config import DEFAULT_METRIC_SOURCE
from commitledger.dao.metric_dao import MetricDAO
from commitledger.dao.metric_source_dao import MetricSourceDAO
from commitledger.models.metric import Metric
from commitledger.services.participant_service import ParticipantService

log = structlog.get_logger("commitledger.service")


class MetricService:
    """Stateless service for idempotent metric upserts."""

    def __init__(
        self,
        metric_dao: MetricDAO,
        metric_source_dao: MetricSourceDAO,
        participant_service: ParticipantService,
        metric_source: str = DEFAULT_METRIC_SOURCE,
    ) -> None:
        self._metric_dao = metric_dao
        self._source_dao = metric_source_dao
        self._participant_service = participant_service
        self._metric_source = metric_source

    async def upsert_metric(
        self,
        session: AsyncSession,
        team_id: uuid.UUID,
        github_id: str,
        total_commits: int,
    ) -> Metric:
        """Find-or-create the metric for ``(team_id, github_id)``.

        An existing row gets the new total (overwritten, not summed) and a
        freshly resolved participant.
        """
        participant = await self._participant_service.resolve(session, github_id)
        participant_id = participant.id if participant is not None else None

        metric = await self._metric_dao.get_for_team_identity(session, team_id, github_id)
        if metric is not None:
            return await self._metric_dao.update(
                session,
                metric.id,
                total_commits=total_commits,
                participant_id=participant_id,
            )

        source = await self._source_dao.get_or_create(session, self._metric_source)
        return await self._metric_dao.create(
            session,
            metric_source_id=source.id,
            team_id=team_id,
            github_id=github_id,
            participant_id=participant_id,
            total_commits=total_commits,
        )

    async def record_team_metrics(
        self,
        session: AsyncSession,
        team_id: uuid.UUID,
        authors: Mapping[str, str],
        author_totals: Mapping[str, int],
    ) -> list[Metric]:
        """Store one metric per github identity of a team run.

        *authors* maps author name to email (the github identity) and
        *author_totals* maps author name to commit count. Several names that
        committed with the same email are folded into one identity.
        """
        by_identity: dict[str, int] = {}
        for name, total in author_totals.items():
            identity = authors.get(name)
            if not identity:
                log.warning("metric.author_without_email", team_id=str(team_id), author=name)
                continue
            by_identity[identity] = by_identity.get(identity, 0) + total

        stored = []
        for identity, total in sorted(by_identity.items()):
            stored.append(await self.upsert_metric(session, team_id, identity, total))
        log.info("metric.recorded", team_id=str(team_id), count=len(stored))
        return stored

    async def list_team_metrics(self, session: AsyncSession, team_id: uuid.UUID) -> list[Metric]:
        return await self._metric_dao.list_by_team(session, team_id)
