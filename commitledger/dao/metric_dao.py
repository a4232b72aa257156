"""MetricDAO — metrics table operations."""

import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from commitledger.dao.base import BaseDAO
from commitledger.models.metric import Metric


class MetricDAO(BaseDAO[Metric]):
    model = Metric

    async def get_for_team_identity(
        self, session: AsyncSession, team_id: uuid.UUID, github_id: str
    ) -> Metric | None:
        """Look up the metric row keyed by ``(team_id, github_id)``."""
        return await self.get_by_field(session, team_id=team_id, github_id=github_id)

    async def list_by_team(self, session: AsyncSession, team_id: uuid.UUID) -> list[Metric]:
        return await self.list_by_field(session, team_id=team_id)
