"""MetricSourceDAO — metric_sources table operations."""

from sqlalchemy.ext.asyncio import AsyncSession

from commitledger.dao.base import BaseDAO
from commitledger.models.metric_source import MetricSource


class MetricSourceDAO(BaseDAO[MetricSource]):
    model = MetricSource

    async def get_or_create(self, session: AsyncSession, name: str) -> MetricSource:
        """Return the source named *name*, creating it on first use."""
        source = await self.get_by_field(session, name=name)
        if source is None:
            source = await self.create(session, name=name)
        return source
