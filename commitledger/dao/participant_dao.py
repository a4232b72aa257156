"""ParticipantDAO — participants table operations."""

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from commitledger.dao.base import BaseDAO
from commitledger.models.participant import Participant


class ParticipantDAO(BaseDAO[Participant]):
    model = Participant

    async def get_by_github_id(self, session: AsyncSession, github_id: str) -> Participant | None:
        """Look up a participant through a stored github identity mapping."""
        return await self.get_by_field(session, github_id=github_id)

    async def get_by_email(self, session: AsyncSession, email: str) -> Participant | None:
        """Look up a participant by institutional email, ignoring case."""
        stmt = select(Participant).where(func.lower(Participant.email) == email.lower())
        result = await session.execute(stmt)
        return result.scalars().first()
