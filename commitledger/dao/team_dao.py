"""TeamDAO / AssignmentDAO — read access to the team directory."""

import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from commitledger.dao.base import BaseDAO
from commitledger.models.assignment import Assignment
from commitledger.models.team import Team


class AssignmentDAO(BaseDAO[Assignment]):
    model = Assignment


class TeamDAO(BaseDAO[Team]):
    model = Team

    async def list_by_assignment(
        self, session: AsyncSession, assignment_id: uuid.UUID
    ) -> list[Team]:
        return await self.list_by_field(session, assignment_id=assignment_id)
