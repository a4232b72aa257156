"""TeamService — read-only access to assignments and their teams."""

from __future__ import annotations

import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from commitledger.dao.team_dao import AssignmentDAO, TeamDAO
from commitledger.models.assignment import Assignment
from commitledger.models.team import Team
from commitledger.services import NotFoundError


class TeamService:
    """Stateless service over the team directory."""

    def __init__(self, team_dao: TeamDAO, assignment_dao: AssignmentDAO) -> None:
        self._team_dao = team_dao
        self._assignment_dao = assignment_dao

    async def get_team(self, session: AsyncSession, team_id: uuid.UUID) -> Team | None:
        return await self._team_dao.get_by_id(session, team_id)

    async def get_assignment(
        self, session: AsyncSession, assignment_id: uuid.UUID
    ) -> Assignment:
        """Raises :class:`NotFoundError` if the assignment does not exist."""
        assignment = await self._assignment_dao.get_by_id(session, assignment_id)
        if assignment is None:
            raise NotFoundError("assignment not found")
        return assignment

    async def list_teams(self, session: AsyncSession, assignment_id: uuid.UUID) -> list[Team]:
        """Return all teams of an assignment.

        Raises :class:`NotFoundError` if the assignment does not exist.
        """
        await self.get_assignment(session, assignment_id)
        return await self._team_dao.list_by_assignment(session, assignment_id)
