"""ParticipantService — map github commit identities to participants."""

from __future__ import annotations

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from commitledger.core.config import DEFAULT_INSTITUTION_DOMAIN
from commitledger.dao.participant_dao import ParticipantDAO
from commitledger.models.participant import Participant

log = structlog.get_logger("commitledger.service")


class ParticipantService:
    """Best-effort identity resolution.

    Resolution order:
      1. an exact stored ``github_id`` mapping;
      2. if the email is on the institution domain, the participant with
         that exact email;
      3. otherwise the participant whose email is ``<local-part>@<domain>``.

    Steps 2 and 3 are guesses. A hit is written back as the participant's
    ``github_id`` so later runs take step 1; a miss returns None.
    """

    def __init__(
        self,
        participant_dao: ParticipantDAO,
        institution_domain: str = DEFAULT_INSTITUTION_DOMAIN,
    ) -> None:
        self._participant_dao = participant_dao
        self._domain = institution_domain.lower()

    async def resolve(self, session: AsyncSession, github_identity: str) -> Participant | None:
        participant = await self._participant_dao.get_by_github_id(session, github_identity)
        if participant is not None:
            return participant

        candidate = self.candidate_email(github_identity)
        if candidate is None:
            return None

        participant = await self._participant_dao.get_by_email(session, candidate)
        if participant is None:
            return None

        if participant.github_id is None:
            await self._participant_dao.update(session, participant.id, github_id=github_identity)
            log.info(
                "participant.github_id_learned",
                participant_id=str(participant.id),
                github_id=github_identity,
            )
        return participant

    def candidate_email(self, github_identity: str) -> str | None:
        """Institutional email to look up for *github_identity*, or None."""
        local, sep, domain = github_identity.strip().lower().rpartition("@")
        if not sep or not local or not domain:
            return None
        if domain == self._domain:
            return f"{local}@{domain}"
        return f"{local}@{self._domain}"
