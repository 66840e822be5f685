"""Audited cross-user reads."""

from typing import Any, Callable, Optional

from app.application.ports.introduction_repository import IntroductionRepository
from app.application.ports.membership_repository import MembershipRepository
from app.application.ports.presence_repository import PresenceRepository
from app.domain.entities.introduction import Introduction
from app.domain.entities.membership import Membership
from app.domain.entities.presence import PresenceRecord


class RosterAccess:
    """Read-only gateway to other users' rows in a session.

    Rosters, presence rows and introductions belong to many users at once.
    Every read through this class is logged with the purpose it serves; it
    exposes no write methods.
    """

    def __init__(
        self,
        membership_repository: MembershipRepository,
        presence_repository: PresenceRepository,
        introduction_repository: IntroductionRepository,
        logger: Optional[Callable[..., None]] = None,
    ) -> None:
        """
        Initialize roster access.

        Args:
            membership_repository: Repository for memberships
            presence_repository: Repository for presence records
            introduction_repository: Repository for introductions
            logger: Optional audit logger (session_id, purpose, rows, **kwargs)
        """
        self._memberships = membership_repository
        self._presence = presence_repository
        self._introductions = introduction_repository
        self._logger = logger

    def _audit(self, session_id: str, purpose: str, rows: int, **kwargs: Any) -> None:
        if self._logger:
            self._logger(session_id, purpose, rows, **kwargs)

    async def members(self, session_id: str, purpose: str) -> list[Membership]:
        """Members of a session, earliest joiner first."""
        rows = await self._memberships.list_for_session(session_id)
        self._audit(session_id, purpose, len(rows), table="memberships")
        return rows

    async def member_count(self, session_id: str, purpose: str) -> int:
        """Number of members of a session."""
        count = await self._memberships.count(session_id)
        self._audit(session_id, purpose, count, table="memberships", aggregate=True)
        return count

    async def presence(self, session_id: str, purpose: str) -> list[PresenceRecord]:
        """Presence records of a session."""
        rows = await self._presence.list_for_session(session_id)
        self._audit(session_id, purpose, len(rows), table="presence")
        return rows

    async def introductions(self, session_id: str, purpose: str) -> list[Introduction]:
        """Introductions of a session, earliest first."""
        rows = await self._introductions.list_for_session(session_id)
        self._audit(session_id, purpose, len(rows), table="introductions")
        return rows
