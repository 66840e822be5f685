"""Participant introductions use case."""

from datetime import datetime, timezone
from typing import Callable, Optional

from app.application.ports.introduction_repository import IntroductionRepository
from app.application.ports.invite_repository import InviteRepository
from app.application.ports.membership_repository import MembershipRepository
from app.application.ports.session_repository import SessionRepository
from app.application.use_cases.roster_access import RosterAccess
from app.domain.entities.introduction import Introduction, IntroductionAnswers
from app.domain.entities.session import GroupCategory, Session
from app.domain.errors import InvalidStateError, NotMemberError, SessionNotFoundError


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class IntroductionService:
    """Use case for collecting and listing participant introductions."""

    def __init__(
        self,
        session_repository: SessionRepository,
        membership_repository: MembershipRepository,
        invite_repository: InviteRepository,
        introduction_repository: IntroductionRepository,
        roster_access: RosterAccess,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self._sessions = session_repository
        self._memberships = membership_repository
        self._invites = invite_repository
        self._introductions = introduction_repository
        self._roster = roster_access
        self._clock = clock or _utc_now

    async def _group(self, session_id: str) -> Session:
        session = await self._sessions.get(session_id)
        if session is None:
            raise SessionNotFoundError(session_id)
        if not session.is_group:
            raise InvalidStateError(
                "Introductions are only collected for group sessions",
                {"session_id": session_id},
            )
        return session

    async def submit(
        self, session_id: str, user_id: str, answers: IntroductionAnswers
    ) -> Introduction:
        """
        Store (or replace) the caller's introduction.

        Invitees may introduce themselves before joining while an invite is
        active.

        Args:
            session_id: Group session identifier
            user_id: Caller
            answers: Category-specific answers

        Returns:
            Stored introduction
        """
        session = await self._group(session_id)
        now = self._clock()

        if await self._memberships.get(session_id, user_id) is None:
            if await self._invites.get_active_for_session(session_id, now) is None:
                raise NotMemberError(session_id, user_id)

        expected = session.category or GroupCategory.GENERAL
        if answers.category != expected:
            raise InvalidStateError(
                "Introduction category does not match the session",
                {"expected": expected.value, "received": answers.category.value},
            )

        return await self._introductions.upsert(
            Introduction(
                session_id=session_id,
                user_id=user_id,
                answers=answers,
                created_at=now,
                updated_at=now,
            )
        )

    async def list_introductions(self, session_id: str, requester_id: str) -> list[Introduction]:
        """Introductions of a session, for its members."""
        await self._group(session_id)
        if await self._memberships.get(session_id, requester_id) is None:
            raise NotMemberError(session_id, requester_id)
        return await self._roster.introductions(session_id, "introduction_list")
