"""Session management use case."""

from datetime import datetime, timezone
from typing import Any, Callable, Optional

from app.application.ports.introduction_repository import IntroductionRepository
from app.application.ports.invite_repository import InviteRepository
from app.application.ports.membership_repository import MembershipRepository
from app.application.ports.message_store import MessageStore
from app.application.ports.presence_repository import PresenceRepository
from app.application.ports.session_repository import SessionRepository
from app.application.use_cases.user_messages import UserMessages
from app.domain.entities.membership import MemberRole, Membership
from app.domain.entities.session import GroupCategory, Session, SessionKind, SessionStatus
from app.domain.errors import (
    GroupSessionError,
    InvalidStateError,
    NotAuthorizedError,
    NotOwnerError,
    SessionNotFoundError,
)

INTRODUCTION_DELETE_RESTRICTED = "INTRODUCTION_DELETE_RESTRICTED"


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class SessionManager:
    """Use case for creating, reading and deleting sessions."""

    def __init__(
        self,
        session_repository: SessionRepository,
        membership_repository: MembershipRepository,
        invite_repository: InviteRepository,
        presence_repository: PresenceRepository,
        introduction_repository: IntroductionRepository,
        message_store: MessageStore,
        default_max_participants: int = 8,
        logger: Optional[Callable[..., None]] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        """
        Initialize session manager.

        Args:
            session_repository: Repository for sessions
            membership_repository: Repository for memberships
            invite_repository: Repository for invites
            presence_repository: Repository for presence records
            introduction_repository: Repository for introductions
            message_store: Chat message store
            default_max_participants: Capacity used for the owner's own seat
            logger: Optional logger function (session_id, component, **kwargs)
            clock: Optional time source (defaults to current UTC time)
        """
        self._sessions = session_repository
        self._memberships = membership_repository
        self._invites = invite_repository
        self._presence = presence_repository
        self._introductions = introduction_repository
        self._messages = message_store
        self._default_max_participants = default_max_participants
        self._logger = logger
        self._clock = clock or _utc_now

    def _log(self, session_id: str, **kwargs: Any) -> None:
        if self._logger:
            self._logger(session_id, "sessions", **kwargs)

    async def create_session(
        self,
        owner_id: str,
        kind: SessionKind,
        title: Optional[str] = None,
        category: Optional[GroupCategory] = None,
    ) -> Session:
        """
        Create a session owned by the caller.

        Group sessions start waiting with the owner as their first member.
        Individual and introduction sessions start active.

        Args:
            owner_id: Creating user
            kind: Session kind
            title: Optional title
            category: Group focus (group sessions only, defaults to general)

        Returns:
            The created session
        """
        now = self._clock()
        if kind == SessionKind.GROUP:
            session = Session(
                owner_id=owner_id,
                kind=kind,
                status=SessionStatus.WAITING,
                title=title or UserMessages.DEFAULT_GROUP_TITLE,
                category=category or GroupCategory.GENERAL,
                created_at=now,
                last_activity_at=now,
            )
        else:
            session = Session(
                owner_id=owner_id,
                kind=kind,
                status=SessionStatus.ACTIVE,
                title=title,
                created_at=now,
                last_activity_at=now,
            )

        stored = await self._sessions.add(session)
        if stored.is_group:
            owner_seat = Membership(
                session_id=stored.session_id,
                user_id=owner_id,
                role=MemberRole.OWNER,
                joined_at=now,
            )
            try:
                await self._memberships.add_within_capacity(owner_seat, self._default_max_participants)
            except GroupSessionError:
                # A group session without its owner seat must not survive
                await self._sessions.delete(stored.session_id)
                raise

        self._log(stored.session_id, action="created", kind=kind.value, owner_id=owner_id)
        return stored

    async def get_session(self, session_id: str, requester_id: str) -> Session:
        """
        Read a session the caller owns or belongs to.

        Args:
            session_id: Session identifier
            requester_id: Caller

        Returns:
            The session
        """
        session = await self._sessions.get(session_id)
        if session is None:
            raise SessionNotFoundError(session_id)
        if session.is_owned_by(requester_id):
            return session
        if session.is_group and await self._memberships.get(session_id, requester_id):
            return session
        raise NotAuthorizedError(
            "Not allowed to view this session",
            {"session_id": session_id, "user_id": requester_id},
        )

    async def delete_session(self, session_id: str, requester_id: str) -> None:
        """
        Delete a session and everything hanging off it.

        Args:
            session_id: Session identifier
            requester_id: Caller (must own the session)

        Raises:
            SessionNotFoundError: Unknown session
            NotOwnerError: Caller is not the owner
            InvalidStateError: Introduction session while the owner has others
        """
        session = await self._sessions.get(session_id)
        if session is None:
            raise SessionNotFoundError(session_id)
        if not session.is_owned_by(requester_id):
            raise NotOwnerError(session_id, "delete the session")

        if session.kind == SessionKind.INTRODUCTION:
            owned = await self._sessions.count_for_owner(requester_id)
            if owned > 1:
                raise InvalidStateError(
                    "The introduction session cannot be deleted while other sessions exist",
                    {"session_id": session_id, "code": INTRODUCTION_DELETE_RESTRICTED},
                )

        await self._messages.clear(session_id)
        await self._introductions.delete_for_session(session_id)
        await self._presence.delete_for_session(session_id)
        await self._invites.delete_for_session(session_id)
        await self._memberships.delete_for_session(session_id)
        await self._sessions.delete(session_id)
        self._log(session_id, action="deleted", owner_id=requester_id)
