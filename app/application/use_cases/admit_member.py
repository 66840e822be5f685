"""Membership admission use case."""

from datetime import datetime, timezone
from typing import Any, Callable, Optional

from app.application.dtos.membership import JoinResult, MembershipView
from app.application.ports.invite_repository import InviteRepository
from app.application.ports.membership_repository import MembershipRepository
from app.application.ports.session_repository import SessionRepository
from app.application.use_cases.manage_invites import InviteManager
from app.domain.entities.membership import MemberRole, Membership
from app.domain.entities.session import Session, SessionStatus
from app.domain.errors import (
    InvalidStateError,
    MemberNotFoundError,
    NotAuthorizedError,
    NotOwnerError,
    SessionFullError,
    SessionNotFoundError,
)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class MembershipAdmission:
    """Use case for admitting users into sessions and removing them."""

    def __init__(
        self,
        session_repository: SessionRepository,
        invite_repository: InviteRepository,
        membership_repository: MembershipRepository,
        invite_manager: InviteManager,
        default_max_participants: int = 8,
        logger: Optional[Callable[..., None]] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        """
        Initialize membership admission.

        Args:
            session_repository: Repository for sessions
            invite_repository: Repository for invites
            membership_repository: Repository for memberships
            invite_manager: Invite manager used to resolve invite codes
            default_max_participants: Ceiling when the owner joins without an invite
            logger: Optional logger function (session_id, user_id, outcome, **kwargs)
            clock: Optional time source (defaults to current UTC time)
        """
        self._sessions = session_repository
        self._invites = invite_repository
        self._memberships = membership_repository
        self._invite_manager = invite_manager
        self._default_max_participants = default_max_participants
        self._logger = logger
        self._clock = clock or _utc_now

    def _log(self, session_id: str, user_id: str, outcome: str, **kwargs: Any) -> None:
        if self._logger:
            self._logger(session_id, user_id, outcome, **kwargs)

    async def _resolve_direct(self, session_id: str, user_id: str) -> tuple[Session, int]:
        session = await self._sessions.get(session_id)
        if session is None:
            raise SessionNotFoundError(session_id)

        invite = await self._invites.get_active_for_session(session_id, self._clock())
        if invite is not None:
            return session, invite.max_participants
        if session.is_owned_by(user_id):
            return session, self._default_max_participants

        # Members keep their seat after the invite is revoked
        if await self._memberships.get(session_id, user_id) is not None:
            return session, self._default_max_participants
        raise NotAuthorizedError(
            "No valid invite and not the session owner",
            {"session_id": session_id, "user_id": user_id},
        )

    async def join(
        self,
        user_id: str,
        invite_code: Optional[str] = None,
        session_id: Optional[str] = None,
    ) -> JoinResult:
        """
        Admit a user into a session by invite code or by session id.

        Args:
            user_id: Joining user
            invite_code: Invite code (code path)
            session_id: Session identifier (direct path)

        Returns:
            Join result; ``already_member`` is True when the user was a member

        Raises:
            ValueError: Neither or both of invite_code and session_id given
            InviteNotFoundError, InviteExpiredError, InviteRevokedError: Code path
            SessionNotFoundError: Direct path, unknown session
            NotAuthorizedError: Direct path, no active invite and not the owner
            InvalidStateError: Session no longer accepts new participants
            SessionFullError: Capacity reached
        """
        if (invite_code is None) == (session_id is None):
            raise ValueError("Provide exactly one of invite_code or session_id")

        if invite_code is not None:
            invite, session = await self._invite_manager.resolve_invite(invite_code)
            capacity = invite.max_participants
        else:
            session, capacity = await self._resolve_direct(session_id, user_id)

        sid = session.session_id
        existing = await self._memberships.get(sid, user_id)
        if existing is not None:
            self._log(sid, user_id, "already_member")
            return JoinResult(membership=MembershipView.from_entity(existing), already_member=True)

        is_owner = session.is_owned_by(user_id)
        if not is_owner and (session.is_locked or session.status != SessionStatus.WAITING):
            self._log(sid, user_id, "rejected", reason="not_waiting", status=session.status.value)
            raise InvalidStateError(
                "Session is no longer accepting participants",
                {"session_id": sid, "status": session.status.value},
            )

        membership = Membership(
            session_id=sid,
            user_id=user_id,
            role=MemberRole.OWNER if is_owner else MemberRole.PARTICIPANT,
            is_ready=False,
            joined_at=self._clock(),
        )
        try:
            stored, created = await self._memberships.add_within_capacity(membership, capacity)
        except SessionFullError:
            self._log(sid, user_id, "rejected", reason="full", capacity=capacity)
            raise

        self._log(sid, user_id, "admitted" if created else "already_member", role=stored.role.value)
        return JoinResult(membership=MembershipView.from_entity(stored), already_member=not created)

    async def remove_member(self, session_id: str, owner_id: str, target_user_id: str) -> None:
        """
        Remove a participant from a session.

        Args:
            session_id: Session identifier
            owner_id: Caller (must own the session)
            target_user_id: Participant to remove

        Raises:
            SessionNotFoundError: Unknown session
            NotOwnerError: Caller is not the owner
            InvalidStateError: Owner tried to remove themselves
            MemberNotFoundError: Target is not a member
        """
        session = await self._sessions.get(session_id)
        if session is None:
            raise SessionNotFoundError(session_id)
        if not session.is_owned_by(owner_id):
            raise NotOwnerError(session_id, "remove participants")
        if target_user_id == session.owner_id:
            raise InvalidStateError(
                "The session owner cannot be removed", {"session_id": session_id}
            )

        removed = await self._memberships.remove(session_id, target_user_id)
        if not removed:
            raise MemberNotFoundError(session_id, target_user_id)
        self._log(session_id, target_user_id, "removed", removed_by=owner_id)
