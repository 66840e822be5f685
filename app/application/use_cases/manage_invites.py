"""Invite manager use case."""

from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Optional

from app.application.dtos.invite import InviteIssued, InviteStatus
from app.application.ports.invite_repository import InviteConflictError, InviteRepository
from app.application.ports.session_repository import SessionRepository
from app.application.use_cases.roster_access import RosterAccess
from app.application.use_cases.user_messages import UserMessages
from app.domain.entities.invite import Invite
from app.domain.entities.session import GroupCategory, Session, SessionStatus
from app.domain.errors import (
    InternalError,
    InvalidStateError,
    InviteExpiredError,
    InviteNotFoundError,
    InviteRevokedError,
    NotOwnerError,
    SessionNotFoundError,
)
from app.domain.value_objects.invite_code import InviteCode


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class InviteManager:
    """Use case for issuing, validating and revoking group session invites."""

    def __init__(
        self,
        session_repository: SessionRepository,
        invite_repository: InviteRepository,
        roster_access: RosterAccess,
        ttl_hours: int = 24,
        code_length: int = 8,
        code_attempts: int = 5,
        default_max_participants: int = 8,
        public_base_url: str = "https://zenithwell.online",
        logger: Optional[Callable[..., None]] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        """
        Initialize invite manager.

        Args:
            session_repository: Repository for sessions
            invite_repository: Repository for invites
            roster_access: Audited reader used for participant counts
            ttl_hours: Invite lifetime
            code_length: Generated code length
            code_attempts: Code generation attempts before giving up
            default_max_participants: Ceiling used when the owner gives none
            public_base_url: Base of the share URL
            logger: Optional logger function (session_id, action, code, **kwargs)
            clock: Optional time source (defaults to current UTC time)
        """
        self._sessions = session_repository
        self._invites = invite_repository
        self._roster = roster_access
        self._ttl = timedelta(hours=ttl_hours)
        self._code_length = code_length
        self._code_attempts = code_attempts
        self._default_max_participants = default_max_participants
        self._public_base_url = public_base_url.rstrip("/")
        self._logger = logger
        self._clock = clock or _utc_now

    def _log(self, session_id: str, action: str, code: str, **kwargs: Any) -> None:
        if self._logger:
            self._logger(session_id, action, code, **kwargs)

    def share_url(self, code: str) -> str:
        """Public join link for a code."""
        return f"{self._public_base_url}/join/{code}"

    def _issued(self, invite: Invite, reused: bool) -> InviteIssued:
        return InviteIssued(
            code=invite.code,
            url=self.share_url(invite.code),
            session_id=invite.session_id,
            expires_at=invite.expires_at,
            max_participants=invite.max_participants,
            reused=reused,
        )

    async def _require_owned_group(self, session_id: str, requester_id: str, action: str) -> Session:
        session = await self._sessions.get(session_id)
        if session is None:
            raise SessionNotFoundError(session_id)
        if not session.is_owned_by(requester_id):
            raise NotOwnerError(session_id, action)
        if not session.is_group:
            raise InvalidStateError(
                "Invites are only available for group sessions",
                {"session_id": session_id, "kind": session.kind.value},
            )
        return session

    async def create_invite(
        self,
        session_id: str,
        requester_id: str,
        max_participants: Optional[int] = None,
    ) -> InviteIssued:
        """
        Create an invite for a group session, or return the one already active.

        Args:
            session_id: Target group session
            requester_id: Caller (must own the session)
            max_participants: Optional participant ceiling

        Returns:
            Issued invite; ``reused`` is True when an active invite was returned

        Raises:
            SessionNotFoundError: Session does not exist
            NotOwnerError: Caller is not the owner
            InvalidStateError: Not a group session, or locked/ended
            InternalError: No unique code could be allocated
        """
        session = await self._require_owned_group(session_id, requester_id, "create invites")
        if session.is_locked or session.status == SessionStatus.ENDED:
            raise InvalidStateError(
                "Cannot invite to a locked or ended session",
                {"session_id": session_id, "status": session.status.value},
            )

        capacity = max_participants or self._default_max_participants
        if capacity < 1:
            raise InvalidStateError(
                "max_participants must be at least 1", {"max_participants": capacity}
            )

        now = self._clock()
        existing = await self._invites.get_active_for_session(session_id, now)
        if existing is not None:
            self._log(session_id, "reused", existing.code)
            return self._issued(existing, reused=True)

        # Expired invites would otherwise keep the one-active-invite slot occupied
        await self._invites.deactivate_expired(now, session_id=session_id)

        for attempt in range(1, self._code_attempts + 1):
            code = InviteCode.generate(self._code_length)
            invite = Invite.issue(
                code=code.value,
                session_id=session_id,
                created_by=requester_id,
                ttl=self._ttl,
                max_participants=capacity,
                now=now,
            )
            try:
                stored = await self._invites.create(invite)
            except InviteConflictError:
                winner = await self._invites.get_active_for_session(session_id, now)
                if winner is not None:
                    self._log(session_id, "reused", winner.code, race=True)
                    return self._issued(winner, reused=True)
                self._log(session_id, "code_collision", code.value, attempt=attempt)
                continue

            self._log(
                session_id,
                "issued",
                stored.code,
                expires_at=stored.expires_at.isoformat(),
                max_participants=stored.max_participants,
            )
            return self._issued(stored, reused=False)

        raise InternalError(
            "Could not allocate a unique invite code",
            {"session_id": session_id, "attempts": self._code_attempts},
        )

    async def resolve_invite(self, code: str) -> tuple[Invite, Session]:
        """
        Look up a usable invite and the session it targets.

        Expiry is evaluated before the active flag, so an expired invite is
        reported as expired even after cleanup has deactivated it.

        Args:
            code: Invite code as supplied by the user

        Returns:
            Tuple of (invite, session)

        Raises:
            InviteNotFoundError: Unknown or malformed code
            InviteExpiredError: Expiry has passed
            InviteRevokedError: Invite was revoked
        """
        try:
            normalized = InviteCode.parse(code).value
        except ValueError:
            raise InviteNotFoundError(code)

        invite = await self._invites.get_by_code(normalized)
        if invite is None:
            raise InviteNotFoundError(normalized)
        if invite.is_expired(self._clock()):
            raise InviteExpiredError(normalized)
        if not invite.is_active:
            raise InviteRevokedError(normalized)

        session = await self._sessions.get(invite.session_id)
        if session is None:
            raise InviteNotFoundError(normalized)
        return invite, session

    async def validate_invite(self, code: str) -> InviteStatus:
        """
        Describe the session behind an invite so a prospective joiner can decide.

        Args:
            code: Invite code as supplied by the user

        Returns:
            Invite status including occupancy and joinability
        """
        invite, session = await self.resolve_invite(code)
        current = await self._roster.member_count(session.session_id, "invite_status")
        is_full = current >= invite.max_participants
        return InviteStatus(
            session_id=session.session_id,
            title=session.title or UserMessages.DEFAULT_GROUP_TITLE,
            category=session.category or GroupCategory.GENERAL,
            status=session.status,
            expires_at=invite.expires_at,
            max_participants=invite.max_participants,
            current_participants=current,
            is_full=is_full,
            can_join=not is_full and session.status == SessionStatus.WAITING,
        )

    async def revoke_invite(self, session_id: str, requester_id: str) -> int:
        """
        Deactivate every active invite of a session. Repeating is a no-op.

        Args:
            session_id: Target group session
            requester_id: Caller (must own the session)

        Returns:
            Number of invites deactivated
        """
        await self._require_owned_group(session_id, requester_id, "revoke invites")
        revoked = await self._invites.deactivate_for_session(session_id)
        self._log(session_id, "revoked", "*", count=revoked)
        return revoked
