"""Session lifecycle controller use case."""

from datetime import datetime, timezone
from typing import Any, Callable, Optional

from app.application.dtos.message import MessageDecision, RejectionCode
from app.application.dtos.membership import MembershipView
from app.application.dtos.session import RestartResult
from app.application.ports.account_repository import AccountRepository
from app.application.ports.membership_repository import MembershipRepository
from app.application.ports.message_store import MessageStore
from app.application.ports.opening_message_generator import OpeningMessageGenerator
from app.application.ports.session_repository import SessionRepository
from app.application.use_cases.roster_access import RosterAccess
from app.application.use_cases.track_presence import PresenceTracker
from app.application.use_cases.user_messages import UserMessages
from app.domain.entities.session import ENDED_BY_OWNER_REASON, Session, SessionStatus
from app.domain.errors import (
    InvalidStateError,
    NotAuthorizedError,
    NotMemberError,
    NotOwnerError,
    SessionNotFoundError,
    UpstreamError,
)
from app.domain.value_objects.readiness_policy import ReadinessPolicy
from app.domain.value_objects.subscription_tier import SubscriptionTier


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class SessionLifecycleController:
    """Use case driving group sessions through waiting, active, paused and ended.

    Also owns the message-acceptance gate, which is re-evaluated from current
    state on every call.
    """

    def __init__(
        self,
        session_repository: SessionRepository,
        membership_repository: MembershipRepository,
        account_repository: AccountRepository,
        message_store: MessageStore,
        presence_tracker: PresenceTracker,
        roster_access: RosterAccess,
        readiness_policy: ReadinessPolicy = ReadinessPolicy(),
        opening_generator: Optional[OpeningMessageGenerator] = None,
        free_tier_session_minutes: int = 15,
        free_tier_max_sessions: int = 3,
        logger: Optional[Callable[..., None]] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        """
        Initialize lifecycle controller.

        Args:
            session_repository: Repository for sessions
            membership_repository: Repository for memberships
            account_repository: Repository for subscription tiers
            message_store: Chat message store
            presence_tracker: Presence tracker used by the message gate
            roster_access: Audited reader for rosters and introductions
            readiness_policy: Start gate
            opening_generator: Optional generator for personalised openings
            free_tier_session_minutes: Session age limit for free owners
            free_tier_max_sessions: Session count limit for free owners
            logger: Optional logger function (session_id, status_before, status_after, **kwargs)
            clock: Optional time source (defaults to current UTC time)
        """
        self._sessions = session_repository
        self._memberships = membership_repository
        self._accounts = account_repository
        self._messages = message_store
        self._presence = presence_tracker
        self._roster = roster_access
        self._policy = readiness_policy
        self._opening_generator = opening_generator
        self._free_tier_seconds = free_tier_session_minutes * 60
        self._free_tier_minutes = free_tier_session_minutes
        self._free_tier_max_sessions = free_tier_max_sessions
        self._logger = logger
        self._clock = clock or _utc_now

    def _log(
        self,
        session_id: str,
        status_before: Optional[str] = None,
        status_after: Optional[str] = None,
        **kwargs: Any,
    ) -> None:
        if self._logger:
            self._logger(session_id, status_before, status_after, **kwargs)

    async def _get(self, session_id: str) -> Session:
        session = await self._sessions.get(session_id)
        if session is None:
            raise SessionNotFoundError(session_id)
        return session

    async def _owned_group(self, session_id: str, owner_id: str, action: str) -> Session:
        session = await self._get(session_id)
        if not session.is_owned_by(owner_id):
            raise NotOwnerError(session_id, action)
        if not session.is_group:
            raise InvalidStateError(
                "Only group sessions have a lifecycle",
                {"session_id": session_id, "kind": session.kind.value},
            )
        return session

    def _invalid(self, session: Session, message: str, **details: Any) -> InvalidStateError:
        return InvalidStateError(
            message,
            {
                "session_id": session.session_id,
                "status": session.status.value,
                "is_locked": session.is_locked,
                **details,
            },
        )

    async def _check_readiness(self, session: Session) -> None:
        members = await self._roster.members(session.session_id, "readiness_check")
        ready = sum(1 for m in members if m.is_ready)
        if not self._policy.is_satisfied(ready, len(members)):
            raise self._invalid(
                session,
                "Not enough participants are ready",
                ready_count=ready,
                required_count=self._policy.required_count(len(members)),
                member_count=len(members),
            )

    async def _transition(self, session: Session, status: SessionStatus, **kwargs: Any) -> Session:
        before = session.status
        session.status = status
        session.touch(self._clock())
        saved = await self._sessions.save(session)
        self._log(session.session_id, before.value, status.value, **kwargs)
        return saved

    async def toggle_ready(self, session_id: str, user_id: str) -> MembershipView:
        """
        Flip the caller's ready flag.

        Args:
            session_id: Session identifier
            user_id: Member toggling readiness

        Returns:
            Updated membership
        """
        await self._get(session_id)
        membership = await self._memberships.toggle_ready(session_id, user_id)
        if membership is None:
            raise NotMemberError(session_id, user_id)
        self._log(session_id, user_id=user_id, is_ready=membership.is_ready)
        return MembershipView.from_entity(membership)

    async def start(self, session_id: str, owner_id: str) -> Session:
        """
        Move a waiting group session to active once the readiness policy holds.

        Starting an active session is a no-op.

        Args:
            session_id: Session identifier
            owner_id: Caller (must own the session)

        Returns:
            The session after the call

        Raises:
            InvalidStateError: Locked, paused, ended, or not enough ready members
        """
        session = await self._owned_group(session_id, owner_id, "start the session")
        if session.is_locked:
            raise self._invalid(session, "Session is locked")
        if session.status == SessionStatus.ACTIVE:
            return session
        if session.status != SessionStatus.WAITING:
            raise self._invalid(session, "Session cannot be started from its current status")

        await self._check_readiness(session)
        return await self._transition(session, SessionStatus.ACTIVE, action="start")

    async def pause(self, session_id: str, owner_id: str) -> Session:
        """Pause an active group session."""
        session = await self._owned_group(session_id, owner_id, "pause the session")
        if session.is_locked or session.status != SessionStatus.ACTIVE:
            raise self._invalid(session, "Only an active session can be paused")
        return await self._transition(session, SessionStatus.PAUSED, action="pause")

    async def resume(self, session_id: str, owner_id: str) -> Session:
        """Resume a paused group session; the readiness policy must still hold."""
        session = await self._owned_group(session_id, owner_id, "resume the session")
        if session.is_locked or session.status != SessionStatus.PAUSED:
            raise self._invalid(session, "Only a paused session can be resumed")
        await self._check_readiness(session)
        return await self._transition(session, SessionStatus.ACTIVE, action="resume")

    async def end(self, session_id: str, owner_id: str) -> Session:
        """
        End a group session and lock it permanently.

        Args:
            session_id: Session identifier
            owner_id: Caller (must own the session)

        Returns:
            The ended, locked session
        """
        session = await self._owned_group(session_id, owner_id, "end the session")
        if session.is_locked:
            raise self._invalid(session, "Session is already locked")

        now = self._clock()
        session.lock(owner_id, ENDED_BY_OWNER_REASON, now)
        return await self._transition(session, SessionStatus.ENDED, action="end", locked_by=owner_id)

    async def lock(self, session_id: str, actor: str, reason: str) -> Session:
        """
        Lock a session from any state as a safety intervention.

        Locking an already-locked session leaves the original lock in place.

        Args:
            session_id: Session identifier
            actor: Who is locking ('ai', 'admin' or a user id)
            reason: Reason shown to participants

        Returns:
            The locked session
        """
        session = await self._get(session_id)
        if session.is_locked:
            return session
        session.lock(actor, reason, self._clock())
        saved = await self._sessions.save(session)
        self._log(session_id, action="lock", locked_by=actor, lock_reason=reason)
        return saved

    async def accept_message(self, session_id: str, author_id: str) -> MessageDecision:
        """
        Decide whether a message may be posted right now.

        Checks run in a fixed order: lock, status, free-tier budget (owner
        only), then, for group sessions, that every member is online.

        Args:
            session_id: Session identifier
            author_id: Message author

        Returns:
            Allow or reject decision with a user-facing reason

        Raises:
            SessionNotFoundError: Unknown session
            NotAuthorizedError: Author may not post in this session
        """
        session = await self._get(session_id)
        if session.is_group:
            if await self._memberships.get(session_id, author_id) is None:
                raise NotMemberError(session_id, author_id)
        elif not session.is_owned_by(author_id):
            raise NotAuthorizedError(
                "Not allowed to post in this session",
                {"session_id": session_id, "user_id": author_id},
            )

        decision = await self._evaluate_gate(session, author_id)
        if not decision.allowed:
            self._log(session_id, action="message_rejected", user_id=author_id, code=decision.code.value)
        return decision

    async def _evaluate_gate(self, session: Session, author_id: str) -> MessageDecision:
        sid = session.session_id
        if session.is_locked:
            return MessageDecision.reject(
                sid, RejectionCode.SESSION_LOCKED, UserMessages.session_locked(session.lock_reason)
            )
        if session.status == SessionStatus.WAITING:
            return MessageDecision.reject(sid, RejectionCode.SESSION_WAITING, UserMessages.SESSION_WAITING)
        if session.status == SessionStatus.PAUSED:
            return MessageDecision.reject(sid, RejectionCode.SESSION_PAUSED, UserMessages.SESSION_PAUSED)
        if session.status == SessionStatus.ENDED:
            return MessageDecision.reject(sid, RejectionCode.SESSION_ENDED, UserMessages.SESSION_ENDED)

        if session.is_owned_by(author_id):
            tier = await self._accounts.get_tier(author_id)
            if tier == SubscriptionTier.FREE:
                if session.age_seconds(self._clock()) > self._free_tier_seconds:
                    return MessageDecision.reject(
                        sid,
                        RejectionCode.FREE_TIER_TIME_EXCEEDED,
                        UserMessages.FREE_TIER_TIME_EXCEEDED.format(minutes=self._free_tier_minutes),
                    )
                owned = await self._sessions.count_for_owner(author_id)
                if owned > self._free_tier_max_sessions:
                    return MessageDecision.reject(
                        sid,
                        RejectionCode.FREE_TIER_SESSION_LIMIT,
                        UserMessages.FREE_TIER_SESSION_LIMIT.format(count=self._free_tier_max_sessions),
                    )

        if session.is_group:
            summary = await self._presence.summarize(sid, purpose="message_gate")
            if not summary.all_online:
                return MessageDecision.reject(
                    sid, RejectionCode.WAITING_FOR_PARTICIPANTS, UserMessages.WAITING_FOR_PARTICIPANTS
                )

        return MessageDecision.allow(sid)

    async def restart(self, session_id: str, owner_id: str) -> RestartResult:
        """
        Replace a group session's messages with a fresh opening.

        A personalised opening is requested from the generator; if it returns
        nothing or fails, the fixed fallback opening is posted instead. The old
        messages are removed in the same write that stores the opening.

        Args:
            session_id: Session identifier
            owner_id: Caller (must own the session)

        Returns:
            Restart result

        Raises:
            InvalidStateError: Session is locked
            StoreUnavailableError: Messages could not be cleared or saved
        """
        session = await self._owned_group(session_id, owner_id, "restart the session")
        if session.is_locked:
            raise self._invalid(session, "A locked session cannot be restarted")

        opening: Optional[str] = None
        if self._opening_generator is not None:
            introductions = await self._roster.introductions(session_id, "opening_message")
            if introductions:
                try:
                    opening = self._opening_generator.generate_opening(session, introductions)
                except UpstreamError as e:
                    self._log(session_id, action="opening_fallback", error=str(e))

        used_fallback = not opening
        text = UserMessages.FALLBACK_OPENING if used_fallback else opening
        cleared = await self._messages.replace_with_ai_message(session_id, text)

        session.touch(self._clock())
        await self._sessions.save(session)
        self._log(session_id, action="restart", messages_cleared=cleared, used_fallback=used_fallback)

        return RestartResult(
            session_id=session_id,
            messages_cleared=cleared,
            opening_message=text,
            used_fallback=used_fallback,
        )
