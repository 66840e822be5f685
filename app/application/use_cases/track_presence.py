"""Presence tracker use case."""

from datetime import datetime, timezone
from typing import Callable, Optional

from app.application.dtos.presence import ParticipantPresence, PresenceSummary
from app.application.ports.membership_repository import MembershipRepository
from app.application.ports.presence_repository import PresenceRepository
from app.application.ports.session_repository import SessionRepository
from app.application.use_cases.roster_access import RosterAccess
from app.domain.entities.presence import (
    PresenceRecord,
    PresenceStatus,
    PresenceThresholds,
    classify,
)
from app.domain.errors import NotMemberError, SessionNotFoundError


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class PresenceTracker:
    """Use case for recording heartbeats and deriving participant presence."""

    def __init__(
        self,
        session_repository: SessionRepository,
        membership_repository: MembershipRepository,
        presence_repository: PresenceRepository,
        roster_access: RosterAccess,
        thresholds: PresenceThresholds = PresenceThresholds(),
        heartbeat_interval_seconds: int = 15,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        """
        Initialize presence tracker.

        Args:
            session_repository: Repository for sessions
            membership_repository: Repository for memberships
            presence_repository: Repository for presence records
            roster_access: Audited reader for rosters and presence rows
            thresholds: Online/away limits
            heartbeat_interval_seconds: Interval advertised to clients
            clock: Optional time source (defaults to current UTC time)
        """
        self._sessions = session_repository
        self._memberships = membership_repository
        self._presence = presence_repository
        self._roster = roster_access
        self._thresholds = thresholds
        self._heartbeat_interval = heartbeat_interval_seconds
        self._clock = clock or _utc_now

    async def _require_member(self, session_id: str, user_id: str) -> None:
        if await self._sessions.get(session_id) is None:
            raise SessionNotFoundError(session_id)
        if await self._memberships.get(session_id, user_id) is None:
            raise NotMemberError(session_id, user_id)

    async def heartbeat(self, session_id: str, user_id: str) -> PresenceRecord:
        """
        Record that a member is still connected.

        Args:
            session_id: Session identifier
            user_id: Member sending the heartbeat

        Returns:
            Stored presence record
        """
        await self._require_member(session_id, user_id)
        return await self._presence.upsert(session_id, user_id, self._clock())

    def classify(self, record: Optional[PresenceRecord], now: Optional[datetime] = None) -> PresenceStatus:
        """Classify a presence record with the configured thresholds."""
        return classify(record, now or self._clock(), self._thresholds)

    async def list_presence(self, session_id: str, requester_id: str) -> PresenceSummary:
        """
        Roster with derived presence, for members of the session.

        Args:
            session_id: Session identifier
            requester_id: Caller (must be a member)

        Returns:
            Presence summary
        """
        await self._require_member(session_id, requester_id)
        return await self.summarize(session_id)

    async def summarize(self, session_id: str, purpose: str = "presence_summary") -> PresenceSummary:
        """
        Build the presence summary without a membership check.

        Args:
            session_id: Session identifier
            purpose: Audit label for the roster read

        Returns:
            Presence summary; all_online is False for an empty roster
        """
        now = self._clock()
        members = await self._roster.members(session_id, purpose)
        records = {r.user_id: r for r in await self._roster.presence(session_id, purpose)}

        participants = []
        for member in members:
            record = records.get(member.user_id)
            participants.append(
                ParticipantPresence(
                    user_id=member.user_id,
                    role=member.role,
                    is_ready=member.is_ready,
                    status=self.classify(record, now),
                    last_heartbeat=record.last_heartbeat if record else None,
                )
            )

        online = sum(1 for p in participants if p.is_online)
        total = len(participants)
        return PresenceSummary(
            session_id=session_id,
            participants=participants,
            all_online=total > 0 and online == total,
            online_count=online,
            total_count=total,
            heartbeat_interval_seconds=self._heartbeat_interval,
        )
