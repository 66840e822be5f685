"""Presence DTOs."""

from datetime import datetime
from typing import Optional

from app.application.dtos.base import DTO
from app.domain.entities.membership import MemberRole
from app.domain.entities.presence import PresenceStatus


class ParticipantPresence(DTO):
    """One roster entry with its derived presence."""

    user_id: str
    role: MemberRole
    is_ready: bool
    status: PresenceStatus
    last_heartbeat: Optional[datetime] = None

    @property
    def is_online(self) -> bool:
        """Whether the participant is currently online."""
        return self.status == PresenceStatus.ONLINE


class PresenceSummary(DTO):
    """Roster with presence plus aggregates used by the readiness and message gates."""

    session_id: str
    participants: list[ParticipantPresence]
    all_online: bool
    online_count: int
    total_count: int
    heartbeat_interval_seconds: int
