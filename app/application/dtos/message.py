"""Message gate DTOs."""

from enum import Enum
from typing import Optional

from app.application.dtos.base import DTO


class RejectionCode(str, Enum):
    """Why a message was not accepted."""

    SESSION_LOCKED = "session_locked"
    SESSION_WAITING = "session_waiting"
    SESSION_PAUSED = "session_paused"
    SESSION_ENDED = "session_ended"
    FREE_TIER_TIME_EXCEEDED = "free_tier_time_exceeded"
    FREE_TIER_SESSION_LIMIT = "free_tier_session_limit"
    WAITING_FOR_PARTICIPANTS = "waiting_for_participants"


class MessageDecision(DTO):
    """Allow/reject verdict handed to the chat-storage collaborator."""

    session_id: str
    allowed: bool
    code: Optional[RejectionCode] = None
    reason: Optional[str] = None

    @classmethod
    def allow(cls, session_id: str) -> "MessageDecision":
        """Accepting decision."""
        return cls(session_id=session_id, allowed=True)

    @classmethod
    def reject(cls, session_id: str, code: RejectionCode, reason: str) -> "MessageDecision":
        """Rejecting decision with a user-facing reason."""
        return cls(session_id=session_id, allowed=False, code=code, reason=reason)
