"""Session DTOs."""

from datetime import datetime
from typing import Optional

from app.application.dtos.base import DTO
from app.domain.entities.session import GroupCategory, Session, SessionKind, SessionStatus


class SessionView(DTO):
    """Session DTO."""

    session_id: str
    owner_id: str
    kind: SessionKind
    status: SessionStatus
    title: Optional[str] = None
    category: Optional[GroupCategory] = None
    is_locked: bool = False
    lock_reason: Optional[str] = None
    locked_by: Optional[str] = None
    locked_at: Optional[datetime] = None
    created_at: datetime
    last_activity_at: datetime

    @classmethod
    def from_entity(cls, session: Session) -> "SessionView":
        """Build view from entity."""
        return cls(
            session_id=session.session_id,
            owner_id=session.owner_id,
            kind=session.kind,
            status=session.status,
            title=session.title,
            category=session.category,
            is_locked=session.is_locked,
            lock_reason=session.lock_reason,
            locked_by=session.locked_by,
            locked_at=session.locked_at,
            created_at=session.created_at,
            last_activity_at=session.last_activity_at,
        )


class RestartResult(DTO):
    """Outcome of restarting a group session."""

    session_id: str
    messages_cleared: int
    opening_message: str
    used_fallback: bool
