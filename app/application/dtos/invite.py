"""Invite DTOs."""

from datetime import datetime

from app.application.dtos.base import DTO
from app.domain.entities.session import GroupCategory, SessionStatus


class InviteIssued(DTO):
    """Result of creating (or reusing) an invite."""

    code: str
    url: str
    session_id: str
    expires_at: datetime
    max_participants: int
    reused: bool = False


class InviteStatus(DTO):
    """Public view of an invite and the session it targets."""

    session_id: str
    title: str
    category: GroupCategory
    status: SessionStatus
    expires_at: datetime
    max_participants: int
    current_participants: int
    is_full: bool
    can_join: bool
