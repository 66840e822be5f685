"""Session membership entity."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum


class MemberRole(str, Enum):
    """Role a user holds in a session."""

    OWNER = "owner"
    PARTICIPANT = "participant"


@dataclass
class Membership:
    """A user's participation in a session, unique per (session, user)."""

    session_id: str
    user_id: str
    role: MemberRole = MemberRole.PARTICIPANT
    is_ready: bool = False
    joined_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
