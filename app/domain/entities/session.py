"""Wellness session entity."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional
from uuid import uuid4


class SessionKind(str, Enum):
    """Kind of wellness conversation."""

    INDIVIDUAL = "individual"
    GROUP = "group"
    INTRODUCTION = "introduction"


class SessionStatus(str, Enum):
    """Lifecycle status of a session."""

    WAITING = "waiting"
    ACTIVE = "active"
    PAUSED = "paused"
    ENDED = "ended"


class GroupCategory(str, Enum):
    """Focus area of a group session."""

    RELATIONSHIP = "relationship"
    FAMILY = "family"
    GENERAL = "general"


ENDED_BY_OWNER_REASON = "Session ended by owner"


@dataclass
class Session:
    """Session entity."""

    owner_id: str
    kind: SessionKind
    status: SessionStatus
    session_id: str = field(default_factory=lambda: str(uuid4()))
    title: Optional[str] = None
    category: Optional[GroupCategory] = None  # group sessions only
    is_locked: bool = False
    lock_reason: Optional[str] = None
    locked_by: Optional[str] = None
    locked_at: Optional[datetime] = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    last_activity_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def is_group(self) -> bool:
        """Whether this is a multi-participant session."""
        return self.kind == SessionKind.GROUP

    def is_owned_by(self, user_id: str) -> bool:
        """Owner is fixed at creation and is the single source of truth."""
        return self.owner_id == user_id

    def touch(self, now: Optional[datetime] = None) -> None:
        """Update the last_activity_at timestamp."""
        self.last_activity_at = now or datetime.now(timezone.utc)

    def lock(self, actor: str, reason: str, now: Optional[datetime] = None) -> None:
        """
        Lock the session permanently.

        Args:
            actor: Who locked it (user id, 'ai' or 'admin')
            reason: Human-readable reason shown to participants
            now: Lock timestamp (defaults to current UTC time)
        """
        self.is_locked = True
        self.lock_reason = reason
        self.locked_by = actor
        self.locked_at = now or datetime.now(timezone.utc)

    def age_seconds(self, now: datetime) -> float:
        """Seconds elapsed since creation."""
        return (now - self.created_at).total_seconds()
