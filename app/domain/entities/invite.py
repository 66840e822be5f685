"""Session invite entity."""

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Optional


@dataclass
class Invite:
    """Invite entity granting admission to one group session."""

    code: str
    session_id: str
    created_by: str
    expires_at: datetime
    max_participants: int
    is_active: bool = True
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def issue(
        cls,
        code: str,
        session_id: str,
        created_by: str,
        ttl: timedelta,
        max_participants: int,
        now: Optional[datetime] = None,
    ) -> "Invite":
        """
        Create a fresh active invite expiring ``ttl`` from now.

        Args:
            code: Normalised invite code
            session_id: Target session
            created_by: Issuing owner
            ttl: Time-to-live
            max_participants: Participant ceiling enforced at admission
            now: Issue time (defaults to current UTC time)

        Returns:
            New Invite
        """
        issued_at = now or datetime.now(timezone.utc)
        return cls(
            code=code,
            session_id=session_id,
            created_by=created_by,
            expires_at=issued_at + ttl,
            max_participants=max_participants,
            is_active=True,
            created_at=issued_at,
        )

    def is_expired(self, now: datetime) -> bool:
        """Expiry is computed lazily, never stored as a separate state."""
        return now >= self.expires_at

    def is_usable(self, now: datetime) -> bool:
        """Active and not yet expired."""
        return self.is_active and not self.is_expired(now)
