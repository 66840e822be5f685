"""In-memory membership repository adapter."""

import asyncio
from dataclasses import replace
from typing import Optional

from app.application.ports.membership_repository import MembershipRepository
from app.domain.entities.membership import Membership
from app.domain.errors import SessionFullError


class InMemoryMembershipRepository(MembershipRepository):
    """In-memory implementation of membership repository.

    An asyncio lock serialises capacity checks with inserts.
    """

    def __init__(self) -> None:
        """Initialize in-memory repository."""
        self._storage: dict[tuple[str, str], Membership] = {}
        self._lock = asyncio.Lock()

    async def get(self, session_id: str, user_id: str) -> Optional[Membership]:
        """Get one user's membership in a session."""
        membership = self._storage.get((session_id, user_id))
        return replace(membership) if membership else None

    async def list_for_session(self, session_id: str) -> list[Membership]:
        """List members of a session ordered by join time."""
        members = [replace(m) for m in self._storage.values() if m.session_id == session_id]
        return sorted(members, key=lambda m: m.joined_at)

    async def count(self, session_id: str) -> int:
        """Count members of a session."""
        return sum(1 for m in self._storage.values() if m.session_id == session_id)

    async def add_within_capacity(
        self, membership: Membership, capacity: int
    ) -> tuple[Membership, bool]:
        """
        Atomically check capacity and insert a membership.

        Args:
            membership: Membership to insert
            capacity: Maximum number of members allowed

        Returns:
            Tuple of (stored membership, created)

        Raises:
            SessionFullError: If the session is at capacity
        """
        key = (membership.session_id, membership.user_id)
        async with self._lock:
            existing = self._storage.get(key)
            if existing is not None:
                return replace(existing), False
            if await self.count(membership.session_id) >= capacity:
                raise SessionFullError(membership.session_id, capacity)
            self._storage[key] = replace(membership)
        return replace(membership), True

    async def toggle_ready(self, session_id: str, user_id: str) -> Optional[Membership]:
        """Flip a member's ready flag."""
        membership = self._storage.get((session_id, user_id))
        if membership is None:
            return None
        membership.is_ready = not membership.is_ready
        return replace(membership)

    async def remove(self, session_id: str, user_id: str) -> bool:
        """Delete a membership."""
        return self._storage.pop((session_id, user_id), None) is not None

    async def delete_for_session(self, session_id: str) -> None:
        """Delete all memberships of a session."""
        for key in [k for k in self._storage if k[0] == session_id]:
            del self._storage[key]
