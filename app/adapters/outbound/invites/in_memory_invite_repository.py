"""In-memory invite repository adapter."""

import asyncio
from dataclasses import replace
from datetime import datetime
from typing import Optional

from app.application.ports.invite_repository import InviteConflictError, InviteRepository
from app.domain.entities.invite import Invite


class InMemoryInviteRepository(InviteRepository):
    """In-memory implementation of invite repository."""

    def __init__(self) -> None:
        """Initialize in-memory repository."""
        self._storage: dict[str, Invite] = {}
        self._lock = asyncio.Lock()

    async def get_by_code(self, code: str) -> Optional[Invite]:
        """Get an invite by code."""
        invite = self._storage.get(code)
        return replace(invite) if invite else None

    async def get_active_for_session(self, session_id: str, now: datetime) -> Optional[Invite]:
        """Get the active, unexpired invite of a session."""
        for invite in self._storage.values():
            if invite.session_id == session_id and invite.is_usable(now):
                return replace(invite)
        return None

    async def create(self, invite: Invite) -> Invite:
        """
        Insert a new active invite.

        Args:
            invite: Invite entity to insert

        Returns:
            The stored invite

        Raises:
            InviteConflictError: Duplicate code or second active invite
        """
        async with self._lock:
            if invite.code in self._storage:
                raise InviteConflictError(f"Invite code {invite.code} already exists")
            if any(
                i.session_id == invite.session_id and i.is_active for i in self._storage.values()
            ):
                raise InviteConflictError(f"Session {invite.session_id} already has an active invite")
            self._storage[invite.code] = replace(invite)
        return replace(invite)

    async def deactivate_for_session(self, session_id: str) -> int:
        """Deactivate every active invite of a session."""
        count = 0
        for invite in self._storage.values():
            if invite.session_id == session_id and invite.is_active:
                invite.is_active = False
                count += 1
        return count

    async def deactivate_expired(self, now: datetime, session_id: Optional[str] = None) -> int:
        """Deactivate active invites whose expiry has passed."""
        count = 0
        for invite in self._storage.values():
            if session_id is not None and invite.session_id != session_id:
                continue
            if invite.is_active and invite.is_expired(now):
                invite.is_active = False
                count += 1
        return count

    async def delete_for_session(self, session_id: str) -> None:
        """Delete all invites of a session."""
        for code in [c for c, i in self._storage.items() if i.session_id == session_id]:
            del self._storage[code]
