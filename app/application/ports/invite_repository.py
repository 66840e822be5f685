"""Invite repository port."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from app.domain.entities.invite import Invite


class InviteConflictError(Exception):
    """Store rejected an insert: duplicate code or a second active invite for the session."""


class InviteRepository(ABC):
    """Port interface for invite repository.

    Implementations must enforce two constraints at the store level:
    invite codes are unique, and a session has at most one active invite.
    """

    @abstractmethod
    async def get_by_code(self, code: str) -> Optional[Invite]:
        """
        Get an invite by code, whether active or not.

        Args:
            code: Normalised (upper-case) invite code

        Returns:
            Invite entity, or None if no such code was ever issued
        """
        pass

    @abstractmethod
    async def get_active_for_session(self, session_id: str, now: datetime) -> Optional[Invite]:
        """
        Get the active, unexpired invite governing a session.

        Args:
            session_id: Session identifier
            now: Evaluation time for expiry

        Returns:
            Invite entity, or None if none is usable
        """
        pass

    @abstractmethod
    async def create(self, invite: Invite) -> Invite:
        """
        Insert a new active invite.

        Args:
            invite: Invite entity to insert

        Returns:
            The stored invite

        Raises:
            InviteConflictError: If the code is taken or the session already
                has an active invite
        """
        pass

    @abstractmethod
    async def deactivate_for_session(self, session_id: str) -> int:
        """
        Clear the active flag on every active invite of a session.

        Args:
            session_id: Session identifier

        Returns:
            Number of invites deactivated
        """
        pass

    @abstractmethod
    async def deactivate_expired(self, now: datetime, session_id: Optional[str] = None) -> int:
        """
        Clear the active flag on invites whose expiry has passed.

        Args:
            now: Evaluation time for expiry
            session_id: Restrict to one session, or None for all sessions

        Returns:
            Number of invites deactivated
        """
        pass

    @abstractmethod
    async def delete_for_session(self, session_id: str) -> None:
        """
        Delete all invites of a session.

        Args:
            session_id: Session identifier
        """
        pass
