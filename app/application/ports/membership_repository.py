"""Membership repository port."""

from abc import ABC, abstractmethod
from typing import Optional

from app.domain.entities.membership import Membership


class MembershipRepository(ABC):
    """Port interface for membership repository."""

    @abstractmethod
    async def get(self, session_id: str, user_id: str) -> Optional[Membership]:
        """
        Get one user's membership in a session.

        Args:
            session_id: Session identifier
            user_id: User identifier

        Returns:
            Membership entity, or None if the user is not a member
        """
        pass

    @abstractmethod
    async def list_for_session(self, session_id: str) -> list[Membership]:
        """
        List members of a session ordered by join time.

        Args:
            session_id: Session identifier

        Returns:
            Memberships, earliest first
        """
        pass

    @abstractmethod
    async def count(self, session_id: str) -> int:
        """
        Count members of a session.

        Args:
            session_id: Session identifier

        Returns:
            Number of members
        """
        pass

    @abstractmethod
    async def add_within_capacity(
        self, membership: Membership, capacity: int
    ) -> tuple[Membership, bool]:
        """
        Atomically check capacity and insert a membership.

        Count, compare and insert happen as one unit so two concurrent joiners
        cannot both pass the check. If the user is already a member the
        existing record is returned unchanged.

        Args:
            membership: Membership to insert
            capacity: Maximum number of members allowed

        Returns:
            Tuple of (stored membership, created). ``created`` is False when
            the user was already a member and the existing record is returned

        Raises:
            SessionFullError: If the session already holds ``capacity`` members
        """
        pass

    @abstractmethod
    async def toggle_ready(self, session_id: str, user_id: str) -> Optional[Membership]:
        """
        Flip a member's ready flag in a single store update.

        Args:
            session_id: Session identifier
            user_id: User identifier

        Returns:
            Updated membership, or None if the user is not a member
        """
        pass

    @abstractmethod
    async def remove(self, session_id: str, user_id: str) -> bool:
        """
        Delete a membership.

        Args:
            session_id: Session identifier
            user_id: User identifier

        Returns:
            True if a row was deleted
        """
        pass

    @abstractmethod
    async def delete_for_session(self, session_id: str) -> None:
        """
        Delete all memberships of a session.

        Args:
            session_id: Session identifier
        """
        pass
