"""Session repository port."""

from abc import ABC, abstractmethod
from typing import Optional

from app.domain.entities.session import Session


class SessionRepository(ABC):
    """Port interface for session repository."""

    @abstractmethod
    async def get(self, session_id: str) -> Optional[Session]:
        """
        Get a session by id.

        Args:
            session_id: Session identifier

        Returns:
            Session entity, or None if not found
        """
        pass

    @abstractmethod
    async def add(self, session: Session) -> Session:
        """
        Persist a new session.

        Args:
            session: Session entity to insert

        Returns:
            The stored session
        """
        pass

    @abstractmethod
    async def save(self, session: Session) -> Session:
        """
        Update status, lock and activity fields of an existing session.

        Args:
            session: Session entity with updated fields

        Returns:
            The stored session

        Raises:
            SessionNotFoundError: If the session no longer exists
        """
        pass

    @abstractmethod
    async def delete(self, session_id: str) -> bool:
        """
        Delete a session.

        Args:
            session_id: Session identifier

        Returns:
            True if a row was deleted
        """
        pass

    @abstractmethod
    async def count_for_owner(self, owner_id: str) -> int:
        """
        Count sessions owned by a user.

        Args:
            owner_id: Owner identifier

        Returns:
            Number of sessions owned
        """
        pass
