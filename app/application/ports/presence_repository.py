"""Presence repository port."""

from abc import ABC, abstractmethod
from datetime import datetime

from app.domain.entities.presence import PresenceRecord


class PresenceRepository(ABC):
    """Port interface for presence repository."""

    @abstractmethod
    async def upsert(self, session_id: str, user_id: str, heartbeat_at: datetime) -> PresenceRecord:
        """
        Record a heartbeat (last write wins, never moves backwards in time).

        Args:
            session_id: Session identifier
            user_id: User identifier
            heartbeat_at: Heartbeat timestamp

        Returns:
            The stored presence record
        """
        pass

    @abstractmethod
    async def list_for_session(self, session_id: str) -> list[PresenceRecord]:
        """
        List presence records of a session.

        Args:
            session_id: Session identifier

        Returns:
            Presence records (one per user who ever sent a heartbeat)
        """
        pass

    @abstractmethod
    async def delete_older_than(self, cutoff: datetime) -> int:
        """
        Delete presence records whose last heartbeat precedes ``cutoff``.

        Args:
            cutoff: Oldest heartbeat to keep

        Returns:
            Number of records deleted
        """
        pass

    @abstractmethod
    async def delete_for_session(self, session_id: str) -> None:
        """
        Delete all presence records of a session.

        Args:
            session_id: Session identifier
        """
        pass
