"""Introduction repository port."""

from abc import ABC, abstractmethod

from app.domain.entities.introduction import Introduction


class IntroductionRepository(ABC):
    """Port interface for introduction repository."""

    @abstractmethod
    async def upsert(self, introduction: Introduction) -> Introduction:
        """
        Insert or replace the introduction for (session, user).

        Args:
            introduction: Introduction entity

        Returns:
            The stored introduction (created_at preserved on update)
        """
        pass

    @abstractmethod
    async def list_for_session(self, session_id: str) -> list[Introduction]:
        """
        List introductions of a session ordered by creation time.

        Args:
            session_id: Session identifier

        Returns:
            Introductions, earliest first
        """
        pass

    @abstractmethod
    async def delete_for_session(self, session_id: str) -> None:
        """
        Delete all introductions of a session.

        Args:
            session_id: Session identifier
        """
        pass
