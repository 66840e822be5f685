"""Chat message store port."""

from abc import ABC, abstractmethod


class MessageStore(ABC):
    """Port interface for the chat-storage collaborator."""

    @abstractmethod
    async def clear(self, session_id: str) -> int:
        """
        Delete every message of a session.

        Args:
            session_id: Session identifier

        Returns:
            Number of messages deleted
        """
        pass

    @abstractmethod
    async def replace_with_ai_message(self, session_id: str, content: str) -> int:
        """
        Delete every message of a session and store one coach message.

        Both writes apply together or not at all.

        Args:
            session_id: Session identifier
            content: Text of the new coach message

        Returns:
            Number of messages deleted
        """
        pass
