"""In-memory chat message store adapter."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional
from uuid import uuid4

from app.application.ports.message_store import MessageStore


@dataclass
class StoredMessage:
    """A chat message held in memory."""

    message_id: str
    session_id: str
    role: str
    content: str
    user_id: Optional[str] = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class InMemoryMessageStore(MessageStore):
    """In-memory implementation of the chat message store."""

    def __init__(self) -> None:
        """Initialize in-memory store."""
        self._storage: dict[str, list[StoredMessage]] = {}

    def messages_for(self, session_id: str) -> list[StoredMessage]:
        """Messages of a session in insertion order."""
        return list(self._storage.get(session_id, []))

    def add_user_message(self, session_id: str, user_id: str, content: str) -> str:
        """Store a participant message."""
        message = StoredMessage(str(uuid4()), session_id, "user", content, user_id=user_id)
        self._storage.setdefault(session_id, []).append(message)
        return message.message_id

    async def clear(self, session_id: str) -> int:
        """Delete every message of a session."""
        return len(self._storage.pop(session_id, []))

    async def replace_with_ai_message(self, session_id: str, content: str) -> int:
        """Swap a session's messages for a single coach message."""
        previous = self._storage.get(session_id, [])
        self._storage[session_id] = [StoredMessage(str(uuid4()), session_id, "ai", content)]
        return len(previous)
