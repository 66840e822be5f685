"""In-memory session repository adapter."""

from dataclasses import replace
from typing import Optional

from app.application.ports.session_repository import SessionRepository
from app.domain.entities.session import Session
from app.domain.errors import SessionNotFoundError


class InMemorySessionRepository(SessionRepository):
    """In-memory implementation of session repository.

    Stores copies so callers mutating a returned entity never change stored
    state without calling ``save``.
    """

    def __init__(self) -> None:
        """Initialize in-memory repository."""
        self._storage: dict[str, Session] = {}

    async def get(self, session_id: str) -> Optional[Session]:
        """
        Get a session by id.

        Args:
            session_id: Session identifier

        Returns:
            Copy of the stored session, or None if not found
        """
        session = self._storage.get(session_id)
        return replace(session) if session else None

    async def add(self, session: Session) -> Session:
        """Persist a new session."""
        self._storage[session.session_id] = replace(session)
        return replace(session)

    async def save(self, session: Session) -> Session:
        """Update an existing session."""
        if session.session_id not in self._storage:
            raise SessionNotFoundError(session.session_id)
        self._storage[session.session_id] = replace(session)
        return replace(session)

    async def delete(self, session_id: str) -> bool:
        """Delete a session."""
        return self._storage.pop(session_id, None) is not None

    async def count_for_owner(self, owner_id: str) -> int:
        """Count sessions owned by a user."""
        return sum(1 for s in self._storage.values() if s.owner_id == owner_id)
