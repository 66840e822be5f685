"""In-memory introduction repository adapter."""

from dataclasses import replace

from app.application.ports.introduction_repository import IntroductionRepository
from app.domain.entities.introduction import Introduction


class InMemoryIntroductionRepository(IntroductionRepository):
    """In-memory implementation of introduction repository."""

    def __init__(self) -> None:
        """Initialize in-memory repository."""
        self._storage: dict[tuple[str, str], Introduction] = {}

    async def upsert(self, introduction: Introduction) -> Introduction:
        """Insert or replace the introduction for (session, user)."""
        key = (introduction.session_id, introduction.user_id)
        existing = self._storage.get(key)
        stored = replace(introduction)
        if existing is not None:
            stored.created_at = existing.created_at
        self._storage[key] = stored
        return replace(stored)

    async def list_for_session(self, session_id: str) -> list[Introduction]:
        """List introductions of a session ordered by creation time."""
        rows = [replace(i) for i in self._storage.values() if i.session_id == session_id]
        return sorted(rows, key=lambda i: i.created_at)

    async def delete_for_session(self, session_id: str) -> None:
        """Delete all introductions of a session."""
        for key in [k for k in self._storage if k[0] == session_id]:
            del self._storage[key]
