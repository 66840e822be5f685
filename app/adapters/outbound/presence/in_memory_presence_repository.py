"""In-memory presence repository adapter."""

from dataclasses import replace
from datetime import datetime

from app.application.ports.presence_repository import PresenceRepository
from app.domain.entities.presence import PresenceRecord


class InMemoryPresenceRepository(PresenceRepository):
    """In-memory implementation of presence repository."""

    def __init__(self) -> None:
        """Initialize in-memory repository."""
        self._storage: dict[tuple[str, str], PresenceRecord] = {}

    async def upsert(self, session_id: str, user_id: str, heartbeat_at: datetime) -> PresenceRecord:
        """Record a heartbeat; older timestamps never overwrite newer ones."""
        key = (session_id, user_id)
        record = self._storage.get(key)
        if record is None:
            record = PresenceRecord(session_id=session_id, user_id=user_id, last_heartbeat=heartbeat_at)
            self._storage[key] = record
        elif heartbeat_at > record.last_heartbeat:
            record.last_heartbeat = heartbeat_at
            record.is_online = True
        return replace(record)

    async def list_for_session(self, session_id: str) -> list[PresenceRecord]:
        """List presence records of a session."""
        return [replace(r) for r in self._storage.values() if r.session_id == session_id]

    async def delete_older_than(self, cutoff: datetime) -> int:
        """Delete records whose last heartbeat precedes ``cutoff``."""
        stale = [k for k, r in self._storage.items() if r.last_heartbeat < cutoff]
        for key in stale:
            del self._storage[key]
        return len(stale)

    async def delete_for_session(self, session_id: str) -> None:
        """Delete all presence records of a session."""
        for key in [k for k in self._storage if k[0] == session_id]:
            del self._storage[key]
