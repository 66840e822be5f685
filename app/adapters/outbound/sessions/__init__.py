"""Session outbound adapter."""

from app.adapters.outbound.sessions.in_memory_session_repository import InMemorySessionRepository
from app.adapters.outbound.sessions.postgres_session_repository import PostgresSessionRepository

__all__ = [
    "InMemorySessionRepository",
    "PostgresSessionRepository",
]
