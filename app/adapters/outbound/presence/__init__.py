"""Presence outbound adapter."""

from app.adapters.outbound.presence.in_memory_presence_repository import (
    InMemoryPresenceRepository,
)
from app.adapters.outbound.presence.postgres_presence_repository import (
    PostgresPresenceRepository,
)

__all__ = [
    "InMemoryPresenceRepository",
    "PostgresPresenceRepository",
]
