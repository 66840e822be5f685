"""Invite outbound adapter."""

from app.adapters.outbound.invites.in_memory_invite_repository import InMemoryInviteRepository
from app.adapters.outbound.invites.postgres_invite_repository import PostgresInviteRepository

__all__ = [
    "InMemoryInviteRepository",
    "PostgresInviteRepository",
]
