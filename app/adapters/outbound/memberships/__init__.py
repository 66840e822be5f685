"""Membership outbound adapter."""

from app.adapters.outbound.memberships.in_memory_membership_repository import (
    InMemoryMembershipRepository,
)
from app.adapters.outbound.memberships.postgres_membership_repository import (
    PostgresMembershipRepository,
)

__all__ = [
    "InMemoryMembershipRepository",
    "PostgresMembershipRepository",
]
