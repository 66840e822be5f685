"""Membership DTOs."""

from datetime import datetime

from app.application.dtos.base import DTO
from app.domain.entities.membership import MemberRole, Membership


class MembershipView(DTO):
    """Membership DTO."""

    session_id: str
    user_id: str
    role: MemberRole
    is_ready: bool
    joined_at: datetime

    @classmethod
    def from_entity(cls, membership: Membership) -> "MembershipView":
        """Build view from entity."""
        return cls(
            session_id=membership.session_id,
            user_id=membership.user_id,
            role=membership.role,
            is_ready=membership.is_ready,
            joined_at=membership.joined_at,
        )


class JoinResult(DTO):
    """Outcome of a join call; re-joining is a success, not an error."""

    membership: MembershipView
    already_member: bool = False
