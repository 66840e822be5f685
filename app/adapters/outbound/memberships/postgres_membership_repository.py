"""Postgres-backed membership repository adapter."""

from typing import Optional

from sqlalchemy import func, not_
from sqlalchemy.exc import IntegrityError

from app.adapters.outbound.persistence.models import (
    GroupSessionModel,
    SessionParticipantModel,
    as_utc,
)
from app.application.ports.membership_repository import MembershipRepository
from app.domain.entities.membership import MemberRole, Membership
from app.domain.errors import SessionFullError, StoreUnavailableError
from app.infrastructure.db import SessionFactory, get_db_session, session_scope


class _ConcurrentJoin(Exception):
    """Another request inserted the same (session, user) first."""


def _to_entity(model: SessionParticipantModel) -> Membership:
    return Membership(
        session_id=model.session_id,
        user_id=model.user_id,
        role=MemberRole(model.role),
        is_ready=bool(model.is_ready),
        joined_at=as_utc(model.joined_at),
    )


class PostgresMembershipRepository(MembershipRepository):
    """Postgres implementation of membership repository.

    Admission locks the parent session row (SELECT ... FOR UPDATE) so the
    count and the insert run as one unit per session.
    """

    def __init__(self, session_factory: Optional[SessionFactory] = None) -> None:
        """
        Initialize Postgres repository.

        Args:
            session_factory: Callable returning SQLAlchemy sessions
                (defaults to the application engine)
        """
        self._session_factory = session_factory or get_db_session

    def _query(self, db, session_id: str, user_id: str):
        return db.query(SessionParticipantModel).filter(
            SessionParticipantModel.session_id == session_id,
            SessionParticipantModel.user_id == user_id,
        )

    async def get(self, session_id: str, user_id: str) -> Optional[Membership]:
        """Get one user's membership in a session."""
        with session_scope(self._session_factory, "get_membership") as db:
            model = self._query(db, session_id, user_id).first()
            return _to_entity(model) if model else None

    async def list_for_session(self, session_id: str) -> list[Membership]:
        """List members of a session ordered by join time."""
        with session_scope(self._session_factory, "list_memberships") as db:
            models = (
                db.query(SessionParticipantModel)
                .filter(SessionParticipantModel.session_id == session_id)
                .order_by(SessionParticipantModel.joined_at, SessionParticipantModel.id)
                .all()
            )
            return [_to_entity(m) for m in models]

    async def count(self, session_id: str) -> int:
        """Count members of a session."""
        with session_scope(self._session_factory, "count_memberships") as db:
            return (
                db.query(func.count(SessionParticipantModel.id))
                .filter(SessionParticipantModel.session_id == session_id)
                .scalar()
                or 0
            )

    async def add_within_capacity(
        self, membership: Membership, capacity: int
    ) -> tuple[Membership, bool]:
        """
        Atomically check capacity and insert a membership.

        Args:
            membership: Membership to insert
            capacity: Maximum number of members allowed

        Returns:
            Tuple of (stored membership, created)

        Raises:
            SessionFullError: If the session is at capacity
        """
        try:
            with session_scope(self._session_factory, "add_membership") as db:
                db.query(GroupSessionModel).filter(
                    GroupSessionModel.session_id == membership.session_id
                ).with_for_update().first()

                existing = self._query(db, membership.session_id, membership.user_id).first()
                if existing is not None:
                    return _to_entity(existing), False

                current = (
                    db.query(func.count(SessionParticipantModel.id))
                    .filter(SessionParticipantModel.session_id == membership.session_id)
                    .scalar()
                    or 0
                )
                if current >= capacity:
                    raise SessionFullError(membership.session_id, capacity)

                model = SessionParticipantModel(
                    session_id=membership.session_id,
                    user_id=membership.user_id,
                    role=membership.role.value,
                    is_ready=membership.is_ready,
                    joined_at=membership.joined_at,
                )
                db.add(model)
                try:
                    db.flush()
                except IntegrityError as e:
                    raise _ConcurrentJoin() from e
                return _to_entity(model), True
        except _ConcurrentJoin:
            existing = await self.get(membership.session_id, membership.user_id)
            if existing is None:
                raise StoreUnavailableError("add_membership")
            return existing, False

    async def toggle_ready(self, session_id: str, user_id: str) -> Optional[Membership]:
        """Flip a member's ready flag in a single UPDATE."""
        with session_scope(self._session_factory, "toggle_ready") as db:
            updated = self._query(db, session_id, user_id).update(
                {SessionParticipantModel.is_ready: not_(SessionParticipantModel.is_ready)},
                synchronize_session=False,
            )
            if not updated:
                return None
            model = self._query(db, session_id, user_id).first()
            return _to_entity(model)

    async def remove(self, session_id: str, user_id: str) -> bool:
        """Delete a membership."""
        with session_scope(self._session_factory, "remove_membership") as db:
            return self._query(db, session_id, user_id).delete(synchronize_session=False) > 0

    async def delete_for_session(self, session_id: str) -> None:
        """Delete all memberships of a session."""
        with session_scope(self._session_factory, "delete_memberships") as db:
            db.query(SessionParticipantModel).filter(
                SessionParticipantModel.session_id == session_id
            ).delete(synchronize_session=False)
