"""Postgres-backed invite repository adapter."""

from datetime import datetime
from typing import Optional

from sqlalchemy.exc import IntegrityError

from app.adapters.outbound.persistence.models import SessionInviteModel, as_utc
from app.application.ports.invite_repository import InviteConflictError, InviteRepository
from app.domain.entities.invite import Invite
from app.infrastructure.db import SessionFactory, get_db_session, session_scope


def _to_entity(model: SessionInviteModel) -> Invite:
    return Invite(
        code=model.code,
        session_id=model.session_id,
        created_by=model.created_by,
        expires_at=as_utc(model.expires_at),
        max_participants=model.max_participants,
        is_active=bool(model.is_active),
        created_at=as_utc(model.created_at),
    )


class PostgresInviteRepository(InviteRepository):
    """Postgres implementation of invite repository.

    Code uniqueness and the one-active-invite-per-session rule are enforced
    by the table's unique constraints; violations surface as
    InviteConflictError.
    """

    def __init__(self, session_factory: Optional[SessionFactory] = None) -> None:
        """
        Initialize Postgres repository.

        Args:
            session_factory: Callable returning SQLAlchemy sessions
                (defaults to the application engine)
        """
        self._session_factory = session_factory or get_db_session

    async def get_by_code(self, code: str) -> Optional[Invite]:
        """Get an invite by code."""
        with session_scope(self._session_factory, "get_invite") as db:
            model = db.query(SessionInviteModel).filter(SessionInviteModel.code == code).first()
            return _to_entity(model) if model else None

    async def get_active_for_session(self, session_id: str, now: datetime) -> Optional[Invite]:
        """Get the active, unexpired invite of a session."""
        with session_scope(self._session_factory, "get_active_invite") as db:
            model = (
                db.query(SessionInviteModel)
                .filter(
                    SessionInviteModel.session_id == session_id,
                    SessionInviteModel.is_active.is_(True),
                    SessionInviteModel.expires_at > now,
                )
                .order_by(SessionInviteModel.created_at.desc())
                .first()
            )
            return _to_entity(model) if model else None

    async def create(self, invite: Invite) -> Invite:
        """
        Insert a new active invite.

        Args:
            invite: Invite entity to insert

        Returns:
            The stored invite

        Raises:
            InviteConflictError: Duplicate code or second active invite
        """
        with session_scope(self._session_factory, "create_invite") as db:
            model = SessionInviteModel(
                code=invite.code,
                session_id=invite.session_id,
                created_by=invite.created_by,
                expires_at=invite.expires_at,
                max_participants=invite.max_participants,
                is_active=invite.is_active,
                created_at=invite.created_at,
            )
            db.add(model)
            try:
                db.flush()
            except IntegrityError as e:
                raise InviteConflictError(str(e.orig)) from e
            return _to_entity(model)

    async def deactivate_for_session(self, session_id: str) -> int:
        """Deactivate every active invite of a session."""
        with session_scope(self._session_factory, "revoke_invites") as db:
            return (
                db.query(SessionInviteModel)
                .filter(
                    SessionInviteModel.session_id == session_id,
                    SessionInviteModel.is_active.is_(True),
                )
                .update({SessionInviteModel.is_active: False}, synchronize_session=False)
            )

    async def deactivate_expired(self, now: datetime, session_id: Optional[str] = None) -> int:
        """Deactivate active invites whose expiry has passed."""
        with session_scope(self._session_factory, "deactivate_expired_invites") as db:
            query = db.query(SessionInviteModel).filter(
                SessionInviteModel.is_active.is_(True),
                SessionInviteModel.expires_at <= now,
            )
            if session_id is not None:
                query = query.filter(SessionInviteModel.session_id == session_id)
            return query.update({SessionInviteModel.is_active: False}, synchronize_session=False)

    async def delete_for_session(self, session_id: str) -> None:
        """Delete all invites of a session."""
        with session_scope(self._session_factory, "delete_invites") as db:
            db.query(SessionInviteModel).filter(
                SessionInviteModel.session_id == session_id
            ).delete(synchronize_session=False)
