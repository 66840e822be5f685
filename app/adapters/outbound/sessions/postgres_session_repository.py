"""Postgres-backed session repository adapter."""

from typing import Optional

from sqlalchemy import func

from app.adapters.outbound.persistence.models import GroupSessionModel, as_utc
from app.application.ports.session_repository import SessionRepository
from app.domain.entities.session import GroupCategory, Session, SessionKind, SessionStatus
from app.domain.errors import SessionNotFoundError
from app.infrastructure.db import SessionFactory, get_db_session, session_scope


def _to_entity(model: GroupSessionModel) -> Session:
    return Session(
        session_id=model.session_id,
        owner_id=model.owner_id,
        kind=SessionKind(model.kind),
        status=SessionStatus(model.status),
        title=model.title,
        category=GroupCategory(model.category) if model.category else None,
        is_locked=bool(model.is_locked),
        lock_reason=model.lock_reason,
        locked_by=model.locked_by,
        locked_at=as_utc(model.locked_at),
        created_at=as_utc(model.created_at),
        last_activity_at=as_utc(model.last_activity_at),
    )


def _apply(model: GroupSessionModel, session: Session) -> None:
    model.status = session.status.value
    model.title = session.title
    model.category = session.category.value if session.category else None
    model.is_locked = session.is_locked
    model.lock_reason = session.lock_reason
    model.locked_by = session.locked_by
    model.locked_at = session.locked_at
    model.last_activity_at = session.last_activity_at


class PostgresSessionRepository(SessionRepository):
    """Postgres implementation of session repository."""

    def __init__(self, session_factory: Optional[SessionFactory] = None) -> None:
        """
        Initialize Postgres repository.

        Args:
            session_factory: Callable returning SQLAlchemy sessions
                (defaults to the application engine)
        """
        self._session_factory = session_factory or get_db_session

    async def get(self, session_id: str) -> Optional[Session]:
        """
        Get a session by id.

        Args:
            session_id: Session identifier

        Returns:
            Session entity, or None if not found
        """
        with session_scope(self._session_factory, "get_session") as db:
            model = db.get(GroupSessionModel, session_id)
            return _to_entity(model) if model else None

    async def add(self, session: Session) -> Session:
        """Persist a new session."""
        with session_scope(self._session_factory, "add_session") as db:
            model = GroupSessionModel(
                session_id=session.session_id,
                owner_id=session.owner_id,
                kind=session.kind.value,
                created_at=session.created_at,
            )
            _apply(model, session)
            db.add(model)
            db.flush()
            return _to_entity(model)

    async def save(self, session: Session) -> Session:
        """Update status, lock and activity fields of an existing session."""
        with session_scope(self._session_factory, "save_session") as db:
            model = db.get(GroupSessionModel, session.session_id)
            if model is None:
                raise SessionNotFoundError(session.session_id)
            _apply(model, session)
            db.flush()
            return _to_entity(model)

    async def delete(self, session_id: str) -> bool:
        """Delete a session."""
        with session_scope(self._session_factory, "delete_session") as db:
            deleted = (
                db.query(GroupSessionModel)
                .filter(GroupSessionModel.session_id == session_id)
                .delete(synchronize_session=False)
            )
            return deleted > 0

    async def count_for_owner(self, owner_id: str) -> int:
        """Count sessions owned by a user."""
        with session_scope(self._session_factory, "count_sessions") as db:
            return (
                db.query(func.count(GroupSessionModel.session_id))
                .filter(GroupSessionModel.owner_id == owner_id)
                .scalar()
                or 0
            )
