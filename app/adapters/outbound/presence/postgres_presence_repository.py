"""Postgres-backed presence repository adapter."""

from datetime import datetime
from typing import Optional

from sqlalchemy.exc import IntegrityError

from app.adapters.outbound.persistence.models import ParticipantPresenceModel, as_utc
from app.application.ports.presence_repository import PresenceRepository
from app.domain.entities.presence import PresenceRecord
from app.domain.errors import StoreUnavailableError
from app.infrastructure.db import SessionFactory, get_db_session, session_scope


class _ConcurrentHeartbeat(Exception):
    """Another request inserted the same (session, user) first."""


def _to_entity(model: ParticipantPresenceModel) -> PresenceRecord:
    return PresenceRecord(
        session_id=model.session_id,
        user_id=model.user_id,
        last_heartbeat=as_utc(model.last_heartbeat),
        is_online=bool(model.is_online),
    )


class PostgresPresenceRepository(PresenceRepository):
    """Postgres implementation of presence repository."""

    def __init__(self, session_factory: Optional[SessionFactory] = None) -> None:
        """
        Initialize Postgres repository.

        Args:
            session_factory: Callable returning SQLAlchemy sessions
                (defaults to the application engine)
        """
        self._session_factory = session_factory or get_db_session

    async def upsert(self, session_id: str, user_id: str, heartbeat_at: datetime) -> PresenceRecord:
        """
        Record a heartbeat; older timestamps never overwrite newer ones.

        When a concurrent first heartbeat inserts the row first, the loser's
        insert fails on the primary key and the write is retried as an update.

        Args:
            session_id: Session identifier
            user_id: User identifier
            heartbeat_at: Heartbeat timestamp

        Returns:
            The stored presence record
        """
        try:
            with session_scope(self._session_factory, "upsert_presence") as db:
                model = db.get(ParticipantPresenceModel, (session_id, user_id), with_for_update=True)
                if model is None:
                    model = ParticipantPresenceModel(
                        session_id=session_id,
                        user_id=user_id,
                        last_heartbeat=heartbeat_at,
                        is_online=True,
                    )
                    db.add(model)
                    try:
                        db.flush()
                    except IntegrityError as e:
                        raise _ConcurrentHeartbeat() from e
                else:
                    self._advance(model, heartbeat_at)
                    db.flush()
                return _to_entity(model)
        except _ConcurrentHeartbeat:
            return await self._update_existing(session_id, user_id, heartbeat_at)

    async def _update_existing(
        self, session_id: str, user_id: str, heartbeat_at: datetime
    ) -> PresenceRecord:
        with session_scope(self._session_factory, "upsert_presence") as db:
            model = db.get(ParticipantPresenceModel, (session_id, user_id), with_for_update=True)
            if model is None:
                raise StoreUnavailableError("upsert_presence")
            self._advance(model, heartbeat_at)
            db.flush()
            return _to_entity(model)

    @staticmethod
    def _advance(model: ParticipantPresenceModel, heartbeat_at: datetime) -> None:
        if as_utc(model.last_heartbeat) < heartbeat_at:
            model.last_heartbeat = heartbeat_at
            model.is_online = True

    async def list_for_session(self, session_id: str) -> list[PresenceRecord]:
        """List presence records of a session."""
        with session_scope(self._session_factory, "list_presence") as db:
            models = (
                db.query(ParticipantPresenceModel)
                .filter(ParticipantPresenceModel.session_id == session_id)
                .all()
            )
            return [_to_entity(m) for m in models]

    async def delete_older_than(self, cutoff: datetime) -> int:
        """Delete records whose last heartbeat precedes ``cutoff``."""
        with session_scope(self._session_factory, "purge_presence") as db:
            return (
                db.query(ParticipantPresenceModel)
                .filter(ParticipantPresenceModel.last_heartbeat < cutoff)
                .delete(synchronize_session=False)
            )

    async def delete_for_session(self, session_id: str) -> None:
        """Delete all presence records of a session."""
        with session_scope(self._session_factory, "delete_presence") as db:
            db.query(ParticipantPresenceModel).filter(
                ParticipantPresenceModel.session_id == session_id
            ).delete(synchronize_session=False)
