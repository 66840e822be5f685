"""Postgres-backed chat message store adapter."""

from datetime import datetime, timezone
from typing import Optional
from uuid import uuid4

from app.adapters.outbound.persistence.models import SessionMessageModel
from app.application.ports.message_store import MessageStore
from app.infrastructure.db import SessionFactory, get_db_session, session_scope


class PostgresMessageStore(MessageStore):
    """Postgres implementation of the chat message store."""

    def __init__(self, session_factory: Optional[SessionFactory] = None) -> None:
        """
        Initialize Postgres store.

        Args:
            session_factory: Callable returning SQLAlchemy sessions
                (defaults to the application engine)
        """
        self._session_factory = session_factory or get_db_session

    async def clear(self, session_id: str) -> int:
        """Delete every message of a session."""
        with session_scope(self._session_factory, "clear_messages") as db:
            return (
                db.query(SessionMessageModel)
                .filter(SessionMessageModel.session_id == session_id)
                .delete(synchronize_session=False)
            )

    async def replace_with_ai_message(self, session_id: str, content: str) -> int:
        """
        Delete a session's messages and store one coach message in one transaction.

        Args:
            session_id: Session identifier
            content: Text of the new coach message

        Returns:
            Number of messages deleted
        """
        with session_scope(self._session_factory, "replace_messages") as db:
            deleted = (
                db.query(SessionMessageModel)
                .filter(SessionMessageModel.session_id == session_id)
                .delete(synchronize_session=False)
            )
            db.add(
                SessionMessageModel(
                    message_id=str(uuid4()),
                    session_id=session_id,
                    role="ai",
                    content=content,
                    created_at=datetime.now(timezone.utc),
                )
            )
            return deleted
