"""Postgres-backed introduction repository adapter."""

from typing import Optional

from app.adapters.outbound.persistence.models import ParticipantIntroductionModel, as_utc
from app.application.ports.introduction_repository import IntroductionRepository
from app.domain.entities.introduction import Introduction, answers_from_dict, answers_to_dict
from app.domain.entities.session import GroupCategory
from app.infrastructure.db import SessionFactory, get_db_session, session_scope


def _to_entity(model: ParticipantIntroductionModel) -> Introduction:
    return Introduction(
        session_id=model.session_id,
        user_id=model.user_id,
        answers=answers_from_dict(GroupCategory(model.category), model.answers or {}),
        created_at=as_utc(model.created_at),
        updated_at=as_utc(model.updated_at),
    )


class PostgresIntroductionRepository(IntroductionRepository):
    """Postgres implementation of introduction repository.

    Answers are stored as a JSON object next to their category tag.
    """

    def __init__(self, session_factory: Optional[SessionFactory] = None) -> None:
        """
        Initialize Postgres repository.

        Args:
            session_factory: Callable returning SQLAlchemy sessions
                (defaults to the application engine)
        """
        self._session_factory = session_factory or get_db_session

    async def upsert(self, introduction: Introduction) -> Introduction:
        """Insert or replace the introduction for (session, user)."""
        with session_scope(self._session_factory, "upsert_introduction") as db:
            model = (
                db.query(ParticipantIntroductionModel)
                .filter(
                    ParticipantIntroductionModel.session_id == introduction.session_id,
                    ParticipantIntroductionModel.user_id == introduction.user_id,
                )
                .with_for_update()
                .first()
            )
            if model is None:
                model = ParticipantIntroductionModel(
                    session_id=introduction.session_id,
                    user_id=introduction.user_id,
                    created_at=introduction.created_at,
                )
                db.add(model)
            model.category = introduction.category.value
            model.answers = answers_to_dict(introduction.answers)
            model.updated_at = introduction.updated_at
            db.flush()
            return _to_entity(model)

    async def list_for_session(self, session_id: str) -> list[Introduction]:
        """List introductions of a session ordered by creation time."""
        with session_scope(self._session_factory, "list_introductions") as db:
            models = (
                db.query(ParticipantIntroductionModel)
                .filter(ParticipantIntroductionModel.session_id == session_id)
                .order_by(ParticipantIntroductionModel.created_at, ParticipantIntroductionModel.id)
                .all()
            )
            return [_to_entity(m) for m in models]

    async def delete_for_session(self, session_id: str) -> None:
        """Delete all introductions of a session."""
        with session_scope(self._session_factory, "delete_introductions") as db:
            db.query(ParticipantIntroductionModel).filter(
                ParticipantIntroductionModel.session_id == session_id
            ).delete(synchronize_session=False)
