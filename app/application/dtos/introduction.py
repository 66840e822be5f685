"""Introduction DTOs."""

from datetime import datetime
from typing import Optional

from app.application.dtos.base import DTO
from app.domain.entities.introduction import Introduction, answers_to_dict
from app.domain.entities.session import GroupCategory


class IntroductionView(DTO):
    """Introduction DTO with category-specific answers flattened."""

    session_id: str
    user_id: str
    category: GroupCategory
    answers: dict[str, Optional[str]]
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, introduction: Introduction) -> "IntroductionView":
        """Build view from entity."""
        return cls(
            session_id=introduction.session_id,
            user_id=introduction.user_id,
            category=introduction.category,
            answers=answers_to_dict(introduction.answers),
            created_at=introduction.created_at,
            updated_at=introduction.updated_at,
        )
