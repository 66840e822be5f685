"""Participant introduction entities.

An introduction is a per-category intake form, modelled as one variant per
group category instead of an open bag of optional fields.
"""

from dataclasses import dataclass, field, fields
from datetime import datetime, timezone
from typing import Any, ClassVar, Optional, Union

from app.domain.entities.session import GroupCategory


@dataclass(frozen=True)
class RelationshipIntroduction:
    """Intake answers for relationship sessions."""

    category: ClassVar[GroupCategory] = GroupCategory.RELATIONSHIP

    relationship_role: Optional[str] = None
    why_wellness: Optional[str] = None
    goals: Optional[str] = None
    challenges: Optional[str] = None


@dataclass(frozen=True)
class FamilyIntroduction:
    """Intake answers for family sessions."""

    category: ClassVar[GroupCategory] = GroupCategory.FAMILY

    family_role: Optional[str] = None
    why_wellness: Optional[str] = None
    family_goals: Optional[str] = None
    what_to_achieve: Optional[str] = None


@dataclass(frozen=True)
class GeneralIntroduction:
    """Intake answers for general sessions."""

    category: ClassVar[GroupCategory] = GroupCategory.GENERAL

    participant_role: Optional[str] = None
    wellness_reason: Optional[str] = None
    personal_goals: Optional[str] = None
    expectations: Optional[str] = None


IntroductionAnswers = Union[RelationshipIntroduction, FamilyIntroduction, GeneralIntroduction]

_VARIANTS: dict[GroupCategory, type] = {
    GroupCategory.RELATIONSHIP: RelationshipIntroduction,
    GroupCategory.FAMILY: FamilyIntroduction,
    GroupCategory.GENERAL: GeneralIntroduction,
}


def answers_from_dict(category: GroupCategory, data: dict[str, Any]) -> IntroductionAnswers:
    """
    Build the variant for ``category`` from a flat dict, ignoring foreign keys.

    Args:
        category: Group category selecting the variant
        data: Flat answer mapping (e.g. decoded JSON column)

    Returns:
        Introduction answers variant
    """
    variant = _VARIANTS[GroupCategory(category)]
    known = {f.name for f in fields(variant)}
    return variant(**{k: v for k, v in data.items() if k in known and v})


def answers_to_dict(answers: IntroductionAnswers) -> dict[str, Optional[str]]:
    """Flatten answers into a plain dict (category excluded)."""
    return {f.name: getattr(answers, f.name) for f in fields(answers)}


@dataclass
class Introduction:
    """A participant's introduction for one session."""

    session_id: str
    user_id: str
    answers: IntroductionAnswers
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def category(self) -> GroupCategory:
        """Category of the wrapped answers."""
        return self.answers.category
