"""HTTP adapter request and response schemas."""

from datetime import datetime
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

from app.domain.entities.introduction import (
    FamilyIntroduction,
    GeneralIntroduction,
    IntroductionAnswers,
    RelationshipIntroduction,
)
from app.domain.entities.presence import PresenceStatus
from app.domain.entities.session import GroupCategory, SessionKind

_ANSWER_MAX_LENGTH = 2000


class CreateSessionRequest(BaseModel):
    """Create session payload."""

    kind: SessionKind = SessionKind.GROUP
    title: Optional[str] = Field(None, max_length=200)
    category: Optional[GroupCategory] = None

    model_config = ConfigDict(
        json_schema_extra={
            "example": {"kind": "group", "title": "Sunday check-in", "category": "family"}
        }
    )


class CreateInviteRequest(BaseModel):
    """Create invite payload."""

    max_participants: Optional[int] = Field(None, ge=1, le=50)


class JoinRequest(BaseModel):
    """Join payload; exactly one of invite_code or session_id."""

    invite_code: Optional[str] = Field(None, max_length=32)
    session_id: Optional[str] = None

    @model_validator(mode="after")
    def _exactly_one_target(self) -> "JoinRequest":
        if (self.invite_code is None) == (self.session_id is None):
            raise ValueError("Provide exactly one of invite_code or session_id")
        return self

    model_config = ConfigDict(json_schema_extra={"example": {"invite_code": "K7Q2M9XA"}})


class LockRequest(BaseModel):
    """Safety lock payload."""

    actor: str = Field("admin", min_length=1)
    reason: str = Field(..., min_length=1, max_length=500)


class RelationshipIntroductionBody(BaseModel):
    """Relationship introduction payload."""

    category: Literal["relationship"]
    relationship_role: Optional[str] = Field(None, max_length=_ANSWER_MAX_LENGTH)
    why_wellness: Optional[str] = Field(None, max_length=_ANSWER_MAX_LENGTH)
    goals: Optional[str] = Field(None, max_length=_ANSWER_MAX_LENGTH)
    challenges: Optional[str] = Field(None, max_length=_ANSWER_MAX_LENGTH)

    def to_answers(self) -> IntroductionAnswers:
        return RelationshipIntroduction(**self.model_dump(exclude={"category"}))


class FamilyIntroductionBody(BaseModel):
    """Family introduction payload."""

    category: Literal["family"]
    family_role: Optional[str] = Field(None, max_length=_ANSWER_MAX_LENGTH)
    why_wellness: Optional[str] = Field(None, max_length=_ANSWER_MAX_LENGTH)
    family_goals: Optional[str] = Field(None, max_length=_ANSWER_MAX_LENGTH)
    what_to_achieve: Optional[str] = Field(None, max_length=_ANSWER_MAX_LENGTH)

    def to_answers(self) -> IntroductionAnswers:
        return FamilyIntroduction(**self.model_dump(exclude={"category"}))


class GeneralIntroductionBody(BaseModel):
    """General introduction payload."""

    category: Literal["general"]
    participant_role: Optional[str] = Field(None, max_length=_ANSWER_MAX_LENGTH)
    wellness_reason: Optional[str] = Field(None, max_length=_ANSWER_MAX_LENGTH)
    personal_goals: Optional[str] = Field(None, max_length=_ANSWER_MAX_LENGTH)
    expectations: Optional[str] = Field(None, max_length=_ANSWER_MAX_LENGTH)

    def to_answers(self) -> IntroductionAnswers:
        return GeneralIntroduction(**self.model_dump(exclude={"category"}))


IntroductionRequest = Annotated[
    Union[RelationshipIntroductionBody, FamilyIntroductionBody, GeneralIntroductionBody],
    Field(discriminator="category"),
]


class IntroductionEnvelope(BaseModel):
    """Wrapper so the tagged union can be used as a request body."""

    introduction: IntroductionRequest

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "introduction": {
                    "category": "general",
                    "participant_role": "friend",
                    "personal_goals": "Sleep better",
                }
            }
        }
    )


class HeartbeatResponse(BaseModel):
    """Heartbeat acknowledgement."""

    session_id: str
    user_id: str
    last_heartbeat: datetime
    status: PresenceStatus


class RevokeResponse(BaseModel):
    """Invite revocation result."""

    session_id: str
    revoked: int
