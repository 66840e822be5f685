"""SQLAlchemy ORM models for group session coordination."""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    text,
)
from sqlalchemy.orm import declarative_base

Base = declarative_base()


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Attach UTC to naive datetimes returned by drivers that drop the offset."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class GroupSessionModel(Base):
    """SQLAlchemy model for group_sessions table."""

    __tablename__ = "group_sessions"

    session_id = Column(String, primary_key=True)
    owner_id = Column(String, nullable=False, index=True)
    kind = Column(String, nullable=False)
    status = Column(String, nullable=False)
    title = Column(String, nullable=True)
    category = Column(String, nullable=True)
    is_locked = Column(Boolean, nullable=False, default=False)
    lock_reason = Column(Text, nullable=True)
    locked_by = Column(String, nullable=True)
    locked_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utc_now)
    last_activity_at = Column(DateTime(timezone=True), nullable=False, default=_utc_now)


class SessionInviteModel(Base):
    """SQLAlchemy model for session_invites table."""

    __tablename__ = "session_invites"
    __table_args__ = (
        # At most one active invite per session
        Index(
            "uq_session_invites_active_session",
            "session_id",
            unique=True,
            postgresql_where=text("is_active"),
            sqlite_where=text("is_active"),
        ),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    code = Column(String, nullable=False, unique=True)
    session_id = Column(
        String, ForeignKey("group_sessions.session_id", ondelete="CASCADE"), nullable=False, index=True
    )
    created_by = Column(String, nullable=False)
    expires_at = Column(DateTime(timezone=True), nullable=False)
    max_participants = Column(Integer, nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utc_now)


class SessionParticipantModel(Base):
    """SQLAlchemy model for session_participants table."""

    __tablename__ = "session_participants"
    __table_args__ = (UniqueConstraint("session_id", "user_id", name="uq_session_participant"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    session_id = Column(
        String, ForeignKey("group_sessions.session_id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id = Column(String, nullable=False, index=True)
    role = Column(String, nullable=False)
    is_ready = Column(Boolean, nullable=False, default=False)
    joined_at = Column(DateTime(timezone=True), nullable=False, default=_utc_now)


class ParticipantPresenceModel(Base):
    """SQLAlchemy model for participant_presence table."""

    __tablename__ = "participant_presence"

    session_id = Column(
        String, ForeignKey("group_sessions.session_id", ondelete="CASCADE"), primary_key=True
    )
    user_id = Column(String, primary_key=True)
    last_heartbeat = Column(DateTime(timezone=True), nullable=False, index=True)
    is_online = Column(Boolean, nullable=False, default=True)


class ParticipantIntroductionModel(Base):
    """SQLAlchemy model for participant_introductions table."""

    __tablename__ = "participant_introductions"
    __table_args__ = (UniqueConstraint("session_id", "user_id", name="uq_participant_introduction"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    session_id = Column(
        String, ForeignKey("group_sessions.session_id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id = Column(String, nullable=False)
    category = Column(String, nullable=False)
    answers = Column(JSON, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utc_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utc_now, onupdate=_utc_now)


class SessionMessageModel(Base):
    """SQLAlchemy model for session_messages table."""

    __tablename__ = "session_messages"

    message_id = Column(String, primary_key=True)
    session_id = Column(
        String, ForeignKey("group_sessions.session_id", ondelete="CASCADE"), nullable=False, index=True
    )
    role = Column(String, nullable=False)
    user_id = Column(String, nullable=True)
    content = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utc_now)


class UserAccountModel(Base):
    """SQLAlchemy model for user_accounts table."""

    __tablename__ = "user_accounts"

    user_id = Column(String, primary_key=True)
    subscription_tier = Column(String, nullable=False, default="free")
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utc_now, onupdate=_utc_now)
