"""Create group session, invite, participant and presence tables

Revision ID: 001
Revises:
Create Date: 2026-10-18 00:00:00.000000

"""

from collections.abc import Sequence
from typing import Union

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "group_sessions",
        sa.Column("session_id", sa.String(), nullable=False),
        sa.Column("owner_id", sa.String(), nullable=False),
        sa.Column("kind", sa.String(), nullable=False),
        sa.Column("status", sa.String(), nullable=False),
        sa.Column("title", sa.String(), nullable=True),
        sa.Column("category", sa.String(), nullable=True),
        sa.Column("is_locked", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("lock_reason", sa.Text(), nullable=True),
        sa.Column("locked_by", sa.String(), nullable=True),
        sa.Column("locked_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("last_activity_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("session_id"),
        sa.CheckConstraint(
            "kind IN ('individual', 'group', 'introduction')", name="ck_group_sessions_kind"
        ),
        sa.CheckConstraint(
            "status IN ('waiting', 'active', 'paused', 'ended')", name="ck_group_sessions_status"
        ),
    )
    op.create_index(
        op.f("ix_group_sessions_owner_id"), "group_sessions", ["owner_id"], unique=False
    )

    op.create_table(
        "session_invites",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("code", sa.String(), nullable=False),
        sa.Column("session_id", sa.String(), nullable=False),
        sa.Column("created_by", sa.String(), nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("max_participants", sa.Integer(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("code"),
        sa.ForeignKeyConstraint(
            ["session_id"], ["group_sessions.session_id"], ondelete="CASCADE"
        ),
        sa.CheckConstraint("max_participants > 0", name="ck_session_invites_capacity"),
    )
    op.create_index(
        op.f("ix_session_invites_session_id"), "session_invites", ["session_id"], unique=False
    )
    # At most one active invite per session
    op.create_index(
        "uq_session_invites_active_session",
        "session_invites",
        ["session_id"],
        unique=True,
        postgresql_where=sa.text("is_active"),
    )

    op.create_table(
        "session_participants",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("session_id", sa.String(), nullable=False),
        sa.Column("user_id", sa.String(), nullable=False),
        sa.Column("role", sa.String(), nullable=False),
        sa.Column("is_ready", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("joined_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("session_id", "user_id", name="uq_session_participant"),
        sa.ForeignKeyConstraint(
            ["session_id"], ["group_sessions.session_id"], ondelete="CASCADE"
        ),
    )
    op.create_index(
        op.f("ix_session_participants_session_id"),
        "session_participants",
        ["session_id"],
        unique=False,
    )
    op.create_index(
        op.f("ix_session_participants_user_id"), "session_participants", ["user_id"], unique=False
    )

    op.create_table(
        "participant_presence",
        sa.Column("session_id", sa.String(), nullable=False),
        sa.Column("user_id", sa.String(), nullable=False),
        sa.Column("last_heartbeat", sa.DateTime(timezone=True), nullable=False),
        sa.Column("is_online", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.PrimaryKeyConstraint("session_id", "user_id"),
        sa.ForeignKeyConstraint(
            ["session_id"], ["group_sessions.session_id"], ondelete="CASCADE"
        ),
    )
    op.create_index(
        op.f("ix_participant_presence_last_heartbeat"),
        "participant_presence",
        ["last_heartbeat"],
        unique=False,
    )


def downgrade() -> None:
    op.drop_index(
        op.f("ix_participant_presence_last_heartbeat"), table_name="participant_presence"
    )
    op.drop_table("participant_presence")
    op.drop_index(op.f("ix_session_participants_user_id"), table_name="session_participants")
    op.drop_index(op.f("ix_session_participants_session_id"), table_name="session_participants")
    op.drop_table("session_participants")
    op.drop_index("uq_session_invites_active_session", table_name="session_invites")
    op.drop_index(op.f("ix_session_invites_session_id"), table_name="session_invites")
    op.drop_table("session_invites")
    op.drop_index(op.f("ix_group_sessions_owner_id"), table_name="group_sessions")
    op.drop_table("group_sessions")
