"""Create participant introductions, session messages and user accounts tables

Revision ID: 002
Revises: 001
Create Date: 2026-10-18 00:10:00.000000

"""

from collections.abc import Sequence
from typing import Union

import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "participant_introductions",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("session_id", sa.String(), nullable=False),
        sa.Column("user_id", sa.String(), nullable=False),
        sa.Column("category", sa.String(), nullable=False),
        sa.Column("answers", postgresql.JSON(astext_type=sa.Text()), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("session_id", "user_id", name="uq_participant_introduction"),
        sa.ForeignKeyConstraint(
            ["session_id"], ["group_sessions.session_id"], ondelete="CASCADE"
        ),
        sa.CheckConstraint(
            "category IN ('relationship', 'family', 'general')",
            name="ck_participant_introductions_category",
        ),
    )
    op.create_index(
        op.f("ix_participant_introductions_session_id"),
        "participant_introductions",
        ["session_id"],
        unique=False,
    )

    op.create_table(
        "session_messages",
        sa.Column("message_id", sa.String(), nullable=False),
        sa.Column("session_id", sa.String(), nullable=False),
        sa.Column("role", sa.String(), nullable=False),
        sa.Column("user_id", sa.String(), nullable=True),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("message_id"),
        sa.ForeignKeyConstraint(
            ["session_id"], ["group_sessions.session_id"], ondelete="CASCADE"
        ),
    )
    op.create_index(
        op.f("ix_session_messages_session_id"), "session_messages", ["session_id"], unique=False
    )

    op.create_table(
        "user_accounts",
        sa.Column("user_id", sa.String(), nullable=False),
        sa.Column("subscription_tier", sa.String(), nullable=False, server_default="free"),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("user_id"),
    )


def downgrade() -> None:
    op.drop_table("user_accounts")
    op.drop_index(op.f("ix_session_messages_session_id"), table_name="session_messages")
    op.drop_table("session_messages")
    op.drop_index(
        op.f("ix_participant_introductions_session_id"), table_name="participant_introductions"
    )
    op.drop_table("participant_introductions")
