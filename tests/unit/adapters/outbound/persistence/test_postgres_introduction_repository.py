"""Unit tests for Postgres introduction repository using SQLite in-memory."""

from datetime import datetime, timedelta, timezone

import pytest

from app.adapters.outbound.introductions import PostgresIntroductionRepository
from app.domain.entities.introduction import FamilyIntroduction, Introduction

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def repository(session_factory):
    """Create repository bound to the test database."""
    return PostgresIntroductionRepository(session_factory)


@pytest.mark.asyncio
async def test_upsert_replaces_answers_and_keeps_created_at(repository):
    """The second submission overwrites answers but not the creation time."""
    await repository.upsert(
        Introduction("s1", "alice", FamilyIntroduction(family_role="Parent"), created_at=NOW, updated_at=NOW)
    )
    later = NOW + timedelta(minutes=10)
    await repository.upsert(
        Introduction(
            "s1",
            "alice",
            FamilyIntroduction(family_role="Parent", family_goals="Fewer fights"),
            created_at=later,
            updated_at=later,
        )
    )

    intros = await repository.list_for_session("s1")

    assert len(intros) == 1
    assert intros[0].answers == FamilyIntroduction(family_role="Parent", family_goals="Fewer fights")
    assert intros[0].created_at == NOW
    assert intros[0].updated_at == later


@pytest.mark.asyncio
async def test_list_orders_by_creation_and_delete(repository):
    """Introductions list earliest first and are removed per session."""
    await repository.upsert(
        Introduction("s1", "bob", FamilyIntroduction(family_role="Teen"), created_at=NOW + timedelta(minutes=1))
    )
    await repository.upsert(
        Introduction("s1", "alice", FamilyIntroduction(family_role="Parent"), created_at=NOW)
    )

    assert [i.user_id for i in await repository.list_for_session("s1")] == ["alice", "bob"]

    await repository.delete_for_session("s1")
    assert await repository.list_for_session("s1") == []
