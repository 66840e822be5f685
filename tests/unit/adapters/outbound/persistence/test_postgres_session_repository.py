"""Unit tests for Postgres session repository using SQLite in-memory."""

from datetime import datetime, timezone

import pytest

from app.adapters.outbound.sessions import PostgresSessionRepository
from app.domain.entities.session import GroupCategory, Session, SessionKind, SessionStatus
from app.domain.errors import SessionNotFoundError


@pytest.fixture
def repository(session_factory):
    """Create repository bound to the test database."""
    return PostgresSessionRepository(session_factory)


def _group(owner_id: str = "owner") -> Session:
    now = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)
    return Session(
        owner_id=owner_id,
        kind=SessionKind.GROUP,
        status=SessionStatus.WAITING,
        title="Evening circle",
        category=GroupCategory.RELATIONSHIP,
        created_at=now,
        last_activity_at=now,
    )


@pytest.mark.asyncio
async def test_add_and_get_round_trip(repository):
    """A stored session reads back with UTC timestamps."""
    session = await repository.add(_group())

    loaded = await repository.get(session.session_id)

    assert loaded.owner_id == "owner"
    assert loaded.kind == SessionKind.GROUP
    assert loaded.category == GroupCategory.RELATIONSHIP
    assert loaded.created_at == datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)
    assert loaded.is_locked is False


@pytest.mark.asyncio
async def test_save_persists_status_and_lock(repository):
    """Status and lock fields are written back."""
    session = await repository.add(_group())
    session.status = SessionStatus.ENDED
    session.lock("owner", "Session ended by owner", datetime(2026, 3, 1, 13, 0, tzinfo=timezone.utc))

    await repository.save(session)
    loaded = await repository.get(session.session_id)

    assert loaded.status == SessionStatus.ENDED
    assert loaded.is_locked is True
    assert loaded.lock_reason == "Session ended by owner"
    assert loaded.locked_by == "owner"
    assert loaded.locked_at == datetime(2026, 3, 1, 13, 0, tzinfo=timezone.utc)


@pytest.mark.asyncio
async def test_save_unknown_session_raises(repository):
    """Saving a session that was never added fails."""
    with pytest.raises(SessionNotFoundError):
        await repository.save(_group())


@pytest.mark.asyncio
async def test_count_and_delete(repository):
    """Owner counts follow inserts and deletes."""
    first = await repository.add(_group())
    await repository.add(_group())
    await repository.add(_group("someone_else"))

    assert await repository.count_for_owner("owner") == 2
    assert await repository.delete(first.session_id) is True
    assert await repository.delete(first.session_id) is False
    assert await repository.count_for_owner("owner") == 1
    assert await repository.get(first.session_id) is None
