"""Unit tests for Postgres presence repository using SQLite in-memory."""

from datetime import datetime, timedelta, timezone

import pytest

from app.adapters.outbound.presence import PostgresPresenceRepository

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def repository(session_factory):
    """Create repository bound to the test database."""
    return PostgresPresenceRepository(session_factory)


@pytest.mark.asyncio
async def test_upsert_only_moves_forward(repository):
    """Newer heartbeats replace older ones, never the reverse."""
    await repository.upsert("s1", "alice", NOW)
    newer = await repository.upsert("s1", "alice", NOW + timedelta(seconds=15))
    stale = await repository.upsert("s1", "alice", NOW + timedelta(seconds=5))

    assert newer.last_heartbeat == NOW + timedelta(seconds=15)
    assert stale.last_heartbeat == NOW + timedelta(seconds=15)
    assert len(await repository.list_for_session("s1")) == 1


def _first_lookup_misses(session_factory):
    """Session factory whose first session cannot see existing rows, as in a racing request."""
    opened = []

    def factory():
        db = session_factory()
        if not opened:
            db.get = lambda *args, **kwargs: None
        opened.append(db)
        return db

    return factory


@pytest.mark.asyncio
async def test_concurrent_first_heartbeat_falls_back_to_update(session_factory):
    """Losing the insert race for a first heartbeat updates the winner's row."""
    await PostgresPresenceRepository(session_factory).upsert("s1", "alice", NOW)
    racing = PostgresPresenceRepository(_first_lookup_misses(session_factory))

    record = await racing.upsert("s1", "alice", NOW + timedelta(seconds=3))

    assert record.last_heartbeat == NOW + timedelta(seconds=3)
    assert record.is_online is True
    stored = await racing.list_for_session("s1")
    assert [(r.user_id, r.last_heartbeat) for r in stored] == [("alice", NOW + timedelta(seconds=3))]


@pytest.mark.asyncio
async def test_delete_older_than_and_for_session(repository):
    """Stale rows are purged by cutoff; a session's rows by id."""
    await repository.upsert("s1", "alice", NOW - timedelta(hours=30))
    await repository.upsert("s1", "bob", NOW)
    await repository.upsert("s2", "carol", NOW)

    assert await repository.delete_older_than(NOW - timedelta(hours=24)) == 1
    assert [r.user_id for r in await repository.list_for_session("s1")] == ["bob"]

    await repository.delete_for_session("s1")
    assert await repository.list_for_session("s1") == []
    assert len(await repository.list_for_session("s2")) == 1
