"""Unit tests for Postgres invite repository using SQLite in-memory."""

from datetime import datetime, timedelta, timezone

import pytest

from app.adapters.outbound.invites import PostgresInviteRepository
from app.application.ports.invite_repository import InviteConflictError
from app.domain.entities.invite import Invite

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def repository(session_factory):
    """Create repository bound to the test database."""
    return PostgresInviteRepository(session_factory)


def _invite(code: str, session_id: str = "s1", ttl_hours: int = 24) -> Invite:
    return Invite.issue(code, session_id, "owner", timedelta(hours=ttl_hours), 8, now=NOW)


@pytest.mark.asyncio
async def test_create_and_lookup(repository):
    """A created invite is found by code and as the session's active invite."""
    await repository.create(_invite("ABCD2345"))

    by_code = await repository.get_by_code("ABCD2345")
    active = await repository.get_active_for_session("s1", NOW)

    assert by_code.session_id == "s1"
    assert by_code.expires_at == NOW + timedelta(hours=24)
    assert active.code == "ABCD2345"
    assert await repository.get_active_for_session("s1", NOW + timedelta(hours=25)) is None


@pytest.mark.asyncio
async def test_duplicate_code_conflicts(repository):
    """Codes are unique across sessions."""
    await repository.create(_invite("ABCD2345", "s1"))

    with pytest.raises(InviteConflictError):
        await repository.create(_invite("ABCD2345", "s2"))


@pytest.mark.asyncio
async def test_second_active_invite_conflicts(repository):
    """A session holds at most one active invite."""
    await repository.create(_invite("ABCD2345"))

    with pytest.raises(InviteConflictError):
        await repository.create(_invite("WXYZ6789"))

    assert await repository.deactivate_for_session("s1") == 1
    await repository.create(_invite("WXYZ6789"))
    assert (await repository.get_active_for_session("s1", NOW)).code == "WXYZ6789"


@pytest.mark.asyncio
async def test_deactivate_expired(repository):
    """Only invites past their expiry are deactivated, optionally per session."""
    await repository.create(_invite("AAAA2222", "s1", ttl_hours=1))
    await repository.create(_invite("BBBB3333", "s2", ttl_hours=1))
    await repository.create(_invite("CCCC4444", "s3", ttl_hours=48))
    later = NOW + timedelta(hours=2)

    assert await repository.deactivate_expired(later, session_id="s1") == 1
    assert await repository.deactivate_expired(later) == 1
    assert (await repository.get_by_code("AAAA2222")).is_active is False
    assert (await repository.get_by_code("CCCC4444")).is_active is True


@pytest.mark.asyncio
async def test_delete_for_session(repository):
    """Deleting a session's invites removes inactive ones too."""
    await repository.create(_invite("ABCD2345"))
    await repository.deactivate_for_session("s1")

    await repository.delete_for_session("s1")

    assert await repository.get_by_code("ABCD2345") is None
