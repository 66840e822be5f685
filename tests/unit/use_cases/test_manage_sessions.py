"""Unit tests for SessionManager."""

import pytest

from app.domain.entities.introduction import GeneralIntroduction
from app.domain.entities.membership import MemberRole
from app.domain.entities.session import GroupCategory, SessionKind, SessionStatus
from app.domain.errors import (
    InvalidStateError,
    NotAuthorizedError,
    NotOwnerError,
    SessionNotFoundError,
    StoreUnavailableError,
)


@pytest.mark.asyncio
async def test_create_group_session_seats_owner(container, clock):
    """Group sessions start waiting with the owner as first member."""
    session = await container.session_manager.create_session("owner", SessionKind.GROUP)

    assert session.status == SessionStatus.WAITING
    assert session.title == "Group Session"
    assert session.category == GroupCategory.GENERAL
    assert session.created_at == clock.now

    members = await container.membership_repository.list_for_session(session.session_id)
    assert [(m.user_id, m.role) for m in members] == [("owner", MemberRole.OWNER)]


@pytest.mark.asyncio
async def test_create_group_session_rolls_back_when_owner_seat_fails(container, monkeypatch):
    """No session is left behind when the owner cannot be seated."""

    async def broken_add(membership, capacity):
        raise StoreUnavailableError("add_membership")

    monkeypatch.setattr(container.membership_repository, "add_within_capacity", broken_add)

    with pytest.raises(StoreUnavailableError):
        await container.session_manager.create_session("owner", SessionKind.GROUP)

    assert await container.session_repository.count_for_owner("owner") == 0


@pytest.mark.asyncio
async def test_create_individual_session_is_active(container):
    """Individual sessions have no roster and start active."""
    session = await container.session_manager.create_session(
        "owner", SessionKind.INDIVIDUAL, title="Morning check-in"
    )

    assert session.status == SessionStatus.ACTIVE
    assert session.category is None
    assert await container.membership_repository.count(session.session_id) == 0


@pytest.mark.asyncio
async def test_get_session_for_owner_and_members_only(container):
    """Owners and members can read a session; others cannot."""
    session = await container.session_manager.create_session(
        "owner", SessionKind.GROUP, category=GroupCategory.FAMILY
    )
    issued = await container.invite_manager.create_invite(session.session_id, "owner")
    await container.membership_admission.join("alice", invite_code=issued.code)

    assert (await container.session_manager.get_session(session.session_id, "alice")).category == GroupCategory.FAMILY
    with pytest.raises(NotAuthorizedError):
        await container.session_manager.get_session(session.session_id, "stranger")
    with pytest.raises(SessionNotFoundError):
        await container.session_manager.get_session("missing", "owner")


@pytest.mark.asyncio
async def test_delete_session_cascades(container):
    """Deleting a group session removes its invites, members, presence and introductions."""
    session = await container.session_manager.create_session("owner", SessionKind.GROUP)
    sid = session.session_id
    issued = await container.invite_manager.create_invite(sid, "owner")
    await container.membership_admission.join("alice", invite_code=issued.code)
    await container.presence_tracker.heartbeat(sid, "alice")
    await container.introductions.submit(sid, "alice", GeneralIntroduction(personal_goals="Rest"))

    await container.session_manager.delete_session(sid, "owner")

    assert await container.session_repository.get(sid) is None
    assert await container.invite_repository.get_by_code(issued.code) is None
    assert await container.membership_repository.count(sid) == 0
    assert await container.presence_repository.list_for_session(sid) == []
    assert await container.introduction_repository.list_for_session(sid) == []


@pytest.mark.asyncio
async def test_delete_session_requires_owner(container):
    """Members cannot delete the session."""
    session = await container.session_manager.create_session("owner", SessionKind.INDIVIDUAL)

    with pytest.raises(NotOwnerError):
        await container.session_manager.delete_session(session.session_id, "alice")


@pytest.mark.asyncio
async def test_introduction_session_delete_restricted(container):
    """The introduction session stays while the owner has other sessions."""
    intro = await container.session_manager.create_session("owner", SessionKind.INTRODUCTION)
    other = await container.session_manager.create_session("owner", SessionKind.INDIVIDUAL)

    with pytest.raises(InvalidStateError) as exc_info:
        await container.session_manager.delete_session(intro.session_id, "owner")
    assert exc_info.value.details["code"] == "INTRODUCTION_DELETE_RESTRICTED"

    await container.session_manager.delete_session(other.session_id, "owner")
    await container.session_manager.delete_session(intro.session_id, "owner")
    assert await container.session_repository.count_for_owner("owner") == 0
