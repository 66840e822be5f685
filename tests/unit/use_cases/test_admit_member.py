"""Unit tests for MembershipAdmission."""

import asyncio

import pytest

from app.domain.entities.membership import MemberRole
from app.domain.entities.session import SessionKind
from app.domain.errors import (
    InvalidStateError,
    InviteExpiredError,
    InviteRevokedError,
    MemberNotFoundError,
    NotAuthorizedError,
    NotOwnerError,
    SessionFullError,
    SessionNotFoundError,
)


@pytest.fixture
def admission(container):
    return container.membership_admission


async def _group_with_invite(container, max_participants=None):
    session = await container.session_manager.create_session("owner", SessionKind.GROUP)
    issued = await container.invite_manager.create_invite(
        session.session_id, "owner", max_participants=max_participants
    )
    return session, issued


@pytest.mark.asyncio
async def test_join_by_code_adds_participant(container, admission):
    """Joining by code creates a participant membership that is not ready."""
    session, issued = await _group_with_invite(container)

    result = await admission.join("alice", invite_code=issued.code)

    assert result.already_member is False
    assert result.membership.session_id == session.session_id
    assert result.membership.role == MemberRole.PARTICIPANT
    assert result.membership.is_ready is False


@pytest.mark.asyncio
async def test_join_twice_returns_existing_membership(container, admission):
    """Re-joining is a success flagged already_member, with the original record."""
    _, issued = await _group_with_invite(container)
    first = await admission.join("alice", invite_code=issued.code)

    second = await admission.join("alice", invite_code=issued.code)

    assert second.already_member is True
    assert second.membership.joined_at == first.membership.joined_at


@pytest.mark.asyncio
async def test_join_full_session_fails_and_leaves_no_trace(container, admission):
    """Joining a full session fails with full and adds nothing."""
    session, issued = await _group_with_invite(container, max_participants=2)
    await admission.join("alice", invite_code=issued.code)

    with pytest.raises(SessionFullError):
        await admission.join("bob", invite_code=issued.code)

    assert await container.membership_repository.count(session.session_id) == 2
    assert await container.membership_repository.get(session.session_id, "bob") is None


@pytest.mark.asyncio
async def test_existing_member_rejoins_full_session(container, admission):
    """Members get their record back even when the session is full."""
    _, issued = await _group_with_invite(container, max_participants=2)
    await admission.join("alice", invite_code=issued.code)

    result = await admission.join("alice", invite_code=issued.code)

    assert result.already_member is True


@pytest.mark.asyncio
async def test_concurrent_joins_never_exceed_capacity(container, admission):
    """Racing joiners for the last seat: exactly one wins."""
    session, issued = await _group_with_invite(container, max_participants=8)
    for i in range(6):
        await admission.join(f"user{i}", invite_code=issued.code)

    results = await asyncio.gather(
        admission.join("racer_a", invite_code=issued.code),
        admission.join("racer_b", invite_code=issued.code),
        return_exceptions=True,
    )

    assert sum(1 for r in results if isinstance(r, SessionFullError)) == 1
    assert await container.membership_repository.count(session.session_id) == 8


@pytest.mark.asyncio
async def test_join_with_expired_or_revoked_code(container, admission, clock):
    """Code errors pass through unchanged."""
    session, issued = await _group_with_invite(container)
    await container.invite_manager.revoke_invite(session.session_id, "owner")
    with pytest.raises(InviteRevokedError):
        await admission.join("alice", invite_code=issued.code)

    fresh = await container.invite_manager.create_invite(session.session_id, "owner")
    clock.advance(hours=25)
    with pytest.raises(InviteExpiredError):
        await admission.join("alice", invite_code=fresh.code)


@pytest.mark.asyncio
async def test_direct_join_requires_invite_or_ownership(container, admission):
    """Without an active invite only the owner can join directly."""
    session = await container.session_manager.create_session("owner", SessionKind.GROUP)

    with pytest.raises(NotAuthorizedError, match="No valid invite"):
        await admission.join("alice", session_id=session.session_id)

    owner = await admission.join("owner", session_id=session.session_id)
    assert owner.already_member is True
    assert owner.membership.role == MemberRole.OWNER


@pytest.mark.asyncio
async def test_direct_join_with_active_invite(container, admission):
    """An active invite lets anyone join by session id."""
    session, _ = await _group_with_invite(container)

    result = await admission.join("alice", session_id=session.session_id)

    assert result.membership.user_id == "alice"


@pytest.mark.asyncio
async def test_direct_join_unknown_session(admission):
    """Unknown session ids fail with not found."""
    with pytest.raises(SessionNotFoundError):
        await admission.join("alice", session_id="missing")


@pytest.mark.asyncio
async def test_join_requires_exactly_one_target(admission):
    """Exactly one of invite code and session id must be given."""
    with pytest.raises(ValueError):
        await admission.join("alice")
    with pytest.raises(ValueError):
        await admission.join("alice", invite_code="ABCDEFGH", session_id="s1")


@pytest.mark.asyncio
async def test_new_participant_cannot_join_started_session(container, admission):
    """New participants may only join while the session is waiting."""
    session, issued = await _group_with_invite(container)
    await admission.join("alice", invite_code=issued.code)
    await container.lifecycle.toggle_ready(session.session_id, "owner")
    await container.lifecycle.toggle_ready(session.session_id, "alice")
    await container.lifecycle.start(session.session_id, "owner")

    with pytest.raises(InvalidStateError):
        await admission.join("bob", invite_code=issued.code)

    again = await admission.join("alice", invite_code=issued.code)
    assert again.already_member is True


@pytest.mark.asyncio
async def test_remove_member(container, admission):
    """The owner can remove a participant; removing again is not found."""
    session, issued = await _group_with_invite(container)
    await admission.join("alice", invite_code=issued.code)

    await admission.remove_member(session.session_id, "owner", "alice")

    assert await container.membership_repository.get(session.session_id, "alice") is None
    with pytest.raises(MemberNotFoundError):
        await admission.remove_member(session.session_id, "owner", "alice")


@pytest.mark.asyncio
async def test_remove_member_guards(container, admission):
    """Only the owner removes, and never themselves."""
    session, issued = await _group_with_invite(container)
    await admission.join("alice", invite_code=issued.code)

    with pytest.raises(NotOwnerError):
        await admission.remove_member(session.session_id, "alice", "owner")
    with pytest.raises(InvalidStateError):
        await admission.remove_member(session.session_id, "owner", "owner")
