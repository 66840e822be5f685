"""Unit tests for Postgres message store and account repository using SQLite in-memory."""

import pytest

from app.adapters.outbound.accounts import PostgresAccountRepository
from app.adapters.outbound.messages import PostgresMessageStore
from app.adapters.outbound.persistence.models import SessionMessageModel
from app.domain.value_objects.subscription_tier import SubscriptionTier


def _seed(session_factory, session_id, *contents):
    db = session_factory()
    try:
        for i, content in enumerate(contents):
            db.add(
                SessionMessageModel(
                    message_id=f"{session_id}-{i}",
                    session_id=session_id,
                    role="user",
                    user_id="alice",
                    content=content,
                )
            )
        db.commit()
    finally:
        db.close()


def _contents(session_factory, session_id):
    db = session_factory()
    try:
        models = db.query(SessionMessageModel).filter(SessionMessageModel.session_id == session_id).all()
        return [(m.role, m.content) for m in models]
    finally:
        db.close()


@pytest.mark.asyncio
async def test_replace_and_clear_return_deleted_count(session_factory):
    """Replacing swaps a session's history for one coach message; clearing removes it."""
    store = PostgresMessageStore(session_factory)
    _seed(session_factory, "s1", "Hello", "Again")
    _seed(session_factory, "s2", "Other")

    assert await store.replace_with_ai_message("s1", "Welcome back") == 2
    assert _contents(session_factory, "s1") == [("ai", "Welcome back")]
    assert _contents(session_factory, "s2") == [("user", "Other")]

    assert await store.clear("s1") == 1
    assert await store.clear("s1") == 0
    assert _contents(session_factory, "s1") == []


@pytest.mark.asyncio
async def test_unknown_account_is_free_and_tier_updates(session_factory):
    """Users without an account row are on the free tier."""
    accounts = PostgresAccountRepository(session_factory)

    assert await accounts.get_tier("u1") == SubscriptionTier.FREE

    await accounts.set_tier("u1", SubscriptionTier.PRO)
    assert await accounts.get_tier("u1") == SubscriptionTier.PRO

    await accounts.set_tier("u1", SubscriptionTier.FREE)
    assert await accounts.get_tier("u1") == SubscriptionTier.FREE
