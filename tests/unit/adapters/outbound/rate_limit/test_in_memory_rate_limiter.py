"""Unit tests for in-memory and no-op rate limiters."""

from datetime import datetime, timezone

import pytest

from app.adapters.outbound.rate_limit import InMemoryRateLimiter, NoOpRateLimiter
from app.application.ports.rate_limiter import EndpointType


@pytest.mark.asyncio
async def test_budget_is_per_user_and_endpoint_type(clock):
    """Each (user, endpoint type) pair has its own counter."""
    limiter = InMemoryRateLimiter({EndpointType.GENERAL_API: 2, EndpointType.AI_CALL: 1}, clock=clock)

    assert (await limiter.hit("u1", EndpointType.AI_CALL)).allowed is True
    assert (await limiter.hit("u1", EndpointType.AI_CALL)).allowed is False
    assert (await limiter.hit("u2", EndpointType.AI_CALL)).allowed is True
    general = await limiter.hit("u1", EndpointType.GENERAL_API)
    assert general.allowed is True
    assert general.remaining == 1


@pytest.mark.asyncio
async def test_counter_resets_with_next_window(clock):
    """A new hour starts a fresh budget."""
    limiter = InMemoryRateLimiter({EndpointType.GENERAL_API: 1, EndpointType.AI_CALL: 1}, clock=clock)
    await limiter.hit("u1", EndpointType.GENERAL_API)
    refused = await limiter.hit("u1", EndpointType.GENERAL_API)
    assert refused.allowed is False
    assert refused.reset_at == datetime(2026, 3, 1, 13, 0, tzinfo=timezone.utc)

    clock.advance(hours=1)

    assert (await limiter.hit("u1", EndpointType.GENERAL_API)).allowed is True


@pytest.mark.asyncio
async def test_noop_limiter_always_allows():
    """The no-op limiter never refuses."""
    limiter = NoOpRateLimiter()

    for _ in range(5):
        assert (await limiter.hit("u1", EndpointType.AI_CALL)).allowed is True
