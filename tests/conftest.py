"""Shared test fixtures."""

from datetime import datetime, timedelta, timezone

import pytest

from app.adapters.outbound.rate_limit import NoOpRateLimiter
from app.infrastructure.wiring.container import Container


class FakeClock:
    """Controllable time source for use cases."""

    def __init__(self, start: datetime) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


@pytest.fixture
def clock():
    """Clock starting at a fixed instant."""
    return FakeClock(datetime(2026, 3, 1, 12, 0, 0, tzinfo=timezone.utc))


@pytest.fixture
def container(clock):
    """Fresh in-memory container driven by the fake clock."""
    from app.adapters.outbound.accounts import InMemoryAccountRepository
    from app.adapters.outbound.introductions import InMemoryIntroductionRepository
    from app.adapters.outbound.invites import InMemoryInviteRepository
    from app.adapters.outbound.memberships import InMemoryMembershipRepository
    from app.adapters.outbound.messages import InMemoryMessageStore
    from app.adapters.outbound.presence import InMemoryPresenceRepository
    from app.adapters.outbound.sessions import InMemorySessionRepository

    return Container(
        session_repository=InMemorySessionRepository(),
        invite_repository=InMemoryInviteRepository(),
        membership_repository=InMemoryMembershipRepository(),
        presence_repository=InMemoryPresenceRepository(),
        introduction_repository=InMemoryIntroductionRepository(),
        message_store=InMemoryMessageStore(),
        account_repository=InMemoryAccountRepository(),
        rate_limiter=NoOpRateLimiter(),
        clock=clock,
    )
