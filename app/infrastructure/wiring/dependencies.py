"""Dependency injection factory functions."""

from typing import Optional

from app.adapters.outbound.accounts import InMemoryAccountRepository, PostgresAccountRepository
from app.adapters.outbound.introductions import (
    InMemoryIntroductionRepository,
    PostgresIntroductionRepository,
)
from app.adapters.outbound.invites import InMemoryInviteRepository, PostgresInviteRepository
from app.adapters.outbound.llm.openai_opening_message_generator import (
    OpenAIOpeningMessageGenerator,
)
from app.adapters.outbound.memberships import (
    InMemoryMembershipRepository,
    PostgresMembershipRepository,
)
from app.adapters.outbound.messages import InMemoryMessageStore, PostgresMessageStore
from app.adapters.outbound.presence import InMemoryPresenceRepository, PostgresPresenceRepository
from app.adapters.outbound.rate_limit import (
    InMemoryRateLimiter,
    NoOpRateLimiter,
    RedisRateLimiter,
)
from app.adapters.outbound.sessions import InMemorySessionRepository, PostgresSessionRepository
from app.application.ports.account_repository import AccountRepository
from app.application.ports.introduction_repository import IntroductionRepository
from app.application.ports.invite_repository import InviteRepository
from app.application.ports.membership_repository import MembershipRepository
from app.application.ports.message_store import MessageStore
from app.application.ports.opening_message_generator import OpeningMessageGenerator
from app.application.ports.presence_repository import PresenceRepository
from app.application.ports.rate_limiter import EndpointType, RateLimiter
from app.application.ports.session_repository import SessionRepository
from app.domain.entities.presence import PresenceThresholds
from app.domain.value_objects.readiness_policy import ReadinessPolicy
from app.infrastructure.config.settings import settings
from app.infrastructure.logging.logger import logger


def _use_postgres() -> bool:
    """
    Whether repositories should be backed by the relational store.

    Returns:
        True for the postgres backend
    """
    if settings.repository_backend == "postgres":
        if not settings.database_url:
            raise ValueError("DATABASE_URL is required when REPOSITORY_BACKEND=postgres")
        return True
    return False


def create_session_repository() -> SessionRepository:
    """
    Factory function to create session repository.

    Returns:
        SessionRepository instance
    """
    return PostgresSessionRepository() if _use_postgres() else InMemorySessionRepository()


def create_invite_repository() -> InviteRepository:
    """
    Factory function to create invite repository.

    Returns:
        InviteRepository instance
    """
    return PostgresInviteRepository() if _use_postgres() else InMemoryInviteRepository()


def create_membership_repository() -> MembershipRepository:
    """
    Factory function to create membership repository.

    Returns:
        MembershipRepository instance
    """
    return PostgresMembershipRepository() if _use_postgres() else InMemoryMembershipRepository()


def create_presence_repository() -> PresenceRepository:
    """
    Factory function to create presence repository.

    Returns:
        PresenceRepository instance
    """
    return PostgresPresenceRepository() if _use_postgres() else InMemoryPresenceRepository()


def create_introduction_repository() -> IntroductionRepository:
    """
    Factory function to create introduction repository.

    Returns:
        IntroductionRepository instance
    """
    if _use_postgres():
        return PostgresIntroductionRepository()
    return InMemoryIntroductionRepository()


def create_message_store() -> MessageStore:
    """
    Factory function to create the chat message store.

    Returns:
        MessageStore instance
    """
    return PostgresMessageStore() if _use_postgres() else InMemoryMessageStore()


def create_account_repository() -> AccountRepository:
    """
    Factory function to create account repository.

    Returns:
        AccountRepository instance
    """
    return PostgresAccountRepository() if _use_postgres() else InMemoryAccountRepository()


def create_opening_message_generator() -> Optional[OpeningMessageGenerator]:
    """
    Factory function to create the opening message generator if enabled.

    Returns:
        OpeningMessageGenerator instance if enabled, None otherwise
    """
    if not settings.llm_enabled:
        return None

    try:
        return OpenAIOpeningMessageGenerator()
    except ValueError as e:
        # Missing API key: restarts fall back to the fixed opening
        logger.warning(f"Opening message generator disabled: {str(e)}")
        return None


def create_rate_limiter() -> RateLimiter:
    """
    Factory function to create rate limiter.

    Returns:
        RateLimiter instance (in-memory, Redis or NoOp)
    """
    limits = {
        EndpointType.GENERAL_API: settings.rate_limit_general_per_hour,
        EndpointType.AI_CALL: settings.rate_limit_ai_per_hour,
    }
    if settings.rate_limiter == "none":
        return NoOpRateLimiter()
    if settings.rate_limiter == "redis":
        if not settings.redis_url:
            # Redis selected but no URL configured
            return InMemoryRateLimiter(limits)
        return RedisRateLimiter(settings.redis_url, limits)
    return InMemoryRateLimiter(limits)


def create_readiness_policy() -> ReadinessPolicy:
    """
    Factory function to create the start gate policy.

    Returns:
        ReadinessPolicy instance
    """
    return ReadinessPolicy(
        min_ready_participants=settings.min_ready_participants,
        require_all_ready=settings.require_all_ready,
    )


def create_presence_thresholds() -> PresenceThresholds:
    """
    Factory function to create presence thresholds.

    Returns:
        PresenceThresholds instance
    """
    return PresenceThresholds(
        online_seconds=settings.online_threshold_seconds,
        away_seconds=settings.away_threshold_seconds,
    )
