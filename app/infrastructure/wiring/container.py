"""Dependency injection container."""

from datetime import datetime
from typing import Callable, Optional

from app.application.ports.account_repository import AccountRepository
from app.application.ports.introduction_repository import IntroductionRepository
from app.application.ports.invite_repository import InviteRepository
from app.application.ports.membership_repository import MembershipRepository
from app.application.ports.message_store import MessageStore
from app.application.ports.opening_message_generator import OpeningMessageGenerator
from app.application.ports.presence_repository import PresenceRepository
from app.application.ports.rate_limiter import RateLimiter
from app.application.ports.session_repository import SessionRepository
from app.application.use_cases.admit_member import MembershipAdmission
from app.application.use_cases.housekeeping import Housekeeping
from app.application.use_cases.introductions import IntroductionService
from app.application.use_cases.manage_invites import InviteManager
from app.application.use_cases.manage_sessions import SessionManager
from app.application.use_cases.roster_access import RosterAccess
from app.application.use_cases.session_lifecycle import SessionLifecycleController
from app.application.use_cases.track_presence import PresenceTracker
from app.infrastructure.config.settings import settings
from app.infrastructure.logging.logger import (
    log_admission,
    log_event,
    log_invite_event,
    log_roster_access,
    log_transition,
)
from app.infrastructure.wiring.dependencies import (
    create_account_repository,
    create_introduction_repository,
    create_invite_repository,
    create_membership_repository,
    create_message_store,
    create_opening_message_generator,
    create_presence_repository,
    create_presence_thresholds,
    create_rate_limiter,
    create_readiness_policy,
    create_session_repository,
)


class Container:
    """Dependency injection container.

    Every collaborator can be passed in; anything omitted comes from the
    factory functions, which follow the settings.
    """

    def __init__(
        self,
        session_repository: Optional[SessionRepository] = None,
        invite_repository: Optional[InviteRepository] = None,
        membership_repository: Optional[MembershipRepository] = None,
        presence_repository: Optional[PresenceRepository] = None,
        introduction_repository: Optional[IntroductionRepository] = None,
        message_store: Optional[MessageStore] = None,
        account_repository: Optional[AccountRepository] = None,
        rate_limiter: Optional[RateLimiter] = None,
        opening_generator: Optional[OpeningMessageGenerator] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        """Initialize container with dependencies."""
        self.session_repository = session_repository or create_session_repository()
        self.invite_repository = invite_repository or create_invite_repository()
        self.membership_repository = membership_repository or create_membership_repository()
        self.presence_repository = presence_repository or create_presence_repository()
        self.introduction_repository = introduction_repository or create_introduction_repository()
        self.message_store = message_store or create_message_store()
        self.account_repository = account_repository or create_account_repository()
        self.rate_limiter = rate_limiter or create_rate_limiter()
        if opening_generator is None:
            opening_generator = create_opening_message_generator()

        self.roster_access = RosterAccess(
            self.membership_repository,
            self.presence_repository,
            self.introduction_repository,
            logger=log_roster_access,
        )
        self.invite_manager = InviteManager(
            self.session_repository,
            self.invite_repository,
            self.roster_access,
            ttl_hours=settings.invite_ttl_hours,
            code_length=settings.invite_code_length,
            code_attempts=settings.invite_code_attempts,
            default_max_participants=settings.default_max_participants,
            public_base_url=settings.public_base_url,
            logger=log_invite_event,
            clock=clock,
        )
        self.membership_admission = MembershipAdmission(
            self.session_repository,
            self.invite_repository,
            self.membership_repository,
            self.invite_manager,
            default_max_participants=settings.default_max_participants,
            logger=log_admission,
            clock=clock,
        )
        self.presence_tracker = PresenceTracker(
            self.session_repository,
            self.membership_repository,
            self.presence_repository,
            self.roster_access,
            thresholds=create_presence_thresholds(),
            heartbeat_interval_seconds=settings.heartbeat_interval_seconds,
            clock=clock,
        )
        self.lifecycle = SessionLifecycleController(
            self.session_repository,
            self.membership_repository,
            self.account_repository,
            self.message_store,
            self.presence_tracker,
            self.roster_access,
            readiness_policy=create_readiness_policy(),
            opening_generator=opening_generator,
            free_tier_session_minutes=settings.free_tier_session_minutes,
            free_tier_max_sessions=settings.free_tier_max_sessions,
            logger=log_transition,
            clock=clock,
        )
        self.session_manager = SessionManager(
            self.session_repository,
            self.membership_repository,
            self.invite_repository,
            self.presence_repository,
            self.introduction_repository,
            self.message_store,
            default_max_participants=settings.default_max_participants,
            logger=log_event,
            clock=clock,
        )
        self.introductions = IntroductionService(
            self.session_repository,
            self.membership_repository,
            self.invite_repository,
            self.introduction_repository,
            self.roster_access,
            clock=clock,
        )
        self.housekeeping = Housekeeping(
            self.invite_repository,
            self.presence_repository,
            presence_retention_hours=settings.presence_retention_hours,
            logger=log_event,
        )


# Global container instance
container = Container()


def get_container() -> Container:
    """FastAPI dependency returning the application container."""
    return container
