"""Postgres-backed account repository adapter."""

from datetime import datetime, timezone
from typing import Optional

from app.adapters.outbound.persistence.models import UserAccountModel
from app.application.ports.account_repository import AccountRepository
from app.domain.value_objects.subscription_tier import SubscriptionTier
from app.infrastructure.db import SessionFactory, get_db_session, session_scope


class PostgresAccountRepository(AccountRepository):
    """Postgres implementation of account repository."""

    def __init__(self, session_factory: Optional[SessionFactory] = None) -> None:
        """
        Initialize Postgres repository.

        Args:
            session_factory: Callable returning SQLAlchemy sessions
                (defaults to the application engine)
        """
        self._session_factory = session_factory or get_db_session

    async def get_tier(self, user_id: str) -> SubscriptionTier:
        """Get a user's subscription tier (free when no account row exists)."""
        with session_scope(self._session_factory, "get_tier") as db:
            model = db.get(UserAccountModel, user_id)
            if model is None:
                return SubscriptionTier.FREE
            return SubscriptionTier(model.subscription_tier)

    async def set_tier(self, user_id: str, tier: SubscriptionTier) -> None:
        """Set a user's subscription tier."""
        with session_scope(self._session_factory, "set_tier") as db:
            model = db.get(UserAccountModel, user_id)
            if model is None:
                db.add(UserAccountModel(user_id=user_id, subscription_tier=tier.value))
            else:
                model.subscription_tier = tier.value
                model.updated_at = datetime.now(timezone.utc)
