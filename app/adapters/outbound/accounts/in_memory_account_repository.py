"""In-memory account repository adapter."""

from app.application.ports.account_repository import AccountRepository
from app.domain.value_objects.subscription_tier import SubscriptionTier


class InMemoryAccountRepository(AccountRepository):
    """In-memory implementation of account repository. Unknown users are free."""

    def __init__(self) -> None:
        """Initialize in-memory repository."""
        self._storage: dict[str, SubscriptionTier] = {}

    async def get_tier(self, user_id: str) -> SubscriptionTier:
        """Get a user's subscription tier."""
        return self._storage.get(user_id, SubscriptionTier.FREE)

    async def set_tier(self, user_id: str, tier: SubscriptionTier) -> None:
        """Set a user's subscription tier."""
        self._storage[user_id] = tier
