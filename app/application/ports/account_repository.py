"""Account repository port."""

from abc import ABC, abstractmethod

from app.domain.value_objects.subscription_tier import SubscriptionTier


class AccountRepository(ABC):
    """Port interface for user subscription tiers."""

    @abstractmethod
    async def get_tier(self, user_id: str) -> SubscriptionTier:
        """
        Get a user's subscription tier.

        Args:
            user_id: User identifier

        Returns:
            Subscription tier (FREE for unknown users)
        """
        pass

    @abstractmethod
    async def set_tier(self, user_id: str, tier: SubscriptionTier) -> None:
        """
        Set a user's subscription tier.

        Args:
            user_id: User identifier
            tier: New subscription tier
        """
        pass
