"""Subscription tier value object."""

from enum import Enum


class SubscriptionTier(str, Enum):
    """Billing tier, flipped by the payment provider's webhooks."""

    FREE = "free"
    PRO = "pro"
