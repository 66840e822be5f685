"""Rate limiter port."""

from abc import ABC, abstractmethod
from enum import Enum

from app.application.dtos.rate_limit import RateLimitResult


class EndpointType(str, Enum):
    """Budget bucket a request is counted against."""

    GENERAL_API = "general_api"
    AI_CALL = "ai_call"


class RateLimiter(ABC):
    """Port interface for rate limiter."""

    @abstractmethod
    async def hit(self, user_id: str, endpoint_type: EndpointType) -> RateLimitResult:
        """
        Count one request and report whether it is within budget.

        Args:
            user_id: Caller identifier
            endpoint_type: Budget bucket

        Returns:
            Rate limit result for the current window
        """
        pass
