"""No-op rate limiter adapter for when rate limiting is disabled."""

from datetime import datetime, timezone

from app.adapters.outbound.rate_limit.windows import current_window
from app.application.dtos.rate_limit import RateLimitResult
from app.application.ports.rate_limiter import EndpointType, RateLimiter


class NoOpRateLimiter(RateLimiter):
    """No-op adapter that allows every request."""

    async def hit(self, user_id: str, endpoint_type: EndpointType) -> RateLimitResult:
        """
        Always allow.

        Args:
            user_id: Caller identifier (ignored)
            endpoint_type: Budget bucket (ignored)

        Returns:
            Allowing result with no limit
        """
        _, reset_at = current_window(datetime.now(timezone.utc))
        return RateLimitResult(allowed=True, limit=0, remaining=0, reset_at=reset_at)
