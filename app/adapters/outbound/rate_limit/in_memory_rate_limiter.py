"""In-memory rate limiter adapter."""

from datetime import datetime, timezone
from typing import Callable, Optional

from app.adapters.outbound.rate_limit.windows import current_window
from app.application.dtos.rate_limit import RateLimitResult
from app.application.ports.rate_limiter import EndpointType, RateLimiter


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class InMemoryRateLimiter(RateLimiter):
    """Per-process counter keyed by (user, endpoint type, hourly window)."""

    def __init__(
        self,
        limits: dict[EndpointType, int],
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        """
        Initialize in-memory rate limiter.

        Args:
            limits: Requests allowed per hour for each endpoint type
            clock: Optional time source (defaults to current UTC time)
        """
        self._limits = limits
        self._clock = clock or _utc_now
        self._counts: dict[tuple[str, EndpointType, datetime], int] = {}

    async def hit(self, user_id: str, endpoint_type: EndpointType) -> RateLimitResult:
        """Count one request and report whether it is within budget."""
        start, reset_at = current_window(self._clock())
        # Drop counters from earlier windows
        for key in [k for k in self._counts if k[2] < start]:
            del self._counts[key]

        key = (user_id, endpoint_type, start)
        count = self._counts.get(key, 0) + 1
        self._counts[key] = count

        limit = self._limits[endpoint_type]
        return RateLimitResult(
            allowed=count <= limit,
            limit=limit,
            remaining=max(0, limit - count),
            reset_at=reset_at,
        )
