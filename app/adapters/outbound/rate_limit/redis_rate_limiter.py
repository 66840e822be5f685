"""Redis rate limiter adapter."""

from datetime import datetime, timezone
from typing import Callable, Optional

from redis import asyncio as aioredis

from app.adapters.outbound.rate_limit.windows import WINDOW, current_window
from app.application.dtos.rate_limit import RateLimitResult
from app.application.ports.rate_limiter import EndpointType, RateLimiter


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class RedisRateLimiter(RateLimiter):
    """Redis adapter for rate limiting, shared by every API worker."""

    KEY_PREFIX = "ratelimit:"

    def __init__(
        self,
        redis_url: str,
        limits: dict[EndpointType, int],
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        """
        Initialize Redis rate limiter.

        Args:
            redis_url: Redis connection URL
            limits: Requests allowed per hour for each endpoint type
            clock: Optional time source (defaults to current UTC time)
        """
        self._redis_url = redis_url
        self._limits = limits
        self._clock = clock or _utc_now
        self._client: Optional[aioredis.Redis] = None

    async def _get_client(self) -> aioredis.Redis:
        """
        Get or create Redis client.

        Returns:
            Redis client instance
        """
        if self._client is None:
            self._client = await aioredis.from_url(
                self._redis_url,
                encoding="utf-8",
                decode_responses=True,
            )
        return self._client

    def _make_key(self, user_id: str, endpoint_type: EndpointType, window_start: datetime) -> str:
        """
        Make Redis key for one user's counter in one window.

        Args:
            user_id: Caller identifier
            endpoint_type: Budget bucket
            window_start: Start of the hourly window

        Returns:
            Redis key string
        """
        return f"{self.KEY_PREFIX}{endpoint_type.value}:{user_id}:{int(window_start.timestamp())}"

    async def hit(self, user_id: str, endpoint_type: EndpointType) -> RateLimitResult:
        """
        Count one request in a single MULTI/EXEC round trip.

        SET NX EX creates the window counter with its expiry, so a key never
        exists without a TTL; INCR then counts the request.

        Args:
            user_id: Caller identifier
            endpoint_type: Budget bucket

        Returns:
            Rate limit result for the current window
        """
        start, reset_at = current_window(self._clock())
        client = await self._get_client()
        key = self._make_key(user_id, endpoint_type, start)

        pipe = client.pipeline(transaction=True)
        pipe.set(key, 0, ex=int(WINDOW.total_seconds()), nx=True)
        pipe.incr(key)
        _, count = await pipe.execute()

        limit = self._limits[endpoint_type]
        return RateLimitResult(
            allowed=count <= limit,
            limit=limit,
            remaining=max(0, limit - count),
            reset_at=reset_at,
        )

    async def close(self) -> None:
        """Close Redis connection."""
        if self._client:
            await self._client.close()
            self._client = None
