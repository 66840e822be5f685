"""Caller identity, rate limiting and internal-capability dependencies."""

import hmac
from datetime import datetime, timezone
from typing import Callable, Optional

from fastapi import Depends, Header, Response

from app.application.ports.rate_limiter import EndpointType
from app.domain.errors import NotAuthenticatedError, NotAuthorizedError, RateLimitExceededError
from app.infrastructure.config.settings import settings
from app.infrastructure.wiring.container import Container, get_container


async def get_current_user(x_user_id: Optional[str] = Header(None)) -> str:
    """
    Resolve the caller forwarded by the authenticating gateway.

    Args:
        x_user_id: Value of the X-User-Id header

    Returns:
        Caller's user id

    Raises:
        NotAuthenticatedError: Header missing or blank
    """
    if not x_user_id or not x_user_id.strip():
        raise NotAuthenticatedError()
    return x_user_id.strip()


def rate_limited(endpoint_type: EndpointType) -> Callable:
    """
    Build a dependency that authenticates the caller and counts the request.

    Args:
        endpoint_type: Budget bucket for the route

    Returns:
        FastAPI dependency yielding the caller's user id
    """

    async def _dependency(
        response: Response,
        user_id: str = Depends(get_current_user),
        container: Container = Depends(get_container),
    ) -> str:
        result = await container.rate_limiter.hit(user_id, endpoint_type)
        if result.limit:
            response.headers["X-RateLimit-Limit"] = str(result.limit)
            response.headers["X-RateLimit-Remaining"] = str(result.remaining)
            response.headers["X-RateLimit-Reset"] = str(int(result.reset_at.timestamp()))
        if not result.allowed:
            raise RateLimitExceededError(
                endpoint_type.value,
                result.retry_after_seconds(datetime.now(timezone.utc)),
                limit=result.limit,
                remaining=result.remaining,
                reset_at=result.reset_at,
            )
        return user_id

    return _dependency


async def require_internal_token(x_internal_token: Optional[str] = Header(None)) -> None:
    """
    Guard internal endpoints with the shared service token.

    Internal endpoints are disabled when no token is configured.

    Raises:
        NotAuthorizedError: Token missing, wrong, or not configured
    """
    expected = settings.internal_service_token
    if not expected or not x_internal_token:
        raise NotAuthorizedError("Internal service capability required")
    if not hmac.compare_digest(expected.encode("utf-8"), x_internal_token.encode("utf-8")):
        raise NotAuthorizedError("Internal service capability required")
