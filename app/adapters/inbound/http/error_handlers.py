"""Mapping of domain errors to HTTP responses."""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from app.domain.errors import ErrorKind, GroupSessionError, RateLimitExceededError
from app.infrastructure.logging.logger import logger

STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.NOT_AUTHENTICATED: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.NOT_AUTHORIZED: status.HTTP_403_FORBIDDEN,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.EXPIRED: status.HTTP_410_GONE,
    ErrorKind.REVOKED: status.HTTP_410_GONE,
    ErrorKind.FULL: status.HTTP_409_CONFLICT,
    ErrorKind.INVALID_STATE: status.HTTP_409_CONFLICT,
    ErrorKind.RATE_LIMITED: status.HTTP_429_TOO_MANY_REQUESTS,
    ErrorKind.UPSTREAM: status.HTTP_502_BAD_GATEWAY,
    ErrorKind.INTERNAL: status.HTTP_503_SERVICE_UNAVAILABLE,
}


async def group_session_error_handler(request: Request, exc: GroupSessionError) -> JSONResponse:
    """
    Render a domain error as a JSON body with the status for its kind.

    Args:
        request: Incoming request
        exc: Raised domain error

    Returns:
        JSON response with error kind, message and details
    """
    status_code = STATUS_BY_KIND.get(exc.kind, status.HTTP_500_INTERNAL_SERVER_ERROR)
    headers = {}
    if isinstance(exc, RateLimitExceededError):
        headers["Retry-After"] = str(exc.retry_after_seconds)
        if exc.limit:
            headers["X-RateLimit-Limit"] = str(exc.limit)
            headers["X-RateLimit-Remaining"] = str(exc.remaining)
        if exc.reset_at is not None:
            headers["X-RateLimit-Reset"] = str(int(exc.reset_at.timestamp()))

    logger.info(
        f"path={request.url.path!r} | error={exc.kind.value!r} | status={status_code} | message={exc.message!r}"
    )
    return JSONResponse(
        status_code=status_code,
        content={
            "error": exc.kind.value,
            "message": exc.message,
            "details": exc.details,
            "retryable": exc.retryable,
        },
        headers=headers,
    )


def register_error_handlers(app: FastAPI) -> None:
    """Install the domain error handler on an application."""
    app.add_exception_handler(GroupSessionError, group_session_error_handler)
