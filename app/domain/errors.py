"""Domain errors for group session coordination.

Every failure a caller can act on carries an ErrorKind so the presenting
surface can tell "get a new invite" apart from "session is full" apart from
"you're not allowed". Idempotent duplicates are not errors: they are returned
as successes with a flag (``reused``, ``already_member``).
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional


class ErrorKind(str, Enum):
    """Caller-facing error categories."""

    NOT_AUTHENTICATED = "not_authenticated"
    NOT_AUTHORIZED = "not_authorized"
    NOT_FOUND = "not_found"
    EXPIRED = "expired"
    REVOKED = "revoked"
    FULL = "full"
    INVALID_STATE = "invalid_state"
    RATE_LIMITED = "rate_limited"
    UPSTREAM = "upstream"
    INTERNAL = "internal"


class GroupSessionError(Exception):
    """Base exception for all group session errors."""

    kind: ErrorKind = ErrorKind.INTERNAL
    retryable: bool = False

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class NotAuthenticatedError(GroupSessionError):
    """Raised when a request carries no caller identity."""

    kind = ErrorKind.NOT_AUTHENTICATED

    def __init__(self) -> None:
        super().__init__("Authentication required")


class NotAuthorizedError(GroupSessionError):
    """Raised when the caller is not the owner or not a member."""

    kind = ErrorKind.NOT_AUTHORIZED


class NotOwnerError(NotAuthorizedError):
    """Raised when an owner-only action is attempted by someone else."""

    def __init__(self, session_id: str, action: str) -> None:
        super().__init__(
            f"Only the session owner can {action}",
            {"session_id": session_id, "action": action},
        )


class NotMemberError(NotAuthorizedError):
    """Raised when the caller is not a participant in the session."""

    def __init__(self, session_id: str, user_id: str) -> None:
        super().__init__(
            "Not a participant in this session",
            {"session_id": session_id, "user_id": user_id},
        )


class NotFoundError(GroupSessionError):
    """Base for missing resources."""

    kind = ErrorKind.NOT_FOUND


class SessionNotFoundError(NotFoundError):
    """Raised when a session cannot be found."""

    def __init__(self, session_id: str) -> None:
        super().__init__("Session not found", {"session_id": session_id})


class InviteNotFoundError(NotFoundError):
    """Raised when an invite code does not exist."""

    def __init__(self, code: str) -> None:
        super().__init__("Invalid invite code", {"code": code})


class MemberNotFoundError(NotFoundError):
    """Raised when the target user holds no membership."""

    def __init__(self, session_id: str, user_id: str) -> None:
        super().__init__(
            "Participant not found in this session",
            {"session_id": session_id, "user_id": user_id},
        )


class InviteExpiredError(GroupSessionError):
    """Raised when an invite's expiry has passed."""

    kind = ErrorKind.EXPIRED

    def __init__(self, code: str) -> None:
        super().__init__("Invite has expired", {"code": code})


class InviteRevokedError(GroupSessionError):
    """Raised when an invite was revoked by the owner."""

    kind = ErrorKind.REVOKED

    def __init__(self, code: str) -> None:
        super().__init__("Invite has been revoked", {"code": code})


class SessionFullError(GroupSessionError):
    """Raised when admission would exceed the participant ceiling."""

    kind = ErrorKind.FULL

    def __init__(self, session_id: str, max_participants: int) -> None:
        super().__init__(
            "Session is full",
            {"session_id": session_id, "max_participants": max_participants},
        )


class InvalidStateError(GroupSessionError):
    """Raised when an operation is not valid for the session's current state."""

    kind = ErrorKind.INVALID_STATE


class RateLimitExceededError(GroupSessionError):
    """Raised when a caller exhausts their request budget."""

    kind = ErrorKind.RATE_LIMITED

    def __init__(
        self,
        endpoint_type: str,
        retry_after_seconds: int,
        limit: int = 0,
        remaining: int = 0,
        reset_at: Optional[datetime] = None,
    ) -> None:
        super().__init__(
            "Rate limit exceeded",
            {"endpoint_type": endpoint_type, "retry_after": retry_after_seconds},
        )
        self.retry_after_seconds = retry_after_seconds
        self.limit = limit
        self.remaining = remaining
        self.reset_at = reset_at


class UpstreamError(GroupSessionError):
    """Raised when the text-generation collaborator fails."""

    kind = ErrorKind.UPSTREAM


class InternalError(GroupSessionError):
    """Raised for internal failures the caller may retry."""

    kind = ErrorKind.INTERNAL
    retryable = True


class StoreUnavailableError(InternalError):
    """Raised when the backing store rejects or fails an operation."""

    def __init__(self, operation: str) -> None:
        super().__init__("Storage operation failed, please retry", {"operation": operation})
