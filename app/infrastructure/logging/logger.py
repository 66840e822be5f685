"""Structured logger for observability."""

import logging
from typing import Any, Optional

# Configure root logger with key=value structured format
_logger = logging.getLogger("wellness_group_sessions")
_logger.setLevel(logging.INFO)

# Create console handler if not exists
if not _logger.handlers:
    handler = logging.StreamHandler()
    handler.setLevel(logging.INFO)
    formatter = logging.Formatter(
        "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    handler.setFormatter(formatter)
    _logger.addHandler(handler)


def log_event(
    session_id: str,
    component: str,
    request_id: Optional[str] = None,
    level: int = logging.INFO,
    **kwargs: Any,
) -> None:
    """
    Log structured event for a group session.

    Args:
        session_id: Session identifier
        component: Component name (e.g., 'http', 'invites', 'presence')
        request_id: Optional request correlation id
        level: Log level (default: INFO)
        **kwargs: Additional structured fields to log
    """
    fields: dict[str, Any] = {"session_id": session_id}
    if request_id is not None:
        fields["request_id"] = request_id
    fields["component"] = component
    fields.update(kwargs)

    # Format as key=value pairs for readability
    log_parts = [f"{k}={v!r}" for k, v in fields.items()]
    log_message = " | ".join(log_parts)

    _logger.log(level, log_message)


def log_invite_event(session_id: str, action: str, code: str, **kwargs: Any) -> None:
    """
    Log invite issuance, reuse or revocation.

    Args:
        session_id: Session identifier
        action: One of 'issued', 'reused', 'revoked'
        code: Invite code involved
        **kwargs: Additional fields
    """
    log_event(session_id, "invites", invite_action=action, invite_code=code, **kwargs)


def log_admission(
    session_id: str,
    user_id: str,
    outcome: str,
    **kwargs: Any,
) -> None:
    """
    Log a membership admission decision.

    Args:
        session_id: Session identifier
        user_id: Joining user
        outcome: e.g. 'admitted', 'already_member', 'rejected'
        **kwargs: Additional fields
    """
    log_event(session_id, "admission", user_id=user_id, admission_outcome=outcome, **kwargs)


def log_transition(
    session_id: str,
    status_before: Optional[str] = None,
    status_after: Optional[str] = None,
    **kwargs: Any,
) -> None:
    """
    Log session lifecycle transition.

    Args:
        session_id: Session identifier
        status_before: Previous status
        status_after: New status
        **kwargs: Additional fields
    """
    fields = {}
    if status_before is not None:
        fields["status_before"] = status_before
    if status_after is not None:
        fields["status_after"] = status_after
    fields.update(kwargs)

    log_event(session_id, "lifecycle", **fields)


def log_roster_access(session_id: str, purpose: str, rows: int, **kwargs: Any) -> None:
    """
    Audit a cross-user roster read.

    Args:
        session_id: Session identifier
        purpose: Why the roster was read (e.g. 'presence_summary')
        rows: Number of rows returned
        **kwargs: Additional fields
    """
    log_event(session_id, "roster_access", roster_purpose=purpose, roster_rows=rows, **kwargs)


# Export logger instance for direct use
logger = _logger
