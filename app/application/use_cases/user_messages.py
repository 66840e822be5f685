"""User-facing messages for group session coordination."""

from typing import Optional


class UserMessages:
    """Centralized user-facing messages."""

    # Opening message used when no personalised opening can be produced
    FALLBACK_OPENING = (
        "Welcome back! How are you feeling today? What would you like to work on?"
    )

    DEFAULT_GROUP_TITLE = "Group Session"

    # Message gate rejections
    SESSION_WAITING = "Session has not started yet"
    SESSION_PAUSED = "Session is paused"
    SESSION_ENDED = "Session has ended"
    WAITING_FOR_PARTICIPANTS = "Waiting for participants"
    FREE_TIER_TIME_EXCEEDED = (
        "Free tier sessions are limited to {minutes} minutes. Upgrade to continue."
    )
    FREE_TIER_SESSION_LIMIT = (
        "Free tier accounts are limited to {count} sessions. Upgrade to continue."
    )

    @staticmethod
    def session_locked(reason: Optional[str]) -> str:
        """Rejection text for a locked session."""
        if reason:
            return f"Session is locked: {reason}"
        return "Session is locked"
