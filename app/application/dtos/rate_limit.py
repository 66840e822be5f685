"""Rate limit DTOs."""

from datetime import datetime

from app.application.dtos.base import DTO


class RateLimitResult(DTO):
    """Outcome of counting one request against a user's hourly budget."""

    allowed: bool
    limit: int
    remaining: int
    reset_at: datetime

    def retry_after_seconds(self, now: datetime) -> int:
        """Seconds until the current window resets (at least 1)."""
        return max(1, int((self.reset_at - now).total_seconds()))
