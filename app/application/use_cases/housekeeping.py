"""Housekeeping use case."""

from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Optional

from app.application.dtos.housekeeping import PurgeResult
from app.application.ports.invite_repository import InviteRepository
from app.application.ports.presence_repository import PresenceRepository


class Housekeeping:
    """Deactivates expired invites and drops stale presence rows.

    Nothing depends on this running: expiry and presence are evaluated
    lazily on every read.
    """

    def __init__(
        self,
        invite_repository: InviteRepository,
        presence_repository: PresenceRepository,
        presence_retention_hours: int = 24,
        logger: Optional[Callable[..., None]] = None,
    ) -> None:
        self._invites = invite_repository
        self._presence = presence_repository
        self._retention = timedelta(hours=presence_retention_hours)
        self._logger = logger

    def _log(self, **kwargs: Any) -> None:
        if self._logger:
            self._logger("*", "housekeeping", **kwargs)

    async def purge(self, now: Optional[datetime] = None) -> PurgeResult:
        """
        Run one hygiene pass.

        Args:
            now: Evaluation time (defaults to current UTC time)

        Returns:
            Counts of rows touched
        """
        now = now or datetime.now(timezone.utc)
        invites = await self._invites.deactivate_expired(now)
        presence = await self._presence.delete_older_than(now - self._retention)
        self._log(invites_deactivated=invites, presence_deleted=presence)
        return PurgeResult(invites_deactivated=invites, presence_deleted=presence)
