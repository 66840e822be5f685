"""Participant presence entity and classification."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


class PresenceStatus(str, Enum):
    """Liveness classification derived from heartbeat recency."""

    ONLINE = "online"
    AWAY = "away"
    OFFLINE = "offline"


@dataclass
class PresenceRecord:
    """Last heartbeat seen for one (session, user) pair."""

    session_id: str
    user_id: str
    last_heartbeat: datetime
    is_online: bool = True


@dataclass(frozen=True)
class PresenceThresholds:
    """Heartbeat age limits for each presence status."""

    online_seconds: int = 30
    away_seconds: int = 60

    def __post_init__(self) -> None:
        """Validate thresholds."""
        if self.online_seconds <= 0:
            raise ValueError("Online threshold must be positive")
        if self.away_seconds < self.online_seconds:
            raise ValueError("Away threshold cannot be shorter than online threshold")


def classify(
    record: Optional[PresenceRecord],
    now: datetime,
    thresholds: PresenceThresholds = PresenceThresholds(),
) -> PresenceStatus:
    """
    Classify a participant's presence at ``now``.

    Pure function, recomputed on every read; no background sweeper.

    Args:
        record: Presence record, or None if the user never sent a heartbeat
        now: Evaluation time
        thresholds: Online/away limits

    Returns:
        online within the online threshold, away within the away threshold,
        offline otherwise
    """
    if record is None:
        return PresenceStatus.OFFLINE

    age = (now - record.last_heartbeat).total_seconds()
    if age <= thresholds.online_seconds:
        return PresenceStatus.ONLINE
    if age <= thresholds.away_seconds:
        return PresenceStatus.AWAY
    return PresenceStatus.OFFLINE
