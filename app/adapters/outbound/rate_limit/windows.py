"""Fixed hourly windows shared by the rate limiter adapters."""

from datetime import datetime, timedelta

WINDOW = timedelta(hours=1)


def current_window(now: datetime) -> tuple[datetime, datetime]:
    """
    Bounds of the hourly window containing ``now``.

    Args:
        now: Evaluation time

    Returns:
        Tuple of (window start, window reset)
    """
    start = now.replace(minute=0, second=0, microsecond=0)
    return start, start + WINDOW
