"""Calendar-day keys used for every streak and mission comparison."""

from datetime import datetime, timedelta, tzinfo


def day_key(timestamp: datetime, tz: tzinfo | None = None) -> str:
    """
    Map an instant to its ``YYYY-MM-DD`` day in the consumer's time zone.

    Args:
        timestamp: Timezone-aware instant.
        tz: Target zone. ``None`` uses the system local zone.
    """
    return timestamp.astimezone(tz).date().isoformat()


def previous_day_key(key: str) -> str:
    """Return the day key immediately before ``key``."""
    day = datetime.strptime(key, "%Y-%m-%d").date()
    return (day - timedelta(days=1)).isoformat()
