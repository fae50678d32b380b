"""
Broadcast day math: boundaries defined once, centrally.

Pure functions over epoch seconds. The broadcast day is the UTC calendar
day; every schedule and override computation uses these same boundaries.
"""

from __future__ import annotations

from datetime import datetime, timezone

DAY_SECONDS = 24 * 60 * 60  # 86_400


def day_start(now: float) -> float:
    """UTC midnight at or before ``now``.

    Args:
        now: Epoch seconds.

    Returns:
        Epoch seconds of the start of the UTC day containing ``now``.
    """
    moment = datetime.fromtimestamp(now, tz=timezone.utc)
    return moment.replace(hour=0, minute=0, second=0, microsecond=0).timestamp()


def day_window(now: float) -> tuple[float, float]:
    """``(day_start, day_end)`` for ``now``."""
    start = day_start(now)
    return start, start + DAY_SECONDS


def in_day(instant: float, now: float) -> bool:
    """True when ``instant`` falls inside the UTC day containing ``now``."""
    start, end = day_window(now)
    return start <= instant < end


def to_epoch_ms(epoch_seconds: float) -> int:
    """Epoch seconds to integer epoch milliseconds (transport format)."""
    return int(round(epoch_seconds * 1000))
