"""Override Registry — operator-pinned start instants for tracks.

An override pins a track to an absolute instant derived from an HH:MM
wall-clock time in UTC. The instant is always forward-looking: a time that
has already passed today resolves to the same time tomorrow.

Overrides are day-scoped and cleared lazily on read by :meth:`clear_stale`.
They are never resurrected across days.
"""

from __future__ import annotations

import structlog

from ..domain.entities import TrackEntry
from ..infra.exceptions import ValidationError
from .broadcast_day import DAY_SECONDS, day_start
from .playlist_store import PlaylistStore

logger = structlog.get_logger(__name__)


def resolve_override_instant(hour: int, minute: int, now: float) -> float:
    """Absolute instant for ``hour:minute`` UTC, strictly after ``now``.

    Raises:
        ValidationError: If hour or minute is out of range.
    """
    for name, value, upper in (("hour", hour, 23), ("minute", minute, 59)):
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValidationError(f"{name} must be an integer")
        if not 0 <= value <= upper:
            raise ValidationError(f"{name} must be between 0 and {upper}")

    instant = day_start(now) + hour * 3600 + minute * 60
    if instant <= now:
        instant += DAY_SECONDS
    return instant


class OverrideRegistry:
    """Sparse track id -> pinned instant mapping, stored on the tracks themselves.

    At most one pending override per track; a new one replaces the previous.
    """

    def __init__(self, store: PlaylistStore) -> None:
        self._store = store

    def set_override(self, track_id: str, hour: int, minute: int, now: float) -> TrackEntry:
        """Pin ``track_id`` to the next ``hour:minute`` UTC.

        Raises:
            NotFoundError: If the track is not in the playlist.
            ValidationError: If hour or minute is out of range.
        """
        current = self._store.get(track_id)
        instant = resolve_override_instant(hour, minute, now)
        updated = current.with_override(instant)
        self._store.replace(updated)
        logger.info(
            "override_set",
            track_id=track_id,
            hour=hour,
            minute=minute,
            start_override=instant,
            replaced=current.start_override,
        )
        return updated

    def clear_override(self, track_id: str) -> bool:
        """Remove the override on ``track_id``. Returns True if one was set.

        Raises:
            NotFoundError: If the track is not in the playlist.
        """
        current = self._store.get(track_id)
        if current.start_override is None:
            return False
        self._store.replace(current.with_override(None))
        logger.info("override_cleared", track_id=track_id)
        return True

    def clear_stale(self, now: float) -> list[str]:
        """Clear overrides that can no longer apply. Returns the cleared track ids.

        An override stays live from today's UTC midnight until the end of
        tomorrow, which is the furthest :func:`resolve_override_instant` can
        reach. Anything outside that range is stale.
        """
        lower = day_start(now)
        upper = lower + 2 * DAY_SECONDS
        cleared: list[str] = []
        for entry in self._store.list():
            instant = entry.start_override
            if instant is None or lower <= instant < upper:
                continue
            self._store.replace(entry.with_override(None))
            cleared.append(entry.id)
        if cleared:
            logger.info("stale_overrides_cleared", track_ids=cleared)
        return cleared

    def pinned(self) -> dict[str, float]:
        """Snapshot of track id -> pinned instant."""
        return {
            entry.id: entry.start_override
            for entry in self._store.list()
            if entry.start_override is not None
        }
