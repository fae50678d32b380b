"""
Live Resolver — what is on air at a given instant.

Pure logic: (schedule, now) -> LiveState. No clock, no playlist access.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum

from ..domain.entities import PlayEvent


class LiveStatus(str, Enum):
    PLAYING = "playing"
    UPCOMING = "upcoming"  # no event covers now; the next one is about to start
    FALLBACK = "fallback"  # nothing covers now or lies ahead; first event of the day
    NO_SCHEDULE = "no_schedule"
    NO_SONGS = "no_songs"  # playlist is empty; set by the service, never by the resolver


@dataclass(frozen=True)
class LiveState:
    """Resolved live state.

    ``elapsed`` is seconds into the event and may be fractional. For
    UPCOMING and FALLBACK it is 0.0, meaning "not yet started".
    """

    status: LiveStatus
    now: float
    event: PlayEvent | None = None
    elapsed: float = 0.0

    @property
    def progress(self) -> float:
        """Fraction of the event already played, in [0, 1]."""
        if self.event is None or self.event.duration <= 0:
            return 0.0
        return min(1.0, max(0.0, self.elapsed / self.event.duration))

    @property
    def remaining(self) -> float:
        if self.event is None:
            return 0.0
        return max(0.0, self.event.duration - self.elapsed)


def resolve_live(schedule: Sequence[PlayEvent], now: float) -> LiveState:
    """Resolve the event on air at ``now``.

    Rule: the event with ``start <= now < end`` wins; otherwise the first
    event starting after ``now``; otherwise the first event overall.
    """
    if not schedule:
        return LiveState(status=LiveStatus.NO_SCHEDULE, now=now)

    for event in schedule:
        if event.covers(now):
            return LiveState(
                status=LiveStatus.PLAYING, now=now, event=event, elapsed=now - event.start
            )

    for event in schedule:
        if event.start > now:
            return LiveState(status=LiveStatus.UPCOMING, now=now, event=event)

    return LiveState(status=LiveStatus.FALLBACK, now=now, event=schedule[0])
