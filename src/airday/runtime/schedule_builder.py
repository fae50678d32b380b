"""
Schedule Builder — one UTC day of play events from a playlist snapshot.

Pure function: (playlist, now) -> ordered PlayEvents. No clock access, no
randomness, no hidden state. The same inputs always produce the same day.

Rules:
- Tracks whose override lies in today's window are pinned events and start
  exactly at their override.
- Every other moment is filled round-robin from the playlist, in insertion
  order, with one rotating index shared across the whole day.
- A filler that would run into a pinned event is cut at the pinned start.
- The last event of the day may run past midnight; durations are never
  truncated at the day boundary.
"""

from __future__ import annotations

from collections.abc import Sequence

from ..domain.entities import PlayEvent, TrackEntry
from .broadcast_day import day_window, in_day


def pinned_tracks(playlist: Sequence[TrackEntry], now: float) -> list[TrackEntry]:
    """Tracks pinned inside the UTC day of ``now``, sorted by override instant."""
    pinned = [
        track
        for track in playlist
        if track.start_override is not None and in_day(track.start_override, now)
    ]
    pinned.sort(key=lambda track: track.start_override)
    return pinned


def build_schedule(playlist: Sequence[TrackEntry], now: float) -> list[PlayEvent]:
    """Build the schedule for the UTC day containing ``now``.

    Args:
        playlist: Track entries in playback order.
        now: Epoch seconds; only its UTC day matters.

    Returns:
        PlayEvents sorted by start, non-overlapping, covering the whole day.
        Empty if the playlist is empty.
    """
    if not playlist:
        return []

    start, end = day_window(now)
    pinned = pinned_tracks(playlist, now)

    events: list[PlayEvent] = []
    cursor = start
    rotation = 0
    next_pin = 0

    while cursor < end:
        if next_pin < len(pinned) and pinned[next_pin].start_override <= cursor:
            track = pinned[next_pin]
            next_pin += 1
            event_end = track.start_override + track.duration
            if next_pin < len(pinned):
                # Back-to-back pins: the later one wins the overlap.
                event_end = min(event_end, pinned[next_pin].start_override)
            if event_end > track.start_override:
                events.append(
                    PlayEvent(
                        track=track,
                        start=track.start_override,
                        duration=event_end - track.start_override,
                        pinned=True,
                    )
                )
            cursor = max(cursor, event_end)
            continue

        gap_pinned = next_pin < len(pinned)
        gap_end = pinned[next_pin].start_override if gap_pinned else end
        while cursor < gap_end:
            track = playlist[rotation % len(playlist)]
            rotation += 1
            event_end = cursor + track.duration
            if gap_pinned:
                event_end = min(event_end, gap_end)
            events.append(PlayEvent(track=track, start=cursor, duration=event_end - cursor))
            cursor = event_end

    events.sort(key=lambda event: event.start)
    return events
