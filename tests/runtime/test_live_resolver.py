"""Live resolver tests: exact hits, seams, fallbacks."""

from __future__ import annotations

import pytest

from airday.domain.entities import PlayEvent, TrackEntry
from airday.runtime.live_resolver import LiveState, LiveStatus, resolve_live


def _event(track_id: str, start: float, duration: float) -> PlayEvent:
    track = TrackEntry(id=track_id, title=track_id, duration=int(duration), added_at=0.0)
    return PlayEvent(track=track, start=start, duration=duration)


SCHEDULE = [_event("A", 0, 10), _event("B", 10, 10)]


def test_inside_first_event():
    state = resolve_live(SCHEDULE, 5)
    assert state.status is LiveStatus.PLAYING
    assert state.event.track.id == "A"
    assert state.elapsed == 5
    assert state.progress == pytest.approx(0.5)
    assert state.remaining == 5


def test_inside_second_event():
    state = resolve_live(SCHEDULE, 15)
    assert state.event.track.id == "B"
    assert state.elapsed == 5


def test_boundary_belongs_to_next_event():
    state = resolve_live(SCHEDULE, 10)
    assert state.event.track.id == "B"
    assert state.elapsed == 0


def test_fractional_elapsed():
    state = resolve_live(SCHEDULE, 12.25)
    assert state.elapsed == pytest.approx(2.25)


def test_past_schedule_falls_back_to_first_event():
    state = resolve_live(SCHEDULE, 25)
    assert state.status is LiveStatus.FALLBACK
    assert state.event.track.id == "A"
    assert state.elapsed == 0.0


def test_before_schedule_reports_upcoming():
    state = resolve_live(SCHEDULE, -3)
    assert state.status is LiveStatus.UPCOMING
    assert state.event.track.id == "A"
    assert state.elapsed == 0.0
    assert state.progress == 0.0


def test_seam_picks_next_event():
    schedule = [_event("A", 0, 10), _event("B", 12, 10)]
    state = resolve_live(schedule, 11)
    assert state.status is LiveStatus.UPCOMING
    assert state.event.track.id == "B"


def test_empty_schedule_is_no_schedule():
    state = resolve_live([], 5)
    assert state.status is LiveStatus.NO_SCHEDULE
    assert state.event is None
    assert state.progress == 0.0
    assert state.remaining == 0.0


def test_progress_is_clamped():
    state = LiveState(status=LiveStatus.PLAYING, now=0, event=SCHEDULE[0], elapsed=30)
    assert state.progress == 1.0
