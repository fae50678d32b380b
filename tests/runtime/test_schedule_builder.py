"""Schedule builder tests.

Verifies:
- Full coverage of [day_start, day_end) with no gaps or overlaps
- Pinned events start exactly at their override, once
- Round-robin fairness with one rotation shared across the day
- Fillers are cut at a pinned start, never at midnight
- Determinism and the empty playlist case
"""

from __future__ import annotations

from collections import Counter

import pytest

from airday.domain.entities import TrackEntry
from airday.runtime.broadcast_day import DAY_SECONDS
from airday.runtime.schedule_builder import build_schedule, pinned_tracks
from conftest import DAY_START

DAY_END = DAY_START + DAY_SECONDS
NOON = DAY_START + 12 * 3600


def entry(track_id: str, duration: int = 180, override: float | None = None) -> TrackEntry:
    return TrackEntry(
        id=track_id,
        title=f"Song {track_id}",
        duration=duration,
        added_at=0.0,
        media=f"https://media.example/{track_id}.mp3",
        start_override=override,
    )


def assert_contiguous(events):
    for current, following in zip(events, events[1:]):
        assert current.end == pytest.approx(following.start)


def test_empty_playlist_yields_empty_schedule():
    assert build_schedule([], NOON) == []


def test_single_track_covers_whole_day():
    events = build_schedule([entry("a", 180)], NOON)
    assert len(events) == DAY_SECONDS // 180
    assert events[0].start == DAY_START
    assert events[-1].end == DAY_END
    assert_contiguous(events)


def test_coverage_without_overrides():
    playlist = [entry("a", 173), entry("b", 241), entry("c", 199)]
    events = build_schedule(playlist, NOON)
    assert events[0].start == DAY_START
    assert events[-1].start < DAY_END <= events[-1].end
    assert_contiguous(events)
    assert all(e.duration == e.track.duration for e in events)


def test_last_event_overruns_midnight_untruncated():
    events = build_schedule([entry("a", 7_000)], NOON)
    last = events[-1]
    assert last.end > DAY_END
    assert last.duration == 7_000


def test_events_follow_playlist_order_round_robin():
    events = build_schedule([entry("a"), entry("b"), entry("c")], NOON)
    assert [e.track.id for e in events[:7]] == ["a", "b", "c", "a", "b", "c", "a"]


@pytest.mark.parametrize("count, duration", [(3, 180), (7, 180), (5, 250), (13, 3_600)])
def test_round_robin_fairness(count, duration):
    playlist = [entry(f"t{i}", duration) for i in range(count)]
    plays = Counter(e.track.id for e in build_schedule(playlist, NOON))
    floor = DAY_SECONDS // (count * duration)
    assert set(plays) == {t.id for t in playlist}
    assert all(floor <= n <= floor + 1 for n in plays.values())
    assert max(plays.values()) - min(plays.values()) <= 1


def test_pinned_event_starts_exactly_once_at_override():
    nine = DAY_START + 9 * 3600
    playlist = [entry("a", 173), entry("b", 211), entry("pin", 300, override=nine)]
    events = build_schedule(playlist, NOON)
    at_nine = [e for e in events if e.start == nine]
    assert len(at_nine) == 1
    assert at_nine[0].track.id == "pin"
    assert at_nine[0].pinned
    assert at_nine[0].duration == 300
    assert sum(1 for e in events if e.pinned) == 1
    assert_contiguous(events)


def test_filler_is_cut_at_pinned_start():
    pin_at = DAY_START + 250
    events = build_schedule([entry("a", 180), entry("b", 180), entry("p", 60, override=pin_at)], NOON)
    assert [(e.track.id, e.start, e.duration) for e in events[:3]] == [
        ("a", DAY_START, 180),
        ("b", DAY_START + 180, 70),
        ("p", pin_at, 60),
    ]
    assert events[1].track.duration == 180
    assert events[2].pinned
    assert_contiguous(events)


def test_rotation_index_is_shared_across_pinned_events():
    pin_at = DAY_START + 360
    playlist = [entry("a"), entry("b"), entry("c"), entry("p", 100, override=pin_at)]
    events = build_schedule(playlist, NOON)
    assert [e.track.id for e in events[:5]] == ["a", "b", "p", "c", "p"]
    assert events[2].pinned
    assert not events[4].pinned


def test_pinned_at_midnight_opens_the_day():
    events = build_schedule([entry("a"), entry("p", 90, override=DAY_START)], NOON)
    assert events[0].track.id == "p"
    assert events[0].start == DAY_START
    assert events[1].start == DAY_START + 90


def test_overlapping_pins_later_one_keeps_its_start():
    first = DAY_START + 1_000
    second = DAY_START + 1_100
    events = build_schedule(
        [entry("a"), entry("p1", 300, override=first), entry("p2", 300, override=second)], NOON
    )
    pinned = [e for e in events if e.pinned]
    assert [(e.track.id, e.start, e.duration) for e in pinned] == [
        ("p1", first, 100),
        ("p2", second, 300),
    ]
    assert_contiguous(events)


def test_pins_outside_the_day_are_ignored():
    yesterday = DAY_START - 3_600
    tomorrow = DAY_END + 3_600
    playlist = [entry("a"), entry("y", override=yesterday), entry("t", override=tomorrow)]
    events = build_schedule(playlist, NOON)
    assert not any(e.pinned for e in events)
    assert pinned_tracks(playlist, NOON) == []


def test_pinned_tracks_sorted_by_instant():
    playlist = [entry("late", override=NOON), entry("early", override=DAY_START + 60)]
    assert [t.id for t in pinned_tracks(playlist, NOON)] == ["early", "late"]


def test_build_is_deterministic_within_a_day():
    playlist = [entry("a", 173), entry("b", 241), entry("p", 90, override=NOON)]
    assert build_schedule(playlist, DAY_START) == build_schedule(playlist, DAY_END - 1)


def test_schedule_is_sorted_and_non_overlapping():
    playlist = [
        entry("a", 173),
        entry("b", 4_000),
        entry("p1", 500, override=DAY_START + 3_700),
        entry("p2", 900, override=DAY_START + 4_000),
        entry("p3", 200, override=DAY_END - 100),
    ]
    events = build_schedule(playlist, NOON)
    starts = [e.start for e in events]
    assert starts == sorted(starts)
    for current, following in zip(events, events[1:]):
        assert current.end <= following.start
        assert current.duration > 0
