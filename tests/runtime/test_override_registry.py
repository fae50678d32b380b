"""Tests for OverrideRegistry: forward-looking pins, replacement, lazy staleness."""

from __future__ import annotations

import pytest

from airday.infra.exceptions import NotFoundError, ValidationError
from airday.runtime.broadcast_day import DAY_SECONDS
from airday.runtime.override_registry import OverrideRegistry, resolve_override_instant
from airday.runtime.playlist_store import PlaylistStore
from conftest import DAY_START, track

NINE_AM = DAY_START + 9 * 3600


@pytest.fixture
def store():
    store = PlaylistStore()
    store.add(track("s1"), now=DAY_START)
    store.add(track("s2"), now=DAY_START)
    return store


@pytest.fixture
def registry(store):
    return OverrideRegistry(store)


def test_future_time_resolves_to_today():
    assert resolve_override_instant(9, 0, DAY_START + 3600) == NINE_AM


def test_past_time_advances_one_day():
    assert resolve_override_instant(9, 0, DAY_START + 10 * 3600) == NINE_AM + DAY_SECONDS


def test_exactly_now_is_not_strictly_future():
    assert resolve_override_instant(9, 0, NINE_AM) == NINE_AM + DAY_SECONDS


def test_minutes_are_applied():
    assert resolve_override_instant(23, 59, DAY_START) == DAY_START + 23 * 3600 + 59 * 60


@pytest.mark.parametrize("hour, minute", [(24, 0), (-1, 0), (9, 60), (9, -1), (True, 0), (9.5, 0)])
def test_out_of_range_rejected(hour, minute):
    with pytest.raises(ValidationError):
        resolve_override_instant(hour, minute, DAY_START)


def test_set_override_stores_instant_on_track(registry, store):
    updated = registry.set_override("s1", 9, 0, now=DAY_START)
    assert updated.start_override == NINE_AM
    assert store.get("s1").start_override == NINE_AM
    assert registry.pinned() == {"s1": NINE_AM}


def test_new_override_replaces_previous(registry, store):
    registry.set_override("s1", 9, 0, now=DAY_START)
    registry.set_override("s1", 14, 30, now=DAY_START)
    assert registry.pinned() == {"s1": DAY_START + 14 * 3600 + 30 * 60}


def test_unknown_track_not_found(registry, store):
    with pytest.raises(NotFoundError):
        registry.set_override("ghost", 9, 0, now=DAY_START)
    assert registry.pinned() == {}


def test_invalid_time_leaves_track_untouched(registry, store):
    registry.set_override("s1", 9, 0, now=DAY_START)
    with pytest.raises(ValidationError):
        registry.set_override("s1", 25, 0, now=DAY_START)
    assert store.get("s1").start_override == NINE_AM


def test_clear_override(registry, store):
    registry.set_override("s1", 9, 0, now=DAY_START)
    assert registry.clear_override("s1") is True
    assert registry.clear_override("s1") is False
    assert store.get("s1").start_override is None
    with pytest.raises(NotFoundError):
        registry.clear_override("ghost")


def test_clear_stale_keeps_today_and_tomorrow(registry, store):
    registry.set_override("s1", 9, 0, now=DAY_START)  # today 09:00
    registry.set_override("s2", 9, 0, now=NINE_AM + 60)  # tomorrow 09:00
    assert registry.clear_stale(NINE_AM + 120) == []
    assert set(registry.pinned()) == {"s1", "s2"}


def test_clear_stale_drops_previous_days(registry, store):
    registry.set_override("s1", 9, 0, now=DAY_START)
    registry.set_override("s2", 9, 0, now=NINE_AM + 60)
    next_day = DAY_START + DAY_SECONDS + 3600
    assert registry.clear_stale(next_day) == ["s1"]
    assert registry.pinned() == {"s2": NINE_AM + DAY_SECONDS}
    assert registry.clear_stale(next_day + DAY_SECONDS) == ["s2"]
    assert registry.pinned() == {}
