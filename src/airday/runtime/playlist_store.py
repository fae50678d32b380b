"""Playlist Store — the ordered collection of track entries.

Insertion order is playback (round-robin) order. Every insertion is followed
by budget enforcement: while the total duration exceeds one day, the oldest
entry (the current first element) is evicted.

Not thread-safe on its own. The scheduler service serializes all access
through a single lock.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

import structlog

from ..domain.entities import DEFAULT_TRACK_DURATION, TrackEntry
from ..infra.exceptions import NotFoundError, ValidationError
from .broadcast_day import DAY_SECONDS

logger = structlog.get_logger(__name__)

BUDGET_SECONDS = DAY_SECONDS


@dataclass(frozen=True)
class AddResult:
    """Outcome of :meth:`PlaylistStore.add`."""

    track: TrackEntry
    evicted: tuple[TrackEntry, ...]
    playlist: tuple[TrackEntry, ...]


class PlaylistStore:
    """Ordered, budget-enforced playlist.

    Write path:
        add(payload, now)
        remove(track_id)
        reorder(ordered_ids)
        replace(entry)

    Read path:
        list()
        get(track_id)
        total_duration
    """

    def __init__(
        self,
        *,
        budget_seconds: int = BUDGET_SECONDS,
        default_duration: int = DEFAULT_TRACK_DURATION,
    ) -> None:
        self._entries: list[TrackEntry] = []
        self._budget_seconds = budget_seconds
        self._default_duration = default_duration

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, track_id: object) -> bool:
        return any(entry.id == track_id for entry in self._entries)

    @property
    def budget_seconds(self) -> int:
        return self._budget_seconds

    @property
    def total_duration(self) -> int:
        """Sum of all track durations currently in the playlist (seconds)."""
        return sum(entry.duration for entry in self._entries)

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    def add(self, payload: Mapping[str, Any], now: float) -> AddResult:
        """Validate and append a track, then enforce the duration budget.

        Raises:
            ValidationError: If the payload is malformed or its id is already live.
        """
        entry = TrackEntry.from_payload(
            payload, added_at=now, default_duration=self._default_duration
        )
        if entry.id in self:
            raise ValidationError(f"Track '{entry.id}' already exists in the playlist")

        self._entries.append(entry)
        logger.info("track_added", track_id=entry.id, title=entry.title, duration=entry.duration)

        evicted = self._enforce_budget()
        return AddResult(track=entry, evicted=evicted, playlist=self.list())

    def remove(self, track_id: str) -> TrackEntry | None:
        """Delete the entry with ``track_id``. Unknown ids are a no-op returning None."""
        for index, entry in enumerate(self._entries):
            if entry.id == track_id:
                del self._entries[index]
                logger.info("track_removed", track_id=track_id)
                return entry
        return None

    def reorder(self, ordered_ids: Iterable[str]) -> bool:
        """Rewrite playback order to follow ``ordered_ids``.

        Entries omitted from the request keep their relative order and are
        appended after the requested ones. Unknown and repeated ids are
        ignored, so membership never changes.

        Returns:
            True if the order actually changed.
        """
        by_id = {entry.id: entry for entry in self._entries}
        seen: set[str] = set()
        ordered: list[TrackEntry] = []
        ignored: list[str] = []
        for track_id in ordered_ids:
            if track_id in seen:
                continue
            entry = by_id.get(track_id)
            if entry is None:
                ignored.append(track_id)
                continue
            seen.add(track_id)
            ordered.append(entry)
        ordered.extend(entry for entry in self._entries if entry.id not in seen)

        if ignored:
            logger.warning("reorder_ignored_unknown_ids", track_ids=ignored)

        changed = [e.id for e in ordered] != [e.id for e in self._entries]
        self._entries = ordered
        return changed

    def replace(self, entry: TrackEntry) -> TrackEntry:
        """Swap in a new value for an existing entry, keeping its position.

        Raises:
            NotFoundError: If no entry has ``entry.id``.
        """
        for index, current in enumerate(self._entries):
            if current.id == entry.id:
                self._entries[index] = entry
                return current
        raise NotFoundError(entry.id)

    def _enforce_budget(self) -> tuple[TrackEntry, ...]:
        evicted: list[TrackEntry] = []
        total = self.total_duration
        while total > self._budget_seconds and self._entries:
            oldest = self._entries.pop(0)
            total -= oldest.duration
            evicted.append(oldest)
            logger.warning(
                "track_evicted",
                track_id=oldest.id,
                title=oldest.title,
                duration=oldest.duration,
                total_duration=total,
                budget_seconds=self._budget_seconds,
            )
        return tuple(evicted)

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def list(self) -> tuple[TrackEntry, ...]:
        """Point-in-time snapshot in insertion order."""
        return tuple(self._entries)

    def get(self, track_id: str) -> TrackEntry:
        """Return the entry with ``track_id``.

        Raises:
            NotFoundError: If the id is not in the playlist.
        """
        for entry in self._entries:
            if entry.id == track_id:
                return entry
        raise NotFoundError(track_id)
