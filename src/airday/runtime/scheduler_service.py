"""
Scheduler Service — the only entry point collaborators use.

Pattern: single owner of station state behind one mutual-exclusion boundary.

Mutations (add, remove, reorder, set_override, clear_override) are checked
against the authorization gate, applied atomically, and bump a monotonically
increasing version counter whenever membership, order or overrides change.

Queries (currently_playing, full_schedule, playlist) rebuild the day from the
current state on every call and never touch the version counter. The builder
and resolver run under the same lock, so they never observe a playlist
mutated mid-computation.
"""

from __future__ import annotations

import hmac
import threading
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any, Protocol

import structlog

from ..domain.entities import PlayEvent, TrackEntry
from ..infra.exceptions import UnauthorizedError
from .clock import MasterClock, SystemMasterClock
from .live_resolver import LiveState, LiveStatus, resolve_live
from .override_registry import OverrideRegistry
from .playlist_store import PlaylistStore
from .schedule_builder import build_schedule

logger = structlog.get_logger(__name__)


class Authorizer(Protocol):
    """Pass/fail gate guarding every mutating operation."""

    def __call__(self, credential: str | None) -> bool:
        ...


@dataclass(frozen=True)
class TokenAuthorizer:
    """Authorizer comparing the credential against a shared broadcast key."""

    key: str

    def __call__(self, credential: str | None) -> bool:
        if not credential or not self.key:
            return False
        return hmac.compare_digest(credential.encode("utf-8"), self.key.encode("utf-8"))


@dataclass
class StationState:
    """Canonical station state: playlist, overrides and version counter.

    Created once at process start and mutated only through
    :class:`SchedulerService`. Nothing is persisted.
    """

    store: PlaylistStore = field(default_factory=PlaylistStore)
    version: int = 0
    overrides: OverrideRegistry = field(init=False)

    def __post_init__(self) -> None:
        self.overrides = OverrideRegistry(self.store)


@dataclass(frozen=True)
class MutationResult:
    """What a mutation did, captured atomically with the resulting version."""

    version: int
    changed: bool
    playlist: tuple[TrackEntry, ...]
    track: TrackEntry | None = None
    evicted: tuple[TrackEntry, ...] = ()


class SchedulerService:
    """Composes store, registry, builder and resolver behind one lock."""

    def __init__(
        self,
        state: StationState | None = None,
        *,
        clock: MasterClock | None = None,
        authorizer: Authorizer | None = None,
    ) -> None:
        self._state = state or StationState()
        self._clock = clock or SystemMasterClock()
        self._authorizer = authorizer
        self._lock = threading.RLock()

    @property
    def clock(self) -> MasterClock:
        return self._clock

    @property
    def version(self) -> int:
        with self._lock:
            return self._state.version

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def _authorize(self, credential: str | None) -> None:
        if self._authorizer is not None and not self._authorizer(credential):
            logger.warning("mutation_rejected", reason="unauthorized")
            raise UnauthorizedError()

    def _commit(self, changed: bool, **kwargs: Any) -> MutationResult:
        if changed:
            self._state.version += 1
        return MutationResult(
            version=self._state.version,
            changed=changed,
            playlist=self._state.store.list(),
            **kwargs,
        )

    def add(self, payload: Mapping[str, Any], *, credential: str | None = None) -> MutationResult:
        """Append a track; evicts the oldest tracks if the day budget is exceeded."""
        self._authorize(credential)
        with self._lock:
            result = self._state.store.add(payload, self._clock.now())
            return self._commit(True, track=result.track, evicted=result.evicted)

    def remove(self, track_id: str, *, credential: str | None = None) -> MutationResult:
        """Remove a track. Unknown ids change nothing, version included."""
        self._authorize(credential)
        with self._lock:
            removed = self._state.store.remove(track_id)
            return self._commit(removed is not None, track=removed)

    def reorder(self, ordered_ids: Iterable[str], *, credential: str | None = None) -> MutationResult:
        """Rewrite playback order; omitted tracks keep their relative order at the end."""
        self._authorize(credential)
        with self._lock:
            changed = self._state.store.reorder(list(ordered_ids))
            return self._commit(changed)

    def set_override(
        self, track_id: str, hour: int, minute: int, *, credential: str | None = None
    ) -> MutationResult:
        """Pin a track to the next ``hour:minute`` UTC."""
        self._authorize(credential)
        with self._lock:
            track = self._state.overrides.set_override(track_id, hour, minute, self._clock.now())
            return self._commit(True, track=track)

    def clear_override(self, track_id: str, *, credential: str | None = None) -> MutationResult:
        """Unpin a track."""
        self._authorize(credential)
        with self._lock:
            changed = self._state.overrides.clear_override(track_id)
            return self._commit(changed, track=self._state.store.get(track_id))

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def _snapshot(self, now: float) -> tuple[TrackEntry, ...]:
        self._state.overrides.clear_stale(now)
        return self._state.store.list()

    def playlist(self, now: float | None = None) -> tuple[TrackEntry, ...]:
        """Current playlist with stale overrides cleared."""
        with self._lock:
            return self._snapshot(self._clock.now() if now is None else now)

    def full_schedule(self, now: float | None = None) -> list[PlayEvent]:
        """Every play event of the UTC day containing ``now``."""
        with self._lock:
            instant = self._clock.now() if now is None else now
            return build_schedule(self._snapshot(instant), instant)

    def currently_playing(self, now: float | None = None) -> LiveState:
        """The event on air at ``now`` (defaults to the clock)."""
        with self._lock:
            instant = self._clock.now() if now is None else now
            playlist = self._snapshot(instant)
            if not playlist:
                return LiveState(status=LiveStatus.NO_SONGS, now=instant)
            return resolve_live(build_schedule(playlist, instant), instant)

    def live_with_version(self, now: float | None = None) -> tuple[LiveState, int]:
        """Live state paired with the version it was computed from."""
        with self._lock:
            return self.currently_playing(now), self._state.version

    def playlist_with_version(self, now: float | None = None) -> tuple[tuple[TrackEntry, ...], int]:
        with self._lock:
            return self.playlist(now), self._state.version
