"""
Transport models for the HTTP API.

Instants cross the wire as epoch milliseconds; durations as seconds.
Field names follow the station's existing JSON clients (camelCase).
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from ...domain.entities import PlayEvent, TrackEntry
from ...runtime.broadcast_day import to_epoch_ms
from ...runtime.live_resolver import LiveState, LiveStatus


# ============================================================================
# Requests
# ============================================================================


class TrackIn(BaseModel):
    """Request model for adding a track.

    Types are deliberately loose; the playlist store owns validation so the
    HTTP layer and the Python API reject the same payloads.
    """

    model_config = ConfigDict(extra="ignore")

    id: str | int | None = Field(None, description="Stable identifier; generated when omitted")
    title: Any = Field(None, description="Display title (required)")
    artist: Any = Field(None, description="Display artist")
    image: Any = Field(None, description="Artwork reference")
    url: Any = Field(None, description="Media reference (required)")
    duration: Any = Field(None, description="Duration in seconds, defaults to 180")

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)


class ReorderIn(BaseModel):
    """Request model for rewriting playback order."""

    ids: list[str] = Field(..., description="Track ids in the desired order")


class OverrideIn(BaseModel):
    """Request model for pinning a track to a UTC wall-clock time."""

    hour: int = Field(..., description="Hour of day, UTC (0-23)")
    minute: int = Field(0, description="Minute (0-59)")


# ============================================================================
# Responses
# ============================================================================


class TrackOut(BaseModel):
    id: str
    title: str
    artist: str | None
    image: str | None
    url: str | None
    duration: int
    addedAt: int
    startOverride: int | None

    @classmethod
    def from_entry(cls, entry: TrackEntry) -> "TrackOut":
        return cls(
            id=entry.id,
            title=entry.title,
            artist=entry.artist,
            image=entry.artwork,
            url=entry.media,
            duration=entry.duration,
            addedAt=to_epoch_ms(entry.added_at),
            startOverride=(
                to_epoch_ms(entry.start_override) if entry.start_override is not None else None
            ),
        )


class PlayEventOut(BaseModel):
    song: TrackOut
    start: int
    end: int
    duration: float
    pinned: bool

    @classmethod
    def from_event(cls, event: PlayEvent) -> "PlayEventOut":
        return cls(
            song=TrackOut.from_entry(event.track),
            start=to_epoch_ms(event.start),
            end=to_epoch_ms(event.end),
            duration=event.duration,
            pinned=event.pinned,
        )


class PlaylistOut(BaseModel):
    playlist: list[TrackOut]
    totalDuration: int
    version: int


class MutationOut(BaseModel):
    changed: bool
    version: int
    playlist: list[TrackOut]
    track: TrackOut | None = None
    evicted: list[TrackOut] = Field(default_factory=list)


class ScheduleOut(BaseModel):
    serverNow: int
    dayStart: int
    dayEnd: int
    events: list[PlayEventOut]


_MESSAGES = {
    LiveStatus.NO_SONGS: "No songs in playlist",
    LiveStatus.NO_SCHEDULE: "No schedule",
}


class LiveOut(BaseModel):
    serverNow: int
    status: LiveStatus
    song: TrackOut | None = None
    start: int | None = None
    end: int | None = None
    elapsed: float = 0.0
    progress: float = 0.0
    version: int
    message: str | None = None

    @classmethod
    def from_state(cls, state: LiveState, version: int) -> "LiveOut":
        event = state.event
        return cls(
            serverNow=to_epoch_ms(state.now),
            status=state.status,
            song=TrackOut.from_entry(event.track) if event else None,
            start=to_epoch_ms(event.start) if event else None,
            end=to_epoch_ms(event.end) if event else None,
            elapsed=state.elapsed,
            progress=state.progress,
            version=version,
            message=_MESSAGES.get(state.status),
        )


class ErrorOut(BaseModel):
    error: str
    code: str
