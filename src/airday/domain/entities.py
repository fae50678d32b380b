"""
Domain entities for the broadcast scheduler.

TrackEntry is the atomic unit the scheduler places on the timeline.
PlayEvent is a track instance at a concrete start instant; it is derived on
every read and never stored.
"""

from __future__ import annotations

import uuid
from collections.abc import Mapping
from dataclasses import dataclass, replace
from typing import Any

from ..infra.exceptions import ValidationError

DEFAULT_TRACK_DURATION = 180

# Payload keys accepted for each opaque field; the first is canonical.
_FIELD_ALIASES: dict[str, tuple[str, ...]] = {
    "artist": ("artist",),
    "artwork": ("artwork", "image"),
    "media": ("media", "url"),
}


def _pick(payload: Mapping[str, Any], keys: tuple[str, ...]) -> Any:
    for key in keys:
        if payload.get(key) is not None:
            return payload[key]
    return None


def _parse_duration(raw: Any, default: int) -> int:
    """Validate a duration in seconds. Integral floats and digit strings are accepted."""
    if raw is None:
        return default
    if isinstance(raw, bool):
        raise ValidationError("duration must be an integer number of seconds")
    if isinstance(raw, str):
        if not raw.strip().isdigit():
            raise ValidationError(f"duration must be an integer number of seconds, got {raw!r}")
        value = int(raw.strip())
    elif isinstance(raw, float):
        if not raw.is_integer():
            raise ValidationError(f"duration must be an integer number of seconds, got {raw!r}")
        value = int(raw)
    elif isinstance(raw, int):
        value = raw
    else:
        raise ValidationError(f"duration must be an integer number of seconds, got {raw!r}")

    if value <= 0:
        raise ValidationError("duration must be positive")
    return value


@dataclass(frozen=True)
class TrackEntry:
    """A playable item in the station playlist.

    title/artist/artwork/media are opaque to the scheduler. added_at and
    start_override are epoch seconds.
    """

    id: str
    title: str
    duration: int
    added_at: float
    artist: str | None = None
    artwork: str | None = None
    media: str | None = None
    start_override: float | None = None

    @classmethod
    def from_payload(
        cls,
        payload: Mapping[str, Any],
        *,
        added_at: float,
        default_duration: int = DEFAULT_TRACK_DURATION,
    ) -> "TrackEntry":
        """Validate a write payload and build an entry.

        ``title`` and the media reference (``media`` or ``url``) are required.
        An id is generated when the payload carries none.

        Raises:
            ValidationError: If a required field is missing or a field has the wrong type.
        """
        if not isinstance(payload, Mapping):
            raise ValidationError("track payload must be an object")

        title = payload.get("title")
        if not isinstance(title, str) or not title.strip():
            raise ValidationError("title is required")

        fields: dict[str, str | None] = {}
        for name, keys in _FIELD_ALIASES.items():
            value = _pick(payload, keys)
            if value is not None and not isinstance(value, str):
                raise ValidationError(f"{name} must be a string")
            fields[name] = value
        if not fields["media"] or not fields["media"].strip():
            raise ValidationError("media reference (url) is required")

        track_id = payload.get("id")
        if track_id is None:
            track_id = uuid.uuid4().hex
        elif isinstance(track_id, int) and not isinstance(track_id, bool):
            track_id = str(track_id)
        if not isinstance(track_id, str) or not track_id.strip():
            raise ValidationError("id must be a non-empty string")

        return cls(
            id=track_id,
            title=title,
            duration=_parse_duration(payload.get("duration"), default_duration),
            added_at=added_at,
            artist=fields["artist"],
            artwork=fields["artwork"],
            media=fields["media"],
        )

    def with_override(self, instant: float | None) -> "TrackEntry":
        """Copy of this entry with ``start_override`` set (or cleared with None)."""
        return replace(self, start_override=instant)


@dataclass(frozen=True)
class PlayEvent:
    """A track placed on the timeline.

    ``duration`` is the on-air duration in seconds. It equals the track's
    duration except when a pinned event cuts a filler short.
    """

    track: TrackEntry
    start: float
    duration: float
    pinned: bool = False

    @property
    def end(self) -> float:
        return self.start + self.duration

    def covers(self, instant: float) -> bool:
        return self.start <= instant < self.end
