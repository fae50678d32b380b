"""
REST API endpoints for playlist management.

Reads are public. Every write requires the broadcast key, checked by the
scheduler service before state is touched.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from ...runtime.scheduler_service import MutationResult, SchedulerService
from .deps import get_credential, get_service
from .schemas import MutationOut, OverrideIn, PlaylistOut, ReorderIn, TrackIn, TrackOut

router = APIRouter(prefix="/api/playlist", tags=["playlist"])


def _mutation_out(result: MutationResult) -> MutationOut:
    return MutationOut(
        changed=result.changed,
        version=result.version,
        playlist=[TrackOut.from_entry(t) for t in result.playlist],
        track=TrackOut.from_entry(result.track) if result.track else None,
        evicted=[TrackOut.from_entry(t) for t in result.evicted],
    )


@router.get("", response_model=PlaylistOut)
def list_playlist(service: SchedulerService = Depends(get_service)):
    """Current playlist in playback order."""
    playlist, version = service.playlist_with_version()
    return PlaylistOut(
        playlist=[TrackOut.from_entry(t) for t in playlist],
        totalDuration=sum(t.duration for t in playlist),
        version=version,
    )


@router.post("", response_model=MutationOut)
def add_track(
    body: TrackIn,
    service: SchedulerService = Depends(get_service),
    credential: str | None = Depends(get_credential),
):
    """Append a track. The oldest tracks are evicted when the day budget overflows."""
    return _mutation_out(service.add(body.to_payload(), credential=credential))


@router.put("/order", response_model=MutationOut)
def reorder_playlist(
    body: ReorderIn,
    service: SchedulerService = Depends(get_service),
    credential: str | None = Depends(get_credential),
):
    """Rewrite playback order. Tracks missing from ``ids`` are kept at the end."""
    return _mutation_out(service.reorder(body.ids, credential=credential))


@router.delete("/{track_id}", response_model=MutationOut)
def remove_track(
    track_id: str,
    service: SchedulerService = Depends(get_service),
    credential: str | None = Depends(get_credential),
):
    """Remove a track. Removing an unknown id succeeds with ``changed: false``."""
    return _mutation_out(service.remove(track_id, credential=credential))


@router.put("/{track_id}/override", response_model=MutationOut)
def set_override(
    track_id: str,
    body: OverrideIn,
    service: SchedulerService = Depends(get_service),
    credential: str | None = Depends(get_credential),
):
    """Pin a track to the next HH:MM (UTC)."""
    return _mutation_out(
        service.set_override(track_id, body.hour, body.minute, credential=credential)
    )


@router.delete("/{track_id}/override", response_model=MutationOut)
def clear_override(
    track_id: str,
    service: SchedulerService = Depends(get_service),
    credential: str | None = Depends(get_credential),
):
    """Unpin a track."""
    return _mutation_out(service.clear_override(track_id, credential=credential))
