"""
Listener-facing endpoints: live state, the day's schedule, and the version
counter polled by dashboards. All public.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from ...runtime.broadcast_day import day_window, to_epoch_ms
from ...runtime.scheduler_service import SchedulerService
from .deps import get_service
from .schemas import LiveOut, PlayEventOut, ScheduleOut

router = APIRouter(prefix="/api", tags=["live"])


@router.get("/live", response_model=LiveOut)
def live(service: SchedulerService = Depends(get_service)):
    """What is on air right now.

    The live item follows the clock and the day's schedule; there is no
    manual skip. Operators move a track on air by pinning it with
    ``PUT /api/playlist/{id}/override``.
    """
    state, version = service.live_with_version()
    return LiveOut.from_state(state, version)


@router.get("/schedule", response_model=ScheduleOut)
def schedule(service: SchedulerService = Depends(get_service)):
    """Every play event of the current UTC day."""
    now = service.clock.now()
    events = service.full_schedule(now)
    start, end = day_window(now)
    return ScheduleOut(
        serverNow=to_epoch_ms(now),
        dayStart=to_epoch_ms(start),
        dayEnd=to_epoch_ms(end),
        events=[PlayEventOut.from_event(e) for e in events],
    )


@router.get("/version")
def version(service: SchedulerService = Depends(get_service)):
    """Mutation counter; unchanged value means nothing changed."""
    return {"version": service.version}
