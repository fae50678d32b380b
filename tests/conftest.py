"""
Global test configuration for airday.

This module provides global pytest configuration and fixtures.
"""

import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest

# Ensure the project src directory is importable without relying on external environment.
PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_PATH = PROJECT_ROOT / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from airday.runtime.clock import SteppedMasterClock  # noqa: E402
from airday.runtime.scheduler_service import (  # noqa: E402
    SchedulerService,
    StationState,
    TokenAuthorizer,
)

# Fixed UTC midnight for reproducible tests
BASE = datetime(2026, 3, 1, 0, 0, 0, tzinfo=timezone.utc)
DAY_START = BASE.timestamp()
BROADCAST_KEY = "test-broadcast-key"


def track(track_id: str, duration: int | None = 180, **extra) -> dict:
    """Minimal valid track payload."""
    payload = {"id": track_id, "title": f"Song {track_id}", "url": f"https://media.example/{track_id}.mp3"}
    if duration is not None:
        payload["duration"] = duration
    payload.update(extra)
    return payload


@pytest.fixture
def clock() -> SteppedMasterClock:
    """Clock frozen at 00:00 UTC on the test day."""
    return SteppedMasterClock(DAY_START)


@pytest.fixture
def service(clock) -> SchedulerService:
    """Scheduler with no authorization gate."""
    return SchedulerService(StationState(), clock=clock)


@pytest.fixture
def guarded_service(clock) -> SchedulerService:
    """Scheduler gated by the test broadcast key."""
    return SchedulerService(StationState(), clock=clock, authorizer=TokenAuthorizer(BROADCAST_KEY))
