"""Master clock abstractions used by the scheduler.

The master clock supplies *station time* as epoch seconds (UTC). It is
injected into the scheduler service instead of being read ambiently, so the
schedule for any instant can be reproduced in tests.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from threading import Lock
from typing import Callable, Protocol, runtime_checkable

TimeFn = Callable[[], float]


@runtime_checkable
class MasterClock(Protocol):
    """Protocol implemented by master clock providers."""

    def now(self) -> float:
        """Return the current station time in epoch seconds."""


@dataclass
class SystemMasterClock:
    """Master clock backed by the wall clock.

    Parameters
    ----------
    time_fn:
        Injectable time source, defaults to :func:`time.time`.
    """

    time_fn: TimeFn = field(default=time.time)

    def now(self) -> float:
        """Return the current station time in epoch seconds."""
        return self.time_fn()


class SteppedMasterClock:
    """Deterministic master clock used for tests.

    Station time advances only when :meth:`advance` or :meth:`set` is called.
    """

    def __init__(self, start: float = 0.0) -> None:
        self._current = start
        self._lock = Lock()

    @classmethod
    def at(cls, moment: datetime) -> "SteppedMasterClock":
        """Build a clock frozen at an aware datetime."""
        if moment.tzinfo is None or moment.tzinfo.utcoffset(moment) is None:
            raise ValueError("Datetime must be timezone-aware")
        return cls(moment.astimezone(timezone.utc).timestamp())

    def now(self) -> float:
        with self._lock:
            return self._current

    def advance(self, seconds: float) -> float:
        """Advance the clock by ``seconds`` (must be non-negative)."""
        if seconds < 0.0:
            raise ValueError("seconds must be non-negative")
        with self._lock:
            self._current += seconds
            return self._current

    def set(self, epoch_seconds: float) -> None:
        """Jump to an absolute instant. Tests use this to cross day boundaries."""
        with self._lock:
            self._current = epoch_seconds
