"""Location provider boundary.

The mission core never acquires positions itself. A host polls a provider each tick
and only trusts current_position() while status() is RUNNING.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Protocol, Sequence

from delivery_mission.models import Coordinate, TrackPoint

logger = logging.getLogger(__name__)


class LocationUnavailable(RuntimeError):
    """current_position() was called while the provider has no fix."""


class LocationStatus(Enum):
    NOT_STARTED = "not_started"
    INITIALIZING = "initializing"
    RUNNING = "running"
    FAILED = "failed"


class LocationProvider(Protocol):
    """What the host needs from a positioning source."""

    failure_reason: str

    def status(self) -> LocationStatus: ...

    def current_position(self) -> Coordinate:
        """Latest fix. Raises LocationUnavailable when there is none."""
        ...


class StaticLocationProvider:
    """A provider whose status and position are set by hand (tests, manual driving)."""

    def __init__(
        self,
        position: Coordinate | None = None,
        status: LocationStatus = LocationStatus.RUNNING,
    ) -> None:
        self._position = position
        self._status = status
        self.failure_reason = ""

    def status(self) -> LocationStatus:
        return self._status

    def current_position(self) -> Coordinate:
        if self._status is not LocationStatus.RUNNING or self._position is None:
            raise LocationUnavailable(f"no position available (status={self._status.name})")
        return self._position

    def move_to(self, position: Coordinate) -> None:
        self._position = position

    def set_status(self, status: LocationStatus, reason: str = "") -> None:
        self._status = status
        if status is LocationStatus.FAILED:
            self.failure_reason = reason


class ReplayLocationProvider:
    """Replay recorded track points as if they came from a live device.

    The provider reports INITIALIZING for the first `warmup_polls` status() calls, then
    RUNNING. tick() moves to the next sample; the last sample is held once the track
    is exhausted. An empty track reports FAILED.
    """

    def __init__(self, points: Sequence[TrackPoint], warmup_polls: int = 0) -> None:
        self._points = list(points)
        self._index = 0
        self._warmup_left = max(0, int(warmup_polls))
        self.failure_reason = ""
        if not self._points:
            self.failure_reason = "no location samples"
            logger.warning("replay provider created without samples")

    def status(self) -> LocationStatus:
        if not self._points:
            return LocationStatus.FAILED
        if self._warmup_left > 0:
            self._warmup_left -= 1
            return LocationStatus.INITIALIZING
        return LocationStatus.RUNNING

    def current_position(self) -> Coordinate:
        return self.current_point().coordinate

    def current_point(self) -> TrackPoint:
        if not self._points:
            raise LocationUnavailable("no position available (status=FAILED)")
        return self._points[self._index]

    @property
    def exhausted(self) -> bool:
        return self._index >= len(self._points) - 1

    def tick(self) -> bool:
        """Advance to the next sample. Returns False when already at the last one."""

        if self.exhausted:
            return False
        self._index += 1
        return True
