"""Data models for waypoints, mission configuration and snapshots."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Final


@dataclass(frozen=True, slots=True)
class Coordinate:
    """A point on the Earth's surface in decimal degrees."""

    latitude: float
    longitude: float


class WaypointRole(Enum):
    """Which leg of the mission a waypoint belongs to."""

    START = "start"
    DESTINATION = "destination"


@dataclass(frozen=True, slots=True)
class Waypoint:
    """A coordinate tagged with its role in the mission."""

    coordinate: Coordinate
    role: WaypointRole
    label: str = ""


@dataclass(frozen=True, slots=True)
class MissionConfig:
    """Static mission definition, fixed for the whole mission.

    Attributes:
        start: Pickup point the user must reach first.
        destination: Final delivery point.
        arrival_radius_m: A waypoint counts as reached within this distance.
        start_label: Display name of the pickup point.
        destination_label: Display name of the destination.
    """

    start: Coordinate
    destination: Coordinate
    arrival_radius_m: float = 10.0
    start_label: str = "pickup point"
    destination_label: str = "destination"

    def waypoints(self) -> tuple[Waypoint, Waypoint]:
        """Return (start, destination) as tagged waypoints."""

        return (
            Waypoint(self.start, WaypointRole.START, self.start_label),
            Waypoint(self.destination, WaypointRole.DESTINATION, self.destination_label),
        )


class MissionState(Enum):
    """Mission lifecycle.

    The lifecycle states are strictly ordered and only move forward.
    SENSOR_FAILED is terminal and sits outside that ordering.
    """

    AWAITING_SENSOR = "awaiting_sensor"
    IDLE = "idle"
    EN_ROUTE_TO_START = "en_route_to_start"
    IN_DELIVERY = "in_delivery"
    COMPLETED = "completed"
    SENSOR_FAILED = "sensor_failed"

    @property
    def is_terminal(self) -> bool:
        return self in (MissionState.COMPLETED, MissionState.SENSOR_FAILED)

    @property
    def order(self) -> int | None:
        """Position in the lifecycle, or None for SENSOR_FAILED."""

        return _LIFECYCLE.index(self) if self in _LIFECYCLE else None


_LIFECYCLE: Final[tuple[MissionState, ...]] = (
    MissionState.AWAITING_SENSOR,
    MissionState.IDLE,
    MissionState.EN_ROUTE_TO_START,
    MissionState.IN_DELIVERY,
    MissionState.COMPLETED,
)


@dataclass(frozen=True, slots=True)
class MissionSnapshot:
    """Read-only view of the mission after the latest tick.

    Attributes:
        state: Current mission state.
        distance_to_target_m: Distance to the active waypoint. 0.0 when no leg is active.
        progress_fraction: Delivery progress in [0, 1].
        message: Human-readable status line.
    """

    state: MissionState
    distance_to_target_m: float
    progress_fraction: float
    message: str

    @property
    def progress_percent(self) -> float:
        return self.progress_fraction * 100.0


@dataclass(frozen=True, slots=True)
class TrackPoint:
    """A single recorded location sample.

    Attributes:
        geo_time_ms: Unix epoch milliseconds.
        latitude: Latitude in decimal degrees.
        longitude: Longitude in decimal degrees.
        horizontal_accuracy_m: Horizontal accuracy in meters. Some rows use -1.0.
    """

    geo_time_ms: int
    latitude: float
    longitude: float
    horizontal_accuracy_m: float = -1.0

    @property
    def coordinate(self) -> Coordinate:
        return Coordinate(self.latitude, self.longitude)


DEFAULT_START: Final[Coordinate] = Coordinate(37.477597, 126.861248)
DEFAULT_DESTINATION: Final[Coordinate] = Coordinate(37.477521, 126.862443)
DEFAULT_ARRIVAL_RADIUS_M: Final[float] = 10.0
# Start and destination closer than this make the delivery leg meaningless.
MIN_DELIVERY_DISTANCE_M: Final[float] = 1.0
DEFAULT_TZ: Final[str] = "Asia/Seoul"
