import math

import pytest

from delivery_mission.geo import EARTH_RADIUS_M
from delivery_mission.models import Coordinate, MissionConfig

SCENARIO_START = Coordinate(37.4776, 126.8612)
SCENARIO_DESTINATION = Coordinate(37.4775, 126.8624)


def north_of(c: Coordinate, meters: float) -> Coordinate:
    """Coordinate exactly `meters` due north of c (along the meridian)."""

    return Coordinate(c.latitude + meters / (math.radians(1.0) * EARTH_RADIUS_M), c.longitude)


def between(a: Coordinate, b: Coordinate, fraction: float) -> Coordinate:
    return Coordinate(
        a.latitude + (b.latitude - a.latitude) * fraction,
        a.longitude + (b.longitude - a.longitude) * fraction,
    )


@pytest.fixture
def scenario_config() -> MissionConfig:
    return MissionConfig(start=SCENARIO_START, destination=SCENARIO_DESTINATION, arrival_radius_m=10.0)
