"""Geospatial utilities (no external dependencies)."""

from __future__ import annotations

import math
from typing import Final

from delivery_mission.models import Coordinate

EARTH_RADIUS_M: Final[float] = 6_371_000.0  # mean Earth radius in meters


def haversine_m(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Compute Haversine distance in meters between two lat/lon points.

    Args:
        lat1: Latitude 1 in degrees.
        lon1: Longitude 1 in degrees.
        lat2: Latitude 2 in degrees.
        lon2: Longitude 2 in degrees.

    Returns:
        Distance in meters (always >= 0).
    """

    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = math.sin(d_phi / 2.0) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2.0) ** 2
    # rounding can push a slightly outside [0, 1] near coincident/antipodal points
    a = min(1.0, max(0.0, a))
    c = 2.0 * math.atan2(math.sqrt(a), math.sqrt(1.0 - a))
    return EARTH_RADIUS_M * c


def distance_m(a: Coordinate, b: Coordinate) -> float:
    """Great-circle distance in meters between two coordinates."""

    return haversine_m(a.latitude, a.longitude, b.latitude, b.longitude)

