"""Mission configuration: validation and loading from JSON."""

from __future__ import annotations

import json
import math
from pathlib import Path
from typing import Any

from delivery_mission.errors import ConfigError
from delivery_mission.models import DEFAULT_ARRIVAL_RADIUS_M, Coordinate, MissionConfig


def _validate_coordinate(name: str, c: Coordinate) -> None:
    if not (math.isfinite(c.latitude) and math.isfinite(c.longitude)):
        raise ConfigError(f"{name}: coordinates must be finite, got {c}")
    if not -90.0 <= c.latitude <= 90.0:
        raise ConfigError(f"{name}: latitude out of range [-90, 90]: {c.latitude}")
    if not -180.0 <= c.longitude <= 180.0:
        raise ConfigError(f"{name}: longitude out of range [-180, 180]: {c.longitude}")


def validate_config(config: MissionConfig) -> MissionConfig:
    """Check a mission configuration.

    Args:
        config: Configuration to check.

    Returns:
        The same config, for chaining.

    Raises:
        ConfigError: If the radius is not a positive finite number or a waypoint
            lies outside valid latitude/longitude ranges.
    """

    radius = config.arrival_radius_m
    if not math.isfinite(radius) or radius <= 0:
        raise ConfigError(f"arrival_radius_m must be > 0, got {radius!r}")
    _validate_coordinate("start", config.start)
    _validate_coordinate("destination", config.destination)
    return config


def mission_config_from_args(
    start_lat: float,
    start_lon: float,
    dest_lat: float,
    dest_lon: float,
    radius_m: float = DEFAULT_ARRIVAL_RADIUS_M,
) -> MissionConfig:
    """Build and validate a config from plain numbers (CLI / UI input)."""

    return validate_config(
        MissionConfig(
            start=Coordinate(float(start_lat), float(start_lon)),
            destination=Coordinate(float(dest_lat), float(dest_lon)),
            arrival_radius_m=float(radius_m),
        )
    )


def _coordinate_from(raw: dict[str, Any]) -> Coordinate:
    return Coordinate(latitude=float(raw["latitude"]), longitude=float(raw["longitude"]))


def mission_config_from_dict(raw: dict[str, Any]) -> MissionConfig:
    """Build a config from a mapping.

    Expected shape::

        {
          "start": {"latitude": 37.4776, "longitude": 126.8612, "label": "store"},
          "destination": {"latitude": 37.4775, "longitude": 126.8624},
          "arrival_radius_m": 10
        }
    """

    try:
        start_raw = raw["start"]
        dest_raw = raw["destination"]
        config = MissionConfig(
            start=_coordinate_from(start_raw),
            destination=_coordinate_from(dest_raw),
            arrival_radius_m=float(raw.get("arrival_radius_m", DEFAULT_ARRIVAL_RADIUS_M)),
            start_label=str(start_raw.get("label", "pickup point")),
            destination_label=str(dest_raw.get("label", "destination")),
        )
    except KeyError as exc:
        raise ConfigError(f"mission config is missing field {exc}") from exc
    except (TypeError, ValueError, AttributeError) as exc:
        raise ConfigError(f"mission config has an invalid value: {exc}") from exc
    return validate_config(config)


def load_mission_config(path: str | Path) -> MissionConfig:
    """Load a mission config from a JSON file.

    Raises:
        ConfigError: If the file is missing, not valid JSON, or describes an
            invalid mission.
    """

    p = Path(path)
    try:
        raw = json.loads(p.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ConfigError(f"cannot read mission config {str(p)!r}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise ConfigError(f"mission config {str(p)!r} is not valid JSON: {exc}") from exc
    if not isinstance(raw, dict):
        raise ConfigError(f"mission config {str(p)!r} must be a JSON object")
    return mission_config_from_dict(raw)
