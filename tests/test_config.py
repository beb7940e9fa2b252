import json

import pytest

from delivery_mission.config import load_mission_config, mission_config_from_args, validate_config
from delivery_mission.errors import ConfigError
from delivery_mission.models import Coordinate, MissionConfig, WaypointRole


def _write(tmp_path, payload):
    p = tmp_path / "mission.json"
    p.write_text(payload if isinstance(payload, str) else json.dumps(payload), encoding="utf-8")
    return p


def test_load_mission_config(tmp_path):
    p = _write(
        tmp_path,
        {
            "start": {"latitude": 37.4776, "longitude": 126.8612, "label": "convenience store"},
            "destination": {"latitude": 37.4775, "longitude": 126.8624},
            "arrival_radius_m": 15,
        },
    )
    config = load_mission_config(p)
    assert config.start == Coordinate(37.4776, 126.8612)
    assert config.arrival_radius_m == 15.0
    start, dest = config.waypoints()
    assert start.role is WaypointRole.START and start.label == "convenience store"
    assert dest.role is WaypointRole.DESTINATION and dest.label == "destination"


def test_missing_radius_uses_default(tmp_path):
    p = _write(tmp_path, {"start": {"latitude": 1, "longitude": 2}, "destination": {"latitude": 1, "longitude": 3}})
    assert load_mission_config(p).arrival_radius_m == 10.0


@pytest.mark.parametrize(
    "payload",
    [
        "{not json",
        "[1, 2]",
        {"destination": {"latitude": 1, "longitude": 2}},
        {"start": {"latitude": "north", "longitude": 2}, "destination": {"latitude": 1, "longitude": 2}},
        {"start": {"latitude": 1, "longitude": 2}, "destination": {"latitude": 1, "longitude": 2}, "arrival_radius_m": 0},
        {"start": {"latitude": 95, "longitude": 2}, "destination": {"latitude": 1, "longitude": 2}},
    ],
)
def test_invalid_config_files(tmp_path, payload):
    with pytest.raises(ConfigError):
        load_mission_config(_write(tmp_path, payload))


def test_missing_file_is_config_error(tmp_path):
    with pytest.raises(ConfigError):
        load_mission_config(tmp_path / "nope.json")


def test_config_error_is_value_error():
    with pytest.raises(ValueError):
        mission_config_from_args(37.0, 127.0, 37.1, 127.1, radius_m=-1.0)


def test_validate_longitude_range():
    with pytest.raises(ConfigError):
        validate_config(MissionConfig(Coordinate(0.0, 181.0), Coordinate(0.0, 0.0)))
