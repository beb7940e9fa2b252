import pytest

from delivery_mission.location import (
    LocationStatus,
    LocationUnavailable,
    ReplayLocationProvider,
    StaticLocationProvider,
)
from delivery_mission.models import Coordinate, TrackPoint


def _points(n):
    return [TrackPoint(geo_time_ms=i * 1000, latitude=37.0 + i * 0.001, longitude=127.0) for i in range(n)]


def test_replay_provider_warmup_then_running():
    provider = ReplayLocationProvider(_points(3), warmup_polls=2)
    assert provider.status() is LocationStatus.INITIALIZING
    assert provider.status() is LocationStatus.INITIALIZING
    assert provider.status() is LocationStatus.RUNNING
    assert provider.current_position() == Coordinate(37.0, 127.0)


def test_replay_provider_ticks_and_holds_last_sample():
    points = _points(2)
    provider = ReplayLocationProvider(points)
    assert not provider.exhausted
    assert provider.tick() is True
    assert provider.exhausted
    assert provider.tick() is False
    assert provider.current_point() == points[-1]


def test_replay_provider_without_samples_fails():
    provider = ReplayLocationProvider([])
    assert provider.status() is LocationStatus.FAILED
    assert provider.failure_reason == "no location samples"
    with pytest.raises(LocationUnavailable):
        provider.current_position()


def test_static_provider_position_requires_running():
    provider = StaticLocationProvider(Coordinate(1.0, 2.0), status=LocationStatus.NOT_STARTED)
    with pytest.raises(LocationUnavailable):
        provider.current_position()
    provider.set_status(LocationStatus.RUNNING)
    assert provider.current_position() == Coordinate(1.0, 2.0)
