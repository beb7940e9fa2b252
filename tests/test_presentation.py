from delivery_mission.models import MissionSnapshot, MissionState
from delivery_mission.presentation import build_view, format_distance_km, format_distance_m


def test_idle_shows_enabled_start_button():
    view = build_view(MissionSnapshot(MissionState.IDLE, 0.0, 0.0, "ready"))
    assert view.show_start_button and view.start_enabled
    assert not view.show_progress
    assert view.status_text == "ready"


def test_delivery_shows_progress_and_remaining_km():
    view = build_view(MissionSnapshot(MissionState.IN_DELIVERY, 1234.0, 0.42, "Delivery in progress: 42%"))
    assert view.show_progress
    assert view.progress_fraction == 0.42
    assert view.remaining_text == "Remaining distance: 1.23km"
    assert not view.show_start_button


def test_sensor_failure_disables_start():
    view = build_view(MissionSnapshot(MissionState.SENSOR_FAILED, 0.0, 0.0, "failed: permission denied"))
    assert not view.start_enabled
    assert not view.show_start_button
    assert "permission denied" in view.status_text


def test_awaiting_sensor_uses_host_text():
    snap = MissionSnapshot(MissionState.AWAITING_SENSOR, 0.0, 0.0, "init")
    assert build_view(snap, awaiting_text="Fetching location... (INITIALIZING)").status_text.startswith("Fetching")
    assert build_view(snap).status_text == "init"


def test_completed_hides_progress():
    view = build_view(MissionSnapshot(MissionState.COMPLETED, 3.0, 1.0, "arrived"))
    assert not view.show_progress
    assert view.remaining_text == ""


def test_distance_formatting():
    assert format_distance_m(12.346) == "12.35m"
    assert format_distance_km(106.6) == "0.11km"
