import json

from conftest import SCENARIO_DESTINATION, SCENARIO_START, north_of
from delivery_mission.cli import main
from delivery_mission.csv_io import write_track_csv
from delivery_mission.models import TrackPoint


def _scenario_args():
    return [
        "--start-lat", str(SCENARIO_START.latitude),
        "--start-lon", str(SCENARIO_START.longitude),
        "--dest-lat", str(SCENARIO_DESTINATION.latitude),
        "--dest-lon", str(SCENARIO_DESTINATION.longitude),
    ]


def _write_track(path, coords):
    write_track_csv(
        [TrackPoint(1_700_000_000_000 + i * 5000, c.latitude, c.longitude, 5.0) for i, c in enumerate(coords)],
        path,
    )


def test_distance_command(capsys):
    assert main(["distance", "--from-lat", "10", "--from-lon", "20", "--to-lat", "11", "--to-lon", "20"]) == 0
    assert capsys.readouterr().out.strip() == "111194.93"


def test_replay_completed_mission(tmp_path, capsys):
    track = tmp_path / "track.csv"
    out = tmp_path / "ticks.csv"
    _write_track(track, [north_of(SCENARIO_START, 300.0), SCENARIO_START, SCENARIO_DESTINATION])

    code = main(["replay", "--csv", str(track), "--out", str(out), "--json", *_scenario_args()])
    assert code == 0

    stdout = capsys.readouterr().out
    assert "EN_ROUTE_TO_START" in stdout
    assert "IN_DELIVERY" in stdout
    assert "final state=COMPLETED" in stdout
    payload = json.loads(stdout[stdout.index("{"):])
    assert payload["state"] == "completed"
    assert payload["ticks"] == 3
    assert out.exists()


def test_replay_unfinished_mission_exit_code(tmp_path, capsys):
    track = tmp_path / "track.csv"
    _write_track(track, [north_of(SCENARIO_START, 300.0)])
    assert main(["replay", "--csv", str(track), *_scenario_args()]) == 1
    assert "final state=EN_ROUTE_TO_START" in capsys.readouterr().out


def test_replay_invalid_radius(tmp_path, capsys):
    track = tmp_path / "track.csv"
    _write_track(track, [SCENARIO_START])
    assert main(["replay", "--csv", str(track), "--radius-m", "0", *_scenario_args()]) == 2
    assert "invalid mission config" in capsys.readouterr().err


def test_replay_with_config_file(tmp_path, capsys):
    track = tmp_path / "track.csv"
    cfg = tmp_path / "mission.json"
    cfg.write_text(
        json.dumps(
            {
                "start": {"latitude": SCENARIO_START.latitude, "longitude": SCENARIO_START.longitude},
                "destination": {"latitude": SCENARIO_DESTINATION.latitude, "longitude": SCENARIO_DESTINATION.longitude},
                "arrival_radius_m": 10,
            }
        ),
        encoding="utf-8",
    )
    _write_track(track, [SCENARIO_START, SCENARIO_DESTINATION])
    assert main(["replay", "--csv", str(track), "--config", str(cfg)]) == 0


def test_replay_missing_csv(tmp_path, capsys):
    missing = tmp_path / "nope.csv"
    assert main(["replay", "--csv", str(missing), *_scenario_args()]) == 2
    assert "cannot read track CSV" in capsys.readouterr().err


def test_replay_csv_without_coordinate_columns(tmp_path, capsys):
    track = tmp_path / "track.csv"
    track.write_text("geoTime,lat,lon\n1000,37.0,127.0\n", encoding="utf-8")
    assert main(["replay", "--csv", str(track), *_scenario_args()]) == 2
    assert "missing columns" in capsys.readouterr().err


def test_replay_unknown_timezone(tmp_path, capsys):
    track = tmp_path / "track.csv"
    _write_track(track, [SCENARIO_START])
    assert main(["replay", "--csv", str(track), "--tz", "Mars/Olympus", *_scenario_args()]) == 2
    captured = capsys.readouterr()
    assert "Mars/Olympus" in captured.err
    assert "samples:" not in captured.out
