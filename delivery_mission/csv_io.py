"""CSV input/output for recorded tracks and replay reports."""

from __future__ import annotations

import csv
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Sequence

from delivery_mission.host import TickRecord
from delivery_mission.models import TrackPoint
from delivery_mission.timeutils import dt_from_epoch_ms

logger = logging.getLogger(__name__)

REQUIRED_FIELDNAMES: tuple[str, ...] = ("geoTime", "latitude", "longitude")
TRACK_FIELDNAMES: tuple[str, ...] = ("geoTime", "latitude", "longitude", "horizontalAccuracy")


@dataclass(frozen=True, slots=True)
class CsvSummary:
    """Quick summary of CSV parsing."""

    rows_total: int
    rows_parsed: int
    rows_skipped: int
    fieldnames: Sequence[str]


def _parse_int(value: str) -> int:
    return int(value.strip())


def _parse_float(value: str) -> float:
    return float(value.strip())


def _point_from_row(row: dict[str, str]) -> TrackPoint:
    return TrackPoint(
        geo_time_ms=_parse_int(row["geoTime"]),
        latitude=_parse_float(row["latitude"]),
        longitude=_parse_float(row["longitude"]),
        horizontal_accuracy_m=_parse_float(row.get("horizontalAccuracy", "-1") or "-1"),
    )


def load_track_points(csv_path: str | Path) -> tuple[list[TrackPoint], CsvSummary]:
    """Load all points into memory, sorted by time.

    Args:
        csv_path: Path to the track CSV.

    Returns:
        (points, summary)

    Raises:
        KeyError: If a required column (geoTime/latitude/longitude) is missing.

    Notes:
        Optional column: horizontalAccuracy. Other columns are ignored.
    """

    p = Path(csv_path)
    rows_total = 0
    parsed: list[TrackPoint] = []
    fieldnames: Sequence[str] = ()

    with p.open("r", encoding="utf-8", newline="") as f:
        reader = csv.DictReader(f)
        fieldnames = reader.fieldnames or ()
        missing = [c for c in REQUIRED_FIELDNAMES if c not in fieldnames]
        if missing:
            raise KeyError(f"track CSV is missing columns {missing}. Columns: {list(fieldnames)}")
        for row in reader:
            rows_total += 1
            try:
                parsed.append(_point_from_row(row))
            except (KeyError, ValueError, TypeError, AttributeError):
                continue

    parsed.sort(key=lambda pt: pt.geo_time_ms)
    summary = CsvSummary(
        rows_total=rows_total,
        rows_parsed=len(parsed),
        rows_skipped=rows_total - len(parsed),
        fieldnames=fieldnames,
    )
    if summary.rows_skipped > 0:
        logger.warning("skipped %s unparseable rows in %s", summary.rows_skipped, p)
    return parsed, summary


def write_track_csv(points: Iterable[TrackPoint], out_path: str | Path) -> None:
    """Write points in the track CSV format read by load_track_points."""

    p = Path(out_path)
    with p.open("w", encoding="utf-8", newline="") as f:
        w = csv.DictWriter(f, fieldnames=list(TRACK_FIELDNAMES))
        w.writeheader()
        for pt in points:
            w.writerow(
                {
                    "geoTime": pt.geo_time_ms,
                    "latitude": f"{pt.latitude:.7f}",
                    "longitude": f"{pt.longitude:.7f}",
                    "horizontalAccuracy": f"{pt.horizontal_accuracy_m:.1f}",
                }
            )


def write_ticks_csv(records: Iterable[TickRecord], out_path: str | Path, tz_name: str) -> None:
    """Write a per-tick replay report.

    Output columns:
        - tick, time_local, latitude, longitude (empty while the sensor initializes)
        - state, distance_m, progress_percent, message
    """

    p = Path(out_path)
    with p.open("w", encoding="utf-8", newline="") as f:
        w = csv.DictWriter(
            f,
            fieldnames=[
                "tick",
                "time_local",
                "latitude",
                "longitude",
                "state",
                "distance_m",
                "progress_percent",
                "message",
            ],
        )
        w.writeheader()
        for rec in records:
            pt = rec.point
            snap = rec.snapshot
            w.writerow(
                {
                    "tick": rec.tick,
                    "time_local": dt_from_epoch_ms(pt.geo_time_ms, tz_name).isoformat(sep=" ") if pt else "",
                    "latitude": pt.latitude if pt else "",
                    "longitude": pt.longitude if pt else "",
                    "state": snap.state.value,
                    "distance_m": f"{snap.distance_to_target_m:.2f}",
                    "progress_percent": f"{snap.progress_percent:.1f}",
                    # keep one row per tick in spreadsheet tools
                    "message": snap.message.replace("\n", " "),
                }
            )
