from __future__ import annotations

import argparse
import math
import random
from datetime import datetime, timedelta
from pathlib import Path

from zoneinfo import ZoneInfo

from delivery_mission.csv_io import write_track_csv
from delivery_mission.models import DEFAULT_DESTINATION, DEFAULT_START, DEFAULT_TZ, Coordinate, TrackPoint
from delivery_mission.timeutils import epoch_ms_from_dt

# degrees of latitude per meter (close enough for a demo track)
_DEG_PER_M = 1.0 / 111_320.0


def _offset(c: Coordinate, north_m: float, east_m: float) -> Coordinate:
    lat = c.latitude + north_m * _DEG_PER_M
    lon = c.longitude + east_m * _DEG_PER_M / max(1e-9, math.cos(math.radians(c.latitude)))
    return Coordinate(lat, lon)


def _walk(a: Coordinate, b: Coordinate, steps: int) -> list[Coordinate]:
    return [
        Coordinate(
            a.latitude + (b.latitude - a.latitude) * i / steps,
            a.longitude + (b.longitude - a.longitude) * i / steps,
        )
        for i in range(1, steps + 1)
    ]


def generate_points(
    *,
    seed: int,
    start_local: datetime,
    start: Coordinate,
    destination: Coordinate,
    approach_m: float,
    step_seconds: float,
    jitter_m: float,
) -> list[TrackPoint]:
    """Generate a walk: approach the pickup point from afar, then carry on to the destination."""

    rng = random.Random(seed)
    cur = start_local.replace(tzinfo=ZoneInfo(DEFAULT_TZ))
    origin = _offset(start, approach_m * 0.6, -approach_m * 0.8)

    path = [origin]
    path += _walk(origin, start, max(2, int(approach_m / 5)))
    path += _walk(start, destination, max(2, int(approach_m / 5)))
    # linger at the destination
    path += [destination] * 3

    out: list[TrackPoint] = []
    for c in path:
        jittered = _offset(c, rng.uniform(-jitter_m, jitter_m), rng.uniform(-jitter_m, jitter_m))
        cur = cur + timedelta(seconds=step_seconds * rng.uniform(0.8, 1.2))
        out.append(
            TrackPoint(
                geo_time_ms=epoch_ms_from_dt(cur),
                latitude=jittered.latitude,
                longitude=jittered.longitude,
                horizontal_accuracy_m=rng.choice([3.0, 5.0, 8.0]),
            )
        )
    return out


def main() -> int:
    p = argparse.ArgumentParser(description="Generate a fake delivery track CSV for demo/testing (privacy-safe).")
    p.add_argument("--out", type=str, default="sample_data/track.csv", help="Output CSV path")
    p.add_argument("--seed", type=int, default=42, help="Random seed (reproducible)")
    p.add_argument("--approach-m", type=float, default=300.0, help="Distance of the first sample from the pickup point")
    p.add_argument("--step-seconds", type=float, default=5.0, help="Mean seconds between samples")
    p.add_argument("--jitter-m", type=float, default=2.0, help="Uniform GPS jitter in meters")
    p.add_argument(
        "--start",
        type=str,
        default="2025-01-01 12:00:00",
        help=f"Start local time in {DEFAULT_TZ}, e.g. '2025-01-01 12:00:00'",
    )
    args = p.parse_args()

    points = generate_points(
        seed=args.seed,
        start_local=datetime.fromisoformat(args.start),
        start=DEFAULT_START,
        destination=DEFAULT_DESTINATION,
        approach_m=args.approach_m,
        step_seconds=args.step_seconds,
        jitter_m=args.jitter_m,
    )
    out_path = Path(args.out)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    write_track_csv(points, out_path)

    print(f"Generated: {out_path} (rows={len(points)}, seed={args.seed})")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
