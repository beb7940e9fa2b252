"""Command-line interface for delivery_mission.

Run:
    python -m delivery_mission replay --csv track.csv --config mission.json
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import asdict

from delivery_mission.config import load_mission_config, mission_config_from_args
from delivery_mission.csv_io import load_track_points, write_ticks_csv
from delivery_mission.errors import ConfigError
from delivery_mission.geo import haversine_m
from delivery_mission.host import replay_mission
from delivery_mission.models import (
    DEFAULT_ARRIVAL_RADIUS_M,
    DEFAULT_DESTINATION,
    DEFAULT_START,
    DEFAULT_TZ,
    MissionConfig,
    MissionState,
)
from delivery_mission.timeutils import dt_from_epoch_ms, tzinfo_from_name


def _cmd_distance(args: argparse.Namespace) -> int:
    d = haversine_m(args.from_lat, args.from_lon, args.to_lat, args.to_lon)
    print(f"{d:.2f}")
    return 0


def _mission_config(args: argparse.Namespace) -> MissionConfig:
    if args.config is not None:
        return load_mission_config(args.config)
    return mission_config_from_args(
        start_lat=args.start_lat,
        start_lon=args.start_lon,
        dest_lat=args.dest_lat,
        dest_lon=args.dest_lon,
        radius_m=args.radius_m,
    )


def _cmd_replay(args: argparse.Namespace) -> int:
    try:
        config = _mission_config(args)
    except ConfigError as exc:
        print(f"invalid mission config: {exc}", file=sys.stderr)
        return 2
    try:
        tzinfo_from_name(args.tz)
    except ValueError as exc:
        print(str(exc), file=sys.stderr)
        return 2

    try:
        points, summary = load_track_points(args.csv)
    except OSError as exc:
        print(f"cannot read track CSV {args.csv!r}: {exc}", file=sys.stderr)
        return 2
    except KeyError as exc:
        print(f"invalid track CSV {args.csv!r}: {exc.args[0]}", file=sys.stderr)
        return 2
    print(f"samples: parsed={summary.rows_parsed}, skipped={summary.rows_skipped}")

    records = replay_mission(config, points, warmup_polls=args.warmup_polls)

    last_state: MissionState | None = None
    for rec in records:
        snap = rec.snapshot
        if snap.state is last_state:
            continue
        when = dt_from_epoch_ms(rec.point.geo_time_ms, args.tz).isoformat(sep=" ") if rec.point else "-"
        print(f"[tick {rec.tick:>5}] {when}  {snap.state.name:<18} {snap.message.splitlines()[0]}")
        last_state = snap.state

    final = records[-1].snapshot
    print()
    print(f"final state={final.state.name}, distance={final.distance_to_target_m:.2f}m, "
          f"progress={final.progress_percent:.0f}%")
    print(final.message)

    if args.out:
        write_ticks_csv(records, args.out, args.tz)
        print(f"exported: {args.out}")

    if args.json:
        payload = asdict(final) | {"state": final.state.value, "ticks": len(records)}
        print(json.dumps(payload, ensure_ascii=False, indent=2))

    return 0 if final.state is MissionState.COMPLETED else 1


def build_parser() -> argparse.ArgumentParser:
    """Build CLI parser."""

    p = argparse.ArgumentParser(prog="delivery_mission")
    p.add_argument(
        "--log-level",
        type=str,
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (INFO shows every state transition)",
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    p_dist = sub.add_parser("distance", help="Great-circle distance in meters between two points")
    p_dist.add_argument("--from-lat", type=float, required=True)
    p_dist.add_argument("--from-lon", type=float, required=True)
    p_dist.add_argument("--to-lat", type=float, required=True)
    p_dist.add_argument("--to-lon", type=float, required=True)
    p_dist.set_defaults(func=_cmd_distance)

    p_rep = sub.add_parser("replay", help="Replay a recorded track through a delivery mission")
    p_rep.add_argument("--csv", type=str, default="track.csv", help="Input track CSV path")
    p_rep.add_argument("--config", type=str, default=None, help="Mission config JSON (overrides the flags below)")
    p_rep.add_argument("--start-lat", type=float, default=DEFAULT_START.latitude, help="Pickup point latitude")
    p_rep.add_argument("--start-lon", type=float, default=DEFAULT_START.longitude, help="Pickup point longitude")
    p_rep.add_argument("--dest-lat", type=float, default=DEFAULT_DESTINATION.latitude, help="Destination latitude")
    p_rep.add_argument("--dest-lon", type=float, default=DEFAULT_DESTINATION.longitude, help="Destination longitude")
    p_rep.add_argument(
        "--radius-m",
        type=float,
        default=DEFAULT_ARRIVAL_RADIUS_M,
        help="Arrival radius in meters for both waypoints",
    )
    p_rep.add_argument(
        "--warmup-polls",
        type=int,
        default=0,
        help="Ticks the replayed sensor spends initializing before it reports positions",
    )
    p_rep.add_argument("--tz", type=str, default=DEFAULT_TZ, help="Timezone (IANA) for printed times")
    p_rep.add_argument("--out", type=str, default=None, help="Optional per-tick report CSV")
    p_rep.add_argument("--json", action="store_true", help="Also print the final snapshot as JSON")
    p_rep.set_defaults(func=_cmd_replay)

    return p


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint."""

    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level), format="%(levelname)s %(name)s: %(message)s")
    return int(args.func(args))


if __name__ == "__main__":
    raise SystemExit(main())
