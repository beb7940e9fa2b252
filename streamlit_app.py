from __future__ import annotations

from pathlib import Path

import streamlit as st

from delivery_mission.config import mission_config_from_args
from delivery_mission.csv_io import load_track_points
from delivery_mission.errors import ConfigError
from delivery_mission.host import MissionHost
from delivery_mission.location import ReplayLocationProvider
from delivery_mission.mission import MissionStateMachine
from delivery_mission.models import (
    DEFAULT_ARRIVAL_RADIUS_M,
    DEFAULT_DESTINATION,
    DEFAULT_START,
    MissionState,
)
from delivery_mission.presentation import START_BUTTON_LABEL, build_view, format_distance_m


def _tick(host: MissionHost) -> None:
    """One host tick, then move the replayed sensor to its next sample."""

    host.poll()
    if host.machine.state in (MissionState.EN_ROUTE_TO_START, MissionState.IN_DELIVERY):
        provider = host.provider
        if isinstance(provider, ReplayLocationProvider):
            provider.tick()


@st.cache_data(show_spinner=False)
def _load_points(track_csv: str, mtime: float):
    _ = mtime  # part of cache key so updated files reload automatically
    points, _summary = load_track_points(track_csv)
    return points


def main() -> None:
    st.set_page_config(page_title="Delivery mission", layout="wide")
    st.title("Delivery mission: replay a recorded walk")

    with st.sidebar:
        st.subheader("Waypoints")
        start_lat = st.number_input("Pickup latitude", value=DEFAULT_START.latitude, format="%.7f")
        start_lon = st.number_input("Pickup longitude", value=DEFAULT_START.longitude, format="%.7f")
        dest_lat = st.number_input("Destination latitude", value=DEFAULT_DESTINATION.latitude, format="%.7f")
        dest_lon = st.number_input("Destination longitude", value=DEFAULT_DESTINATION.longitude, format="%.7f")
        radius_m = st.number_input("Arrival radius (m)", value=DEFAULT_ARRIVAL_RADIUS_M, step=1.0)

        st.subheader("Location source")
        track_csv = st.text_input("Track CSV path", value="sample_data/track.csv")
        warmup_polls = st.number_input("Sensor warm-up ticks", value=3, min_value=0, step=1)

        if st.button("Load / reset mission", type="primary"):
            p = Path(track_csv)
            if not p.exists():
                st.error(f"File not found: {track_csv!r}")
            else:
                try:
                    config = mission_config_from_args(start_lat, start_lon, dest_lat, dest_lon, radius_m)
                except ConfigError as exc:
                    st.error(str(exc))
                else:
                    try:
                        points = _load_points(track_csv, p.stat().st_mtime)
                    except (OSError, KeyError) as exc:
                        st.error(f"Cannot load {track_csv!r}: {exc}")
                        return
                    provider = ReplayLocationProvider(points, warmup_polls=int(warmup_polls))
                    st.session_state["host"] = MissionHost(MissionStateMachine(config), provider)
                    st.success(f"Loaded {len(points)} samples")

    host: MissionHost | None = st.session_state.get("host")
    if host is None:
        st.info("Set the waypoints and a track CSV in the sidebar, then press 'Load / reset mission'.")
        return

    c1, c2 = st.columns(2)
    if c1.button("Next tick"):
        _tick(host)
    if c2.button("Run until done"):
        provider = host.provider
        while not host.machine.state.is_terminal and host.machine.state is not MissionState.IDLE:
            at_end = (
                isinstance(provider, ReplayLocationProvider)
                and provider.exhausted
                and host.machine.state is not MissionState.AWAITING_SENSOR
            )
            _tick(host)
            if at_end:
                break

    snapshot = host.machine.current_snapshot()
    view = build_view(snapshot, awaiting_text=host.status_message())

    if snapshot.state is MissionState.SENSOR_FAILED:
        st.error(view.status_text)
    elif snapshot.state is MissionState.COMPLETED:
        st.success(view.status_text)
    else:
        st.info(view.status_text)

    if view.show_start_button:
        if st.button(START_BUTTON_LABEL, disabled=not view.start_enabled):
            host.request_start()
            st.rerun()

    if view.show_progress:
        st.progress(view.progress_fraction)
        st.caption(view.remaining_text)

    st.subheader("Snapshot")
    m1, m2, m3 = st.columns(3)
    m1.metric("State", snapshot.state.name)
    m2.metric("Distance to target", format_distance_m(snapshot.distance_to_target_m))
    m3.metric("Progress", f"{snapshot.progress_percent:.0f}%")

    initial = host.machine.initial_delivery_distance_m
    if initial is not None:
        st.caption(f"Initial delivery distance: {format_distance_m(initial)}")


if __name__ == "__main__":
    main()
