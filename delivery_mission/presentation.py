"""Map mission snapshots to what the screen should show.

Pure functions only: no mission decisions are made here.
"""

from __future__ import annotations

from dataclasses import dataclass

from delivery_mission.models import MissionSnapshot, MissionState

START_BUTTON_LABEL = "Start delivery mission"


@dataclass(frozen=True, slots=True)
class DisplayView:
    """Widget state for one rendered frame."""

    status_text: str
    show_start_button: bool
    start_enabled: bool
    show_progress: bool
    progress_fraction: float
    remaining_text: str


def format_distance_m(meters: float) -> str:
    return f"{meters:.2f}m"


def format_distance_km(meters: float) -> str:
    return f"{meters / 1000.0:.2f}km"


def build_view(snapshot: MissionSnapshot, awaiting_text: str | None = None) -> DisplayView:
    """Build the display state for a snapshot.

    Args:
        snapshot: Latest mission snapshot.
        awaiting_text: Status line to show while the sensor initializes (the host
            knows the provider status, the snapshot does not).
    """

    state = snapshot.state
    status_text = snapshot.message
    if state is MissionState.AWAITING_SENSOR and awaiting_text:
        status_text = awaiting_text

    in_delivery = state is MissionState.IN_DELIVERY
    return DisplayView(
        status_text=status_text,
        show_start_button=state is MissionState.IDLE,
        start_enabled=state is MissionState.IDLE,
        show_progress=in_delivery,
        progress_fraction=snapshot.progress_fraction if in_delivery else 0.0,
        remaining_text=f"Remaining distance: {format_distance_km(snapshot.distance_to_target_m)}" if in_delivery else "",
    )
