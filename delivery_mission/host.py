"""Host polling loop: glue between a location provider and the state machine."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

from delivery_mission.errors import InvalidTransition
from delivery_mission.location import (
    LocationProvider,
    LocationStatus,
    LocationUnavailable,
    ReplayLocationProvider,
)
from delivery_mission.mission import MissionStateMachine
from delivery_mission.models import MissionConfig, MissionSnapshot, MissionState, TrackPoint

logger = logging.getLogger(__name__)


class MissionHost:
    """Drives one MissionStateMachine from one LocationProvider, one poll() per tick.

    Provider failure is permanent: before the sensor is ready it fails the mission,
    afterwards the host simply stops feeding samples.
    """

    def __init__(self, machine: MissionStateMachine, provider: LocationProvider) -> None:
        self.machine = machine
        self.provider = provider
        self._last_status: LocationStatus | None = None
        self._provider_lost = False

    @property
    def provider_lost(self) -> bool:
        return self._provider_lost

    def poll(self) -> MissionSnapshot:
        """Run one tick and return the latest snapshot."""

        state = self.machine.state
        if state is MissionState.AWAITING_SENSOR:
            status = self.provider.status()
            self._last_status = status
            if status is LocationStatus.RUNNING:
                self.machine.notify_sensor_ready()
            elif status is LocationStatus.FAILED:
                reason = getattr(self.provider, "failure_reason", "") or "location service failed"
                self.machine.notify_sensor_failed(reason)
            return self.machine.current_snapshot()

        if state.is_terminal or self._provider_lost:
            return self.machine.current_snapshot()

        status = self.provider.status()
        self._last_status = status
        if status is LocationStatus.FAILED:
            logger.error("location provider failed during %s; no further samples", state.name)
            self._provider_lost = True
            return self.machine.current_snapshot()
        if state is MissionState.IDLE or status is not LocationStatus.RUNNING:
            return self.machine.current_snapshot()

        try:
            position = self.provider.current_position()
        except LocationUnavailable as exc:
            logger.warning("skipping tick in %s: %s", state.name, exc)
            return self.machine.current_snapshot()
        return self.machine.advance(position)

    def request_start(self) -> bool:
        """Issue the start command on behalf of the user.

        Returns:
            True if the mission started. Rejections are logged, not raised.
        """

        if self._provider_lost:
            logger.warning("start request ignored: location provider failed")
            return False
        try:
            self.machine.start_mission()
        except InvalidTransition as exc:
            logger.warning("start request ignored: %s", exc)
            return False
        return True

    def status_message(self) -> str:
        """Status line to display, including the provider state while waiting."""

        if self.machine.state is MissionState.AWAITING_SENSOR:
            if self._last_status is None:
                return self.machine.current_snapshot().message
            return f"Fetching location... ({self._last_status.name})"
        return self.machine.current_snapshot().message


@dataclass(frozen=True, slots=True)
class TickRecord:
    """One replay tick: the sample seen (if any) and the resulting snapshot."""

    tick: int
    point: TrackPoint | None
    snapshot: MissionSnapshot


def replay_mission(
    config: MissionConfig,
    points: Sequence[TrackPoint],
    warmup_polls: int = 0,
    auto_start: bool = True,
) -> list[TickRecord]:
    """Replay a recorded track through a fresh mission.

    Args:
        config: Mission definition.
        points: Recorded samples, in time order.
        warmup_polls: Number of polls the replayed sensor spends initializing.
        auto_start: Press start as soon as the mission becomes IDLE.

    Returns:
        One TickRecord per tick, ending at the first terminal state or when the
        track runs out.

    Raises:
        ConfigError: If the config is invalid.
    """

    machine = MissionStateMachine(config)
    provider = ReplayLocationProvider(points, warmup_polls=warmup_polls)
    host = MissionHost(machine, provider)

    records: list[TickRecord] = []
    tick = 0
    while True:
        snapshot = host.poll()
        if machine.state is MissionState.IDLE:
            if not auto_start:
                records.append(TickRecord(tick, None, snapshot))
                break
            host.request_start()
            snapshot = host.poll()

        point = provider.current_point() if points and machine.state is not MissionState.AWAITING_SENSOR else None
        records.append(TickRecord(tick, point, snapshot))
        tick += 1

        if machine.state.is_terminal:
            break
        if machine.state is MissionState.AWAITING_SENSOR:
            continue
        if not provider.tick():
            break
    return records
