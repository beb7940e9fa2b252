"""Mission progress state machine.

The machine consumes position samples and explicit commands and derives the mission
state from them:

    AWAITING_SENSOR -> IDLE -> EN_ROUTE_TO_START -> IN_DELIVERY -> COMPLETED
    AWAITING_SENSOR -> SENSOR_FAILED

It is driven by a single host loop and holds no locks. Commands issued from the wrong
state raise InvalidTransition and leave the machine untouched; advance() never raises.
"""

from __future__ import annotations

import logging
import math

from delivery_mission.config import validate_config
from delivery_mission.errors import InvalidTransition
from delivery_mission.geo import distance_m
from delivery_mission.models import (
    MIN_DELIVERY_DISTANCE_M,
    Coordinate,
    MissionConfig,
    MissionSnapshot,
    MissionState,
)

logger = logging.getLogger(__name__)

AWAITING_SENSOR_MESSAGE = "Initializing location service..."
IDLE_MESSAGE = "Location ready! Press 'Start delivery mission' to begin."
COMPLETED_MESSAGE = "You have arrived at the destination!"


def clamp01(value: float) -> float:
    return min(1.0, max(0.0, value))


def delivery_progress(initial_m: float, remaining_m: float) -> float:
    """Fraction of the delivery leg covered.

    Moving farther away than the initial leg distance reports 0, never negative.
    """

    if initial_m <= 0 or remaining_m > initial_m:
        return 0.0
    return clamp01((initial_m - remaining_m) / initial_m)


class MissionStateMachine:
    """Single source of truth for one delivery mission.

    Typical use from a host loop::

        machine = MissionStateMachine(config)
        machine.notify_sensor_ready()
        machine.start_mission()
        snapshot = machine.advance(Coordinate(lat, lon))
    """

    def __init__(self, config: MissionConfig | None = None) -> None:
        self._config: MissionConfig | None = None
        self._state = MissionState.AWAITING_SENSOR
        self._initial_delivery_distance_m: float | None = None
        self._snapshot = MissionSnapshot(MissionState.AWAITING_SENSOR, 0.0, 0.0, AWAITING_SENSOR_MESSAGE)
        if config is not None:
            self.initialize(config)

    # --- read-only accessors ---

    @property
    def state(self) -> MissionState:
        return self._state

    @property
    def config(self) -> MissionConfig | None:
        return self._config

    @property
    def initial_delivery_distance_m(self) -> float | None:
        """Start -> destination distance, fixed when the delivery leg begins."""

        return self._initial_delivery_distance_m

    def current_snapshot(self) -> MissionSnapshot:
        return self._snapshot

    # --- commands ---

    def initialize(self, config: MissionConfig) -> None:
        """Install the mission config and reset to AWAITING_SENSOR.

        Raises:
            ConfigError: If the config is invalid (e.g. non-positive radius).
            InvalidTransition: If the sensor was already resolved; the config is
                fixed from then on.
        """

        if self._state is not MissionState.AWAITING_SENSOR:
            raise InvalidTransition("initialize", self._state)
        self._config = validate_config(config)
        self._state = MissionState.AWAITING_SENSOR
        self._initial_delivery_distance_m = None
        self._snapshot = MissionSnapshot(MissionState.AWAITING_SENSOR, 0.0, 0.0, AWAITING_SENSOR_MESSAGE)
        logger.info(
            "mission initialized: start=%s destination=%s radius=%.1fm",
            config.start,
            config.destination,
            config.arrival_radius_m,
        )

    def notify_sensor_ready(self) -> bool:
        """AWAITING_SENSOR -> IDLE.

        Returns:
            True if the transition happened. Calls from any other state are ignored
            with a warning and return False.
        """

        if self._state is not MissionState.AWAITING_SENSOR:
            logger.warning("sensor ready ignored in state %s", self._state.name)
            return False
        if self._config is None:
            logger.warning("sensor ready ignored: mission not initialized")
            return False
        self._set_state(MissionState.IDLE)
        self._snapshot = MissionSnapshot(MissionState.IDLE, 0.0, 0.0, IDLE_MESSAGE)
        return True

    def notify_sensor_failed(self, reason: str) -> None:
        """AWAITING_SENSOR -> SENSOR_FAILED (terminal).

        Raises:
            InvalidTransition: If the sensor was already resolved.
        """

        if self._state is not MissionState.AWAITING_SENSOR:
            raise InvalidTransition("notify_sensor_failed", self._state)
        self._set_state(MissionState.SENSOR_FAILED)
        self._snapshot = MissionSnapshot(
            MissionState.SENSOR_FAILED,
            0.0,
            0.0,
            f"Location initialization failed: {reason}. "
            "Check the location permission and restart the app.",
        )

    def start_mission(self) -> None:
        """IDLE -> EN_ROUTE_TO_START.

        Raises:
            InvalidTransition: If the mission already started or the sensor is not ready.
        """

        if self._state is not MissionState.IDLE:
            raise InvalidTransition("start_mission", self._state)
        self._set_state(MissionState.EN_ROUTE_TO_START)
        self._snapshot = MissionSnapshot(
            MissionState.EN_ROUTE_TO_START,
            0.0,
            0.0,
            f"Head to the {self._config.start_label}.",
        )

    def advance(self, current: Coordinate) -> MissionSnapshot:
        """Feed one position sample and return the resulting snapshot.

        Only EN_ROUTE_TO_START and IN_DELIVERY consume samples; every other state
        returns the held snapshot unchanged.
        """

        if self._state not in (MissionState.EN_ROUTE_TO_START, MissionState.IN_DELIVERY):
            return self._snapshot
        if not _is_finite(current):
            logger.warning("ignoring non-finite position sample %s", current)
            return self._snapshot

        if self._state is MissionState.EN_ROUTE_TO_START:
            self._advance_to_start(current)
        else:
            self._advance_delivery(current)
        return self._snapshot

    # --- per-state handlers ---

    def _advance_to_start(self, current: Coordinate) -> None:
        cfg = self._config
        d = distance_m(current, cfg.start)
        if d <= cfg.arrival_radius_m:
            self._enter_delivery(current)
            return
        self._snapshot = MissionSnapshot(
            MissionState.EN_ROUTE_TO_START,
            d,
            0.0,
            f"Head to the {cfg.start_label}.\nRemaining distance: {d:.2f}m",
        )

    def _enter_delivery(self, current: Coordinate) -> None:
        cfg = self._config
        self._set_state(MissionState.IN_DELIVERY)
        initial = distance_m(cfg.start, cfg.destination)
        self._initial_delivery_distance_m = initial
        logger.info("initial delivery distance: %.2f meters", initial)

        remaining = distance_m(current, cfg.destination)
        if initial < MIN_DELIVERY_DISTANCE_M:
            logger.warning("start and destination are %.2fm apart, completing immediately", initial)
            self._complete(remaining)
            return
        self._snapshot = MissionSnapshot(
            MissionState.IN_DELIVERY,
            remaining,
            0.0,
            f"Delivery started. Distance is {initial / 1000.0:.2f}km.",
        )

    def _advance_delivery(self, current: Coordinate) -> None:
        cfg = self._config
        remaining = distance_m(current, cfg.destination)
        if remaining <= cfg.arrival_radius_m:
            self._complete(remaining)
            return
        progress = delivery_progress(self._initial_delivery_distance_m, remaining)
        self._snapshot = MissionSnapshot(
            MissionState.IN_DELIVERY,
            remaining,
            progress,
            f"Delivery in progress: {progress * 100:.0f}%",
        )

    def _complete(self, remaining: float) -> None:
        self._set_state(MissionState.COMPLETED)
        self._snapshot = MissionSnapshot(MissionState.COMPLETED, remaining, 1.0, COMPLETED_MESSAGE)

    def _set_state(self, new_state: MissionState) -> None:
        logger.info("mission state %s -> %s", self._state.name, new_state.name)
        self._state = new_state


def _is_finite(c: Coordinate) -> bool:
    return math.isfinite(c.latitude) and math.isfinite(c.longitude)
