"""Exception types raised by mission setup and commands."""

from __future__ import annotations

from delivery_mission.models import MissionState


class MissionError(Exception):
    """Base class for mission errors."""


class ConfigError(MissionError, ValueError):
    """Mission configuration is invalid. The mission must not be started."""


class InvalidTransition(MissionError):
    """A command was issued from a state that does not allow it.

    Recoverable: the state machine is left untouched, callers may log and ignore it
    (e.g. a double-clicked start button).
    """

    def __init__(self, command: str, current: MissionState) -> None:
        super().__init__(f"{command} is not allowed in state {current.name}")
        self.command = command
        self.current = current
