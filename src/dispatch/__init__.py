from __future__ import annotations

from .config import DispatchConfig
from .dispatcher import Dispatcher
from .errors import ClaimConflictError, DispatchError, InvariantViolation
from .events import (
    ArrivedAtFloor,
    CarRequestMade,
    Command,
    Event,
    FloorPassed,
    HallCallMade,
    Idle,
    MoveTo,
    SetIndicators,
)
from .interface import Direction, ElevatorHost, Picker, Stop
from .picker import PICKER_REGISTRY, AheadPicker, RandomPicker, get_picker
from .rescheduler import CommitOk, Rescheduler
from .state import CallRegistry, ElevatorState, FloorCall, SchedulerState, StateSnapshot
from .stops import StopFinder

__all__ = [
    "AheadPicker",
    "PICKER_REGISTRY",
    "ArrivedAtFloor",
    "CallRegistry",
    "CarRequestMade",
    "ClaimConflictError",
    "Command",
    "CommitOk",
    "Direction",
    "DispatchConfig",
    "DispatchError",
    "Dispatcher",
    "ElevatorHost",
    "ElevatorState",
    "Event",
    "FloorCall",
    "FloorPassed",
    "HallCallMade",
    "Idle",
    "InvariantViolation",
    "MoveTo",
    "Picker",
    "RandomPicker",
    "Rescheduler",
    "SchedulerState",
    "SetIndicators",
    "StateSnapshot",
    "Stop",
    "StopFinder",
    "build_dispatcher",
    "get_picker",
]


def build_dispatcher(
    host: ElevatorHost, num_floors: int, elevator_count: int, config: DispatchConfig
) -> Dispatcher:
    return Dispatcher.from_config(host, num_floors, elevator_count, config)
