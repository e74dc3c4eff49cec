"""Events delivered by the host and commands returned to it."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from .interface import Direction


@dataclass(frozen=True)
class CarRequestMade:
    elevator_id: int
    floor: int


@dataclass(frozen=True)
class FloorPassed:
    elevator_id: int
    floor: int


@dataclass(frozen=True)
class ArrivedAtFloor:
    elevator_id: int
    floor: int


@dataclass(frozen=True)
class Idle:
    elevator_id: int


@dataclass(frozen=True)
class HallCallMade:
    floor: int
    direction: Direction


Event = Union[CarRequestMade, FloorPassed, ArrivedAtFloor, Idle, HallCallMade]


@dataclass(frozen=True)
class MoveTo:
    elevator_id: int
    floor: int
    immediate: bool = True


@dataclass(frozen=True)
class SetIndicators:
    elevator_id: int
    up: bool
    down: bool


Command = Union[MoveTo, SetIndicators]
