from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Protocol


class Direction(str, Enum):
    """Travel or call direction. ``ANY`` only ever tags a car-request stop."""

    UP = "up"
    DOWN = "down"
    ANY = "any"

    @property
    def opposite(self) -> "Direction":
        if self is Direction.UP:
            return Direction.DOWN
        if self is Direction.DOWN:
            return Direction.UP
        return Direction.ANY


@dataclass(frozen=True)
class Stop:
    """A committed destination and the call direction it serves."""

    floor: int
    direction: Direction


class ElevatorHost(Protocol):
    """Queries the dispatch core performs on the host that owns the cars."""

    def current_floor(self, elevator_id: int) -> int:
        ...

    def pending_car_requests(self, elevator_id: int) -> Iterable[int]:
        """Floors requested from inside the car that have not been served yet."""
        ...


class Picker(Protocol):
    """Strategy interface for choosing the first responder to a new hall call."""

    def pick(self, floor: int, direction: Direction) -> int:
        ...
