from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, List, Optional, Set

from dispatch import ArrivedAtFloor, CarRequestMade, Direction, Event, FloorPassed, HallCallMade, Idle

from .passenger import Passenger

if TYPE_CHECKING:  # pragma: no cover - import cycle safe typing
    from .floor import Floor
    from .simulation import MetricsTracker


@dataclass
class Elevator:
    """A car that moves one floor per tick toward a single destination.

    The car only executes commands and reports what happens to it; every
    routing decision comes from the dispatcher.
    """

    elevator_id: int
    capacity: int = 8
    door_dwell_ticks: int = 1
    floor: int = 0
    destination: Optional[int] = None
    pressed_floors: Set[int] = field(default_factory=set)
    passengers: List[Passenger] = field(default_factory=list)
    going_up_indicator: bool = True
    going_down_indicator: bool = False
    door_state: str = "closed"
    _door_timer: int = 0
    _idle_reported: bool = False

    def go_to_floor(self, floor: int) -> None:
        self.destination = floor
        self._idle_reported = False

    def set_indicators(self, up: bool, down: bool) -> None:
        self.going_up_indicator = up
        self.going_down_indicator = down

    def press_button(self, floor: int) -> bool:
        """Light a car button; True only when it was dark before."""
        if floor in self.pressed_floors:
            return False
        self.pressed_floors.add(floor)
        return True

    def lit_directions(self) -> List[Direction]:
        directions = []
        if self.going_up_indicator:
            directions.append(Direction.UP)
        if self.going_down_indicator:
            directions.append(Direction.DOWN)
        return directions

    def step(self) -> List[Event]:
        if self.door_state == "open":
            self._door_timer -= 1
            if self._door_timer <= 0:
                self.door_state = "closed"
            return []

        if self.destination is None:
            if self._idle_reported:
                return []
            self._idle_reported = True
            return [Idle(self.elevator_id)]

        if self.floor != self.destination:
            self.floor += 1 if self.destination > self.floor else -1
            if self.floor != self.destination:
                return [FloorPassed(self.elevator_id, self.floor)]
        return [self._arrive()]

    def _arrive(self) -> ArrivedAtFloor:
        self.destination = None
        self.pressed_floors.discard(self.floor)
        self.door_state = "open"
        self._door_timer = self.door_dwell_ticks
        return ArrivedAtFloor(self.elevator_id, self.floor)

    def handle_stop(self, floor: "Floor", current_time: int, metrics: "MetricsTracker") -> List[Event]:
        """Exchange passengers at ``floor`` and report the buttons they press."""
        events: List[Event] = []

        # Alight
        remaining: List[Passenger] = []
        for passenger in self.passengers:
            if passenger.destination == floor.number:
                passenger.alight_time = current_time
                metrics.record_ride_time(passenger)
            else:
                remaining.append(passenger)
        self.passengers = remaining

        # Board in the direction the car advertises
        for direction in self.lit_directions():
            floor.reset(direction)
            boarded = floor.board_passengers(direction, self.capacity - len(self.passengers))
            for passenger in boarded:
                passenger.board_time = current_time
                metrics.record_wait_time(passenger)
                self.passengers.append(passenger)
                if self.press_button(passenger.destination):
                    events.append(CarRequestMade(self.elevator_id, passenger.destination))

        # Whoever is left behind calls again
        for direction in (Direction.UP, Direction.DOWN):
            if floor.has_waiting(direction):
                floor.press(direction)
                events.append(HallCallMade(floor.number, direction))
        return events
