from __future__ import annotations

from typing import Optional

from .interface import Direction, ElevatorHost, Stop
from .state import SchedulerState


class StopFinder:
    """Finds the nearest qualifying stop for an elevator in one scan direction.

    Car requests carry no direction: the rider is already aboard, so a car
    request that is strictly closer than the first serviceable hall call wins
    and is tagged ``Direction.ANY``. Hall calls keep the direction they were
    pressed in.
    """

    def __init__(self, state: SchedulerState, host: ElevatorHost) -> None:
        self.state = state
        self.host = host

    def scan_up(self, elevator_id: int, from_floor: int, allow_opposite: bool) -> Optional[Stop]:
        above = [f for f in self.host.pending_car_requests(elevator_id) if f >= from_floor]
        car_floor = min(above) if above else None

        hall: Optional[Stop] = None
        for floor in range(max(from_floor, 0), self.state.num_floors):
            hall = self._hall_stop(elevator_id, floor, Direction.UP, allow_opposite)
            if hall is not None:
                break

        if car_floor is not None and (hall is None or car_floor < hall.floor):
            return Stop(car_floor, Direction.ANY)
        return hall

    def scan_down(self, elevator_id: int, from_floor: int, allow_opposite: bool) -> Optional[Stop]:
        below = [f for f in self.host.pending_car_requests(elevator_id) if f <= from_floor]
        car_floor = max(below) if below else None

        hall: Optional[Stop] = None
        for floor in range(min(from_floor, self.state.num_floors - 1), -1, -1):
            hall = self._hall_stop(elevator_id, floor, Direction.DOWN, allow_opposite)
            if hall is not None:
                break

        if car_floor is not None and (hall is None or car_floor > hall.floor):
            return Stop(car_floor, Direction.ANY)
        return hall

    def _hall_stop(
        self, elevator_id: int, floor: int, direction: Direction, allow_opposite: bool
    ) -> Optional[Stop]:
        call = self.state.calls[floor]
        if call.available_to(direction, elevator_id):
            return Stop(floor, direction)
        if allow_opposite and call.available_to(direction.opposite, elevator_id):
            return Stop(floor, direction.opposite)
        return None
