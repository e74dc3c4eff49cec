from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable, Iterable, List, Optional

from dispatch import (
    ArrivedAtFloor,
    CarRequestMade,
    Command,
    Direction,
    DispatchConfig,
    Dispatcher,
    Event,
    HallCallMade,
    MoveTo,
    SetIndicators,
    build_dispatcher,
    get_picker,
)

from .config import ElevatorConstraints
from .elevator import Elevator
from .floor import Floor
from .passenger import Passenger

if TYPE_CHECKING:  # pragma: no cover - import cycle safe typing
    from .simulation import MetricsTracker

DispatchListener = Callable[[Event, List[Command]], None]


@dataclass
class Building:
    """Floors and cars wired to a dispatcher.

    The building is the dispatcher's host: it answers its queries, feeds it
    events one at a time and executes the commands it returns.
    """

    num_floors: int
    elevators: List[Elevator] = field(default_factory=list)
    elevator_constraints: ElevatorConstraints = field(default_factory=ElevatorConstraints)
    dispatch_config: DispatchConfig = field(default_factory=DispatchConfig)
    dispatcher: Dispatcher = field(init=False)
    floors: List[Floor] = field(init=False)
    listeners: List[DispatchListener] = field(init=False, default_factory=list)

    def __post_init__(self) -> None:
        if self.num_floors <= 0:
            raise ValueError("num_floors must be positive")
        for index, elevator in enumerate(self.elevators):
            if elevator.elevator_id != index:
                raise ValueError(f"elevator at position {index} has id {elevator.elevator_id}")
        self.floors = [Floor(i) for i in range(self.num_floors)]
        self._apply_constraints()
        self.dispatcher = build_dispatcher(
            self, self.num_floors, len(self.elevators), self.dispatch_config
        )
        self.execute(self.dispatcher.startup())

    # ElevatorHost queries

    def current_floor(self, elevator_id: int) -> int:
        return self.elevators[elevator_id].floor

    def pending_car_requests(self, elevator_id: int) -> Iterable[int]:
        return set(self.elevators[elevator_id].pressed_floors)

    # Event delivery

    def on_dispatch(self, listener: DispatchListener) -> None:
        self.listeners.append(listener)

    def deliver(self, event: Event) -> List[Command]:
        commands = self.dispatcher.handle(event)
        self.execute(commands)
        for listener in self.listeners:
            listener(event, commands)
        return commands

    def execute(self, commands: Iterable[Command]) -> None:
        for command in commands:
            elevator = self.elevators[command.elevator_id]
            if isinstance(command, MoveTo):
                elevator.go_to_floor(command.floor)
            elif isinstance(command, SetIndicators):
                elevator.set_indicators(command.up, command.down)

    def step(self, current_time: int, metrics: "MetricsTracker") -> None:
        for elevator in self.elevators:
            for event in elevator.step():
                self.deliver(event)
                if isinstance(event, ArrivedAtFloor):
                    floor = self.floors[event.floor]
                    for follow_up in elevator.handle_stop(floor, current_time, metrics):
                        self.deliver(follow_up)

    # Button presses

    def press_hall_call(self, floor_number: int, direction: Direction) -> bool:
        floor = self._require_floor(floor_number)
        if direction is Direction.ANY:
            raise ValueError("hall calls are either up or down")
        if not floor.press(direction):
            return False
        self.deliver(HallCallMade(floor_number, direction))
        return True

    def press_car_button(self, elevator_id: int, floor_number: int) -> bool:
        self._require_floor(floor_number)
        elevator = self.get_elevator(elevator_id)
        if elevator is None:
            raise LookupError(f"Unknown elevator {elevator_id}")
        if not elevator.press_button(floor_number):
            return False
        self.deliver(CarRequestMade(elevator_id, floor_number))
        return True

    def add_passenger(self, passenger: Passenger) -> None:
        self._require_floor(passenger.origin)
        self._require_floor(passenger.destination)
        self.floors[passenger.origin].add_passenger(passenger)
        self.press_hall_call(passenger.origin, passenger.direction)

    def set_picker(self, name: str, **options) -> None:
        self.dispatch_config.picker = name
        self.dispatch_config.picker_options = options
        self.dispatcher.set_picker(get_picker(name, self.dispatcher.state, **options))

    @property
    def picker_name(self) -> str:
        return self.dispatch_config.picker

    def waiting_count(self) -> int:
        return sum(len(floor) for floor in self.floors)

    def riding_count(self) -> int:
        return sum(len(elevator.passengers) for elevator in self.elevators)

    def snapshot(self) -> dict:
        return {
            "floors": [
                {
                    "waiting_up": len(floor.up_queue),
                    "waiting_down": len(floor.down_queue),
                    "up_lit": floor.up_lit,
                    "down_lit": floor.down_lit,
                }
                for floor in self.floors
            ],
            "elevators": [
                {
                    "id": elevator.elevator_id,
                    "floor": elevator.floor,
                    "destination": elevator.destination,
                    "pressed_floors": sorted(elevator.pressed_floors),
                    "indicators": {
                        "up": elevator.going_up_indicator,
                        "down": elevator.going_down_indicator,
                    },
                    "door_state": elevator.door_state,
                    "passenger_count": len(elevator.passengers),
                }
                for elevator in self.elevators
            ],
            "dispatch": self.dispatcher.snapshot().as_dict(),
        }

    def get_elevator(self, elevator_id: int) -> Optional[Elevator]:
        if 0 <= elevator_id < len(self.elevators):
            return self.elevators[elevator_id]
        return None

    def _require_floor(self, floor_number: int) -> Floor:
        if not 0 <= floor_number < self.num_floors:
            raise ValueError(f"Floor {floor_number} is outside 0..{self.num_floors - 1}")
        return self.floors[floor_number]

    def _apply_constraints(self) -> None:
        for elevator in self.elevators:
            elevator.capacity = self.elevator_constraints.capacity
            elevator.door_dwell_ticks = self.elevator_constraints.door_dwell_ticks
