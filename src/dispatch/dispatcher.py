from __future__ import annotations

import logging
from typing import Callable, Dict, Iterable, List, Optional

from .config import DispatchConfig
from .events import (
    ArrivedAtFloor,
    CarRequestMade,
    Command,
    Event,
    FloorPassed,
    HallCallMade,
    Idle,
    SetIndicators,
)
from .interface import Direction, ElevatorHost, Picker
from .picker import AheadPicker, get_picker
from .rescheduler import Rescheduler
from .state import SchedulerState, StateSnapshot
from .stops import StopFinder

logger = logging.getLogger(__name__)


class Dispatcher:
    """Event-handling layer of the dispatch core.

    Events are handled one at a time and run to completion; every handler
    returns the commands the host must execute, in order.
    """

    def __init__(
        self,
        host: ElevatorHost,
        num_floors: int,
        elevator_count: int,
        picker: Optional[Picker] = None,
        strict_claims: bool = True,
    ) -> None:
        if elevator_count <= 0:
            raise ValueError("elevator_count must be positive")
        self.host = host
        self.state = SchedulerState(
            num_floors, [host.current_floor(i) for i in range(elevator_count)]
        )
        self.finder = StopFinder(self.state, host)
        self.rescheduler = Rescheduler(self.state, self.finder, strict_claims=strict_claims)
        self.picker: Picker = picker or AheadPicker(self.state)
        self._handlers: Dict[type, Callable[..., List[Command]]] = {
            CarRequestMade: self._on_car_request,
            FloorPassed: self._on_floor_passed,
            ArrivedAtFloor: self._on_arrival,
            Idle: self._on_idle,
            HallCallMade: self._on_hall_call,
        }

    @classmethod
    def from_config(
        cls, host: ElevatorHost, num_floors: int, elevator_count: int, config: DispatchConfig
    ) -> "Dispatcher":
        config.validate()
        options = dict(config.picker_options)
        if config.seed is not None:
            options.setdefault("seed", config.seed)
        dispatcher = cls(host, num_floors, elevator_count, strict_claims=config.strict_claims)
        dispatcher.set_picker(get_picker(config.picker, dispatcher.state, **options))
        return dispatcher

    def set_picker(self, picker: Picker) -> None:
        self.picker = picker

    def startup(self) -> List[Command]:
        return [SetIndicators(e.elevator_id, up=True, down=False) for e in self.state.elevators]

    def handle(self, event: Event) -> List[Command]:
        handler = self._handlers.get(type(event))
        if handler is None:
            raise TypeError(f"Unsupported event {event!r}")
        return handler(event)

    def handle_all(self, events: Iterable[Event]) -> List[Command]:
        commands: List[Command] = []
        for event in events:
            commands.extend(self.handle(event))
        return commands

    def reschedule(self, elevator_id: int) -> List[Command]:
        return self.rescheduler.reschedule(elevator_id)

    def snapshot(self) -> StateSnapshot:
        return self.state.snapshot()

    def _on_car_request(self, event: CarRequestMade) -> List[Command]:
        logger.debug("elev %d: button pressed for floor %d", event.elevator_id, event.floor)
        return self.reschedule(event.elevator_id)

    def _on_floor_passed(self, event: FloorPassed) -> List[Command]:
        self.state.elevator(event.elevator_id).last_floor = event.floor
        return []

    def _on_arrival(self, event: ArrivedAtFloor) -> List[Command]:
        elevator = self.state.elevator(event.elevator_id)
        elevator.last_floor = event.floor
        logger.debug("elev %d stopped at floor %d", event.elevator_id, event.floor)

        commands: List[Command] = []
        if elevator.next_direction is not None and elevator.next_direction is not elevator.direction:
            elevator.direction = elevator.next_direction
            commands.append(
                SetIndicators(
                    event.elevator_id,
                    up=elevator.direction is Direction.UP,
                    down=elevator.direction is Direction.DOWN,
                )
            )
        elevator.next_direction = None

        if self.state.calls.clear_served(event.floor, elevator.direction, event.elevator_id):
            logger.debug(
                "elev %d served %s call at floor %d",
                event.elevator_id,
                elevator.direction.value,
                event.floor,
            )

        commands.extend(self.reschedule(event.elevator_id))
        return commands

    def _on_idle(self, event: Idle) -> List[Command]:
        return self.reschedule(event.elevator_id)

    def _on_hall_call(self, event: HallCallMade) -> List[Command]:
        self.state.calls.press(event.floor, event.direction)
        logger.info("%s requested at floor %d", event.direction.value, event.floor)
        elevator_id = self.picker.pick(event.floor, event.direction)
        return self.reschedule(elevator_id)
