from __future__ import annotations

import random
from typing import Dict, Optional, Type

from .interface import Direction, Picker
from .state import SchedulerState


class RandomPicker:
    """Hands every new hall call to a uniformly random elevator."""

    def __init__(
        self,
        state: SchedulerState,
        rng: Optional[random.Random] = None,
        seed: Optional[int] = None,
    ) -> None:
        self.state = state
        self.rng = rng or random.Random(seed)

    def pick(self, floor: int, direction: Direction) -> int:
        return self.rng.randrange(self.state.elevator_count)


class AheadPicker(RandomPicker):
    """Prefers the first elevator already heading toward the call in its direction.

    This only decides which elevator is nudged to reschedule first. Any
    elevator scanning past the call will still pick it up, so a poor choice
    costs time, not service.
    """

    def pick(self, floor: int, direction: Direction) -> int:
        for elevator in self.state.elevators:
            if elevator.direction is not direction:
                continue
            if direction is Direction.UP and elevator.last_floor < floor:
                return elevator.elevator_id
            if direction is Direction.DOWN and elevator.last_floor > floor:
                return elevator.elevator_id
        return super().pick(floor, direction)


PICKER_REGISTRY: Dict[str, Type[RandomPicker]] = {
    "ahead": AheadPicker,
    "random": RandomPicker,
}


def get_picker(name: str, state: SchedulerState, **kwargs) -> Picker:
    cls = PICKER_REGISTRY.get(name.lower())
    if cls is None:
        raise ValueError(f"Unknown picker '{name}'. Available: {', '.join(PICKER_REGISTRY)}")
    return cls(state, **kwargs)
