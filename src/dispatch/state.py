from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Dict, Iterator, List, Optional, Sequence

from .errors import InvariantViolation
from .interface import Direction, Stop


@dataclass
class FloorCall:
    """Hall-call state of one floor: pressed flags and the elevator holding each claim."""

    up_pressed: bool = False
    down_pressed: bool = False
    up_claimed_by: Optional[int] = None
    down_claimed_by: Optional[int] = None

    def pressed(self, direction: Direction) -> bool:
        return self.up_pressed if direction is Direction.UP else self.down_pressed

    def claimed_by(self, direction: Direction) -> Optional[int]:
        return self.up_claimed_by if direction is Direction.UP else self.down_claimed_by

    def available_to(self, direction: Direction, elevator_id: int) -> bool:
        """Pressed and either unclaimed or already claimed by ``elevator_id``."""
        holder = self.claimed_by(direction)
        return self.pressed(direction) and (holder is None or holder == elevator_id)

    def _set(self, direction: Direction, pressed: bool, holder: Optional[int]) -> None:
        if direction is Direction.UP:
            self.up_pressed = pressed
            self.up_claimed_by = holder
        else:
            self.down_pressed = pressed
            self.down_claimed_by = holder


class CallRegistry:
    """Per-floor hall calls and their exclusive claims."""

    def __init__(self, num_floors: int) -> None:
        self.floors: List[FloorCall] = [FloorCall() for _ in range(num_floors)]

    def __len__(self) -> int:
        return len(self.floors)

    def __getitem__(self, floor: int) -> FloorCall:
        return self.floors[floor]

    def __iter__(self) -> Iterator[FloorCall]:
        return iter(self.floors)

    def press(self, floor: int, direction: Direction) -> None:
        call = self.floors[floor]
        call._set(direction, True, call.claimed_by(direction))

    def claim(self, floor: int, direction: Direction, elevator_id: int) -> Optional[InvariantViolation]:
        """Reserve ``(floor, direction)`` for an elevator.

        Returns the violation instead of mutating anything when another
        elevator already holds the claim. Claiming a call nobody pressed is a
        no-op so a claim can never exist without its pressed flag.
        """
        call = self.floors[floor]
        holder = call.claimed_by(direction)
        if holder is not None and holder != elevator_id:
            return InvariantViolation(
                elevator_id=elevator_id, floor=floor, direction=direction, holder=holder
            )
        if call.pressed(direction):
            call._set(direction, True, elevator_id)
        return None

    def clear_served(self, floor: int, direction: Direction, elevator_id: int) -> bool:
        """Clear a pressed call claimed by ``elevator_id``; True when something was cleared."""
        call = self.floors[floor]
        if not call.pressed(direction) or call.claimed_by(direction) != elevator_id:
            return False
        call._set(direction, False, None)
        return True


@dataclass
class ElevatorState:
    elevator_id: int
    last_floor: int = 0
    direction: Direction = Direction.UP
    next_direction: Optional[Direction] = None
    next_stop: Optional[Stop] = None


@dataclass(frozen=True)
class ElevatorSnapshot:
    elevator_id: int
    last_floor: int
    direction: str
    next_direction: Optional[str]
    next_stop: Optional[Dict[str, object]]


@dataclass(frozen=True)
class FloorCallSnapshot:
    floor: int
    up_pressed: bool
    down_pressed: bool
    up_claimed_by: Optional[int]
    down_claimed_by: Optional[int]


@dataclass(frozen=True)
class StateSnapshot:
    elevators: List[ElevatorSnapshot] = field(default_factory=list)
    floors: List[FloorCallSnapshot] = field(default_factory=list)

    def as_dict(self) -> dict:
        return asdict(self)


class SchedulerState:
    """All mutable dispatch state, shared by every component of one dispatcher."""

    def __init__(self, num_floors: int, initial_floors: Sequence[int]) -> None:
        if num_floors <= 0:
            raise ValueError("num_floors must be positive")
        if not initial_floors:
            raise ValueError("at least one elevator is required")
        self.calls = CallRegistry(num_floors)
        self.elevators: List[ElevatorState] = [
            ElevatorState(elevator_id=i, last_floor=floor) for i, floor in enumerate(initial_floors)
        ]

    @property
    def num_floors(self) -> int:
        return len(self.calls)

    @property
    def elevator_count(self) -> int:
        return len(self.elevators)

    def elevator(self, elevator_id: int) -> ElevatorState:
        return self.elevators[elevator_id]

    def claim_holders(self) -> Dict[tuple, int]:
        """Map ``(floor, direction)`` to the elevator holding that claim."""
        holders: Dict[tuple, int] = {}
        for floor, call in enumerate(self.calls):
            for direction in (Direction.UP, Direction.DOWN):
                holder = call.claimed_by(direction)
                if holder is not None:
                    holders[(floor, direction)] = holder
        return holders

    def snapshot(self) -> StateSnapshot:
        return StateSnapshot(
            elevators=[
                ElevatorSnapshot(
                    elevator_id=e.elevator_id,
                    last_floor=e.last_floor,
                    direction=e.direction.value,
                    next_direction=e.next_direction.value if e.next_direction else None,
                    next_stop=(
                        {"floor": e.next_stop.floor, "direction": e.next_stop.direction.value}
                        if e.next_stop
                        else None
                    ),
                )
                for e in self.elevators
            ],
            floors=[
                FloorCallSnapshot(
                    floor=i,
                    up_pressed=c.up_pressed,
                    down_pressed=c.down_pressed,
                    up_claimed_by=c.up_claimed_by,
                    down_claimed_by=c.down_claimed_by,
                )
                for i, c in enumerate(self.calls)
            ],
        )
