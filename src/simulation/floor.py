from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Deque, List

from dispatch import Direction

from .passenger import Passenger


@dataclass
class Floor:
    """A landing with directional queues and the two hall buttons."""

    number: int
    up_queue: Deque[Passenger] = field(default_factory=deque)
    down_queue: Deque[Passenger] = field(default_factory=deque)
    up_lit: bool = False
    down_lit: bool = False

    def queue(self, direction: Direction) -> Deque[Passenger]:
        return self.up_queue if direction is Direction.UP else self.down_queue

    def add_passenger(self, passenger: Passenger) -> None:
        self.queue(passenger.direction).append(passenger)

    def has_waiting(self, direction: Direction) -> bool:
        return bool(self.queue(direction))

    def press(self, direction: Direction) -> bool:
        """Light the hall button; True only when it was dark before."""
        if direction is Direction.UP:
            newly_lit, self.up_lit = not self.up_lit, True
        else:
            newly_lit, self.down_lit = not self.down_lit, True
        return newly_lit

    def reset(self, direction: Direction) -> None:
        if direction is Direction.UP:
            self.up_lit = False
        else:
            self.down_lit = False

    def board_passengers(self, direction: Direction, capacity: int) -> List[Passenger]:
        queue = self.queue(direction)
        boarded: List[Passenger] = []
        while queue and len(boarded) < capacity:
            boarded.append(queue.popleft())
        return boarded

    def __len__(self) -> int:  # pragma: no cover - convenience
        return len(self.up_queue) + len(self.down_queue)
