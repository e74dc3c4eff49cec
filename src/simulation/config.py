from __future__ import annotations

from dataclasses import dataclass


@dataclass
class ElevatorConstraints:
    """Physical limits the host applies to every car; the dispatch core never sees them."""

    capacity: int = 8
    door_dwell_ticks: int = 1

    def __post_init__(self) -> None:
        if self.capacity <= 0:
            raise ValueError("capacity must be positive")
        if self.door_dwell_ticks < 0:
            raise ValueError("door_dwell_ticks cannot be negative")
