from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from dispatch import Direction


@dataclass
class Passenger:
    """A rider travelling from ``origin`` to ``destination``."""

    passenger_id: int
    origin: int
    destination: int
    arrival_time: int
    board_time: Optional[int] = None
    alight_time: Optional[int] = None

    @property
    def direction(self) -> Direction:
        return Direction.UP if self.destination > self.origin else Direction.DOWN

    @property
    def wait_time(self) -> Optional[int]:
        if self.board_time is None:
            return None
        return self.board_time - self.arrival_time

    @property
    def ride_time(self) -> Optional[int]:
        if self.board_time is None or self.alight_time is None:
            return None
        return self.alight_time - self.board_time

    @property
    def delivered(self) -> bool:
        return self.alight_time is not None
