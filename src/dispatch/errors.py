from __future__ import annotations

from dataclasses import dataclass

from .interface import Direction


class DispatchError(Exception):
    """Base class for errors raised by the dispatch core."""


@dataclass(frozen=True)
class InvariantViolation:
    """A claim commit that would take a call already held by another elevator."""

    elevator_id: int
    floor: int
    direction: Direction
    holder: int

    def describe(self) -> str:
        return (
            f"elevator {self.elevator_id} tried to claim floor {self.floor} "
            f"({self.direction.value}) already claimed by elevator {self.holder}"
        )


class ClaimConflictError(DispatchError):
    """Raised in strict mode when two elevators would own the same call."""

    def __init__(self, violation: InvariantViolation) -> None:
        super().__init__(violation.describe())
        self.violation = violation
