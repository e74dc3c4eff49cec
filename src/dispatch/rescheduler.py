from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Union

from .errors import ClaimConflictError, InvariantViolation
from .events import Command, MoveTo, SetIndicators
from .interface import Direction, Stop
from .state import ElevatorState, SchedulerState
from .stops import StopFinder

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommitOk:
    elevator_id: int
    stop: Stop
    commands: List[Command] = field(default_factory=list)


CommitResult = Union[CommitOk, InvariantViolation]


class Rescheduler:
    """Chooses and commits the next stop of one elevator.

    The candidate list is a strict priority order, never a scored
    comparison: an elevator travelling up first looks for same-direction
    work above it, then any work above it, then down calls at or below it,
    then anything at or below it. Travelling down is the mirror image.
    """

    def __init__(self, state: SchedulerState, finder: StopFinder, strict_claims: bool = True) -> None:
        self.state = state
        self.finder = finder
        self.strict_claims = strict_claims

    def candidates(self, elevator_id: int) -> List[Stop]:
        elevator = self.state.elevator(elevator_id)
        last = elevator.last_floor
        if elevator.direction is Direction.UP:
            prefs = [
                self.finder.scan_up(elevator_id, last + 1, False),
                self.finder.scan_up(elevator_id, last + 1, True),
                self.finder.scan_down(elevator_id, last, False),
                self.finder.scan_down(elevator_id, last, True),
            ]
        else:
            prefs = [
                self.finder.scan_down(elevator_id, last - 1, False),
                self.finder.scan_down(elevator_id, last - 1, True),
                self.finder.scan_up(elevator_id, last, False),
                self.finder.scan_up(elevator_id, last, True),
            ]
        return [stop for stop in prefs if stop is not None]

    def reschedule(self, elevator_id: int) -> List[Command]:
        elevator = self.state.elevator(elevator_id)
        options = self.candidates(elevator_id)
        logger.debug("%s: options = %s", _status(elevator), options)

        if not options:
            logger.debug("%s: nothing to do (now stopped)", _status(elevator))
            elevator.next_direction = None
            elevator.next_stop = None
            return []

        result = self.commit(elevator_id, options[0])
        if isinstance(result, InvariantViolation):
            if self.strict_claims:
                raise ClaimConflictError(result)
            logger.error("refusing commit: %s", result.describe())
            return []
        return result.commands

    def commit(self, elevator_id: int, stop: Stop) -> CommitResult:
        """Claim the stop's call, update the elevator and build its commands.

        Nothing is mutated when the claim belongs to another elevator.
        """
        elevator = self.state.elevator(elevator_id)
        if stop.direction is not Direction.ANY:
            violation = self.state.calls.claim(stop.floor, stop.direction, elevator_id)
            if violation is not None:
                return violation

        commands: List[Command] = [MoveTo(elevator_id, stop.floor, immediate=True)]
        if stop.floor == elevator.last_floor:
            logger.debug("%s: reopening at floor %d", _status(elevator), stop.floor)
            if stop.direction is not Direction.ANY:
                elevator.next_direction = stop.direction
        else:
            heading = Direction.UP if stop.floor > elevator.last_floor else Direction.DOWN
            logger.debug(
                "%s: moving %s to %d%s",
                _status(elevator),
                heading.value,
                stop.floor,
                " (direction change)" if heading is not elevator.direction else "",
            )
            elevator.next_direction = _staged(stop)
            elevator.direction = heading
            commands.append(
                SetIndicators(elevator_id, up=heading is Direction.UP, down=heading is Direction.DOWN)
            )

        elevator.next_stop = stop
        return CommitOk(elevator_id=elevator_id, stop=stop, commands=commands)


def _staged(stop: Stop) -> Optional[Direction]:
    return None if stop.direction is Direction.ANY else stop.direction


def _status(elevator: ElevatorState) -> str:
    return f"elev {elevator.elevator_id}, last floor {elevator.last_floor} ({elevator.direction.value})"
