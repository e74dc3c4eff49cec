from __future__ import annotations

from typing import Iterable, List, Sequence, Set

import pytest

from dispatch import Direction, Dispatcher, Rescheduler, SchedulerState, StopFinder


class FakeHost:
    """Host double: cars sit wherever the test puts them."""

    def __init__(self, floors: Sequence[int]) -> None:
        self.floors: List[int] = list(floors)
        self.car_requests: List[Set[int]] = [set() for _ in floors]

    def current_floor(self, elevator_id: int) -> int:
        return self.floors[elevator_id]

    def pending_car_requests(self, elevator_id: int) -> Iterable[int]:
        return set(self.car_requests[elevator_id])


class FixedRandom:
    """Stands in for ``random.Random`` so the fallback choice is known."""

    def __init__(self, value: int = 0) -> None:
        self.value = value

    def randrange(self, stop: int) -> int:
        return self.value % stop


def assert_claim_invariants(state: SchedulerState) -> None:
    for floor, call in enumerate(state.calls):
        for direction in (Direction.UP, Direction.DOWN):
            if call.claimed_by(direction) is not None:
                assert call.pressed(direction), f"claim without press at {floor} {direction}"


@pytest.fixture
def host() -> FakeHost:
    return FakeHost([0, 0])


@pytest.fixture
def state() -> SchedulerState:
    return SchedulerState(6, [0, 0])


@pytest.fixture
def finder(state: SchedulerState, host: FakeHost) -> StopFinder:
    return StopFinder(state, host)


@pytest.fixture
def rescheduler(state: SchedulerState, finder: StopFinder) -> Rescheduler:
    return Rescheduler(state, finder)


def make_dispatcher(floors: Sequence[int] = (0, 0), num_floors: int = 6, fallback: int = 0, **kwargs):
    host = FakeHost(floors)
    dispatcher = Dispatcher(host, num_floors, len(floors), **kwargs)
    dispatcher.set_picker(type(dispatcher.picker)(dispatcher.state, rng=FixedRandom(fallback)))
    return dispatcher, host
