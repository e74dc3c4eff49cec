import logging

import pytest

from dispatch import (
    ClaimConflictError,
    CommitOk,
    Direction,
    InvariantViolation,
    MoveTo,
    Rescheduler,
    SetIndicators,
    Stop,
)


def test_idle_elevator_with_nothing_to_do(rescheduler, state):
    elevator = state.elevator(0)
    elevator.next_direction = Direction.DOWN
    elevator.next_stop = Stop(3, Direction.ANY)

    assert rescheduler.reschedule(0) == []
    assert elevator.next_direction is None
    assert elevator.next_stop is None
    assert elevator.last_floor == 0


def test_preference_order_going_up(rescheduler, state):
    state.elevator(0).last_floor = 2
    state.calls.press(4, Direction.DOWN)
    state.calls.press(1, Direction.UP)

    assert rescheduler.candidates(0) == [Stop(4, Direction.DOWN), Stop(1, Direction.UP)]


def test_same_direction_above_beats_closer_opposite_call(rescheduler, state):
    state.elevator(0).last_floor = 1
    state.calls.press(3, Direction.DOWN)
    state.calls.press(5, Direction.UP)

    commands = rescheduler.reschedule(0)
    assert commands == [MoveTo(0, 5, True), SetIndicators(0, up=True, down=False)]
    assert state.calls[5].up_claimed_by == 0
    assert state.calls[3].down_claimed_by is None


def test_up_commit_claims_and_stages(rescheduler, state):
    state.elevator(0).last_floor = 2
    state.calls.press(4, Direction.DOWN)

    commands = rescheduler.reschedule(0)

    elevator = state.elevator(0)
    assert commands == [MoveTo(0, 4, True), SetIndicators(0, up=True, down=False)]
    assert elevator.direction is Direction.UP
    assert elevator.next_direction is Direction.DOWN
    assert elevator.next_stop == Stop(4, Direction.DOWN)
    assert state.calls[4].down_claimed_by == 0


def test_down_commit_turns_elevator_around(rescheduler, state):
    elevator = state.elevator(1)
    elevator.last_floor = 4
    state.calls.press(1, Direction.DOWN)

    commands = rescheduler.reschedule(1)

    assert commands == [MoveTo(1, 1, True), SetIndicators(1, up=False, down=True)]
    assert elevator.direction is Direction.DOWN
    assert elevator.next_stop == Stop(1, Direction.DOWN)
    assert state.calls[1].down_claimed_by == 1


def test_preference_order_going_down(rescheduler, state, host):
    elevator = state.elevator(0)
    elevator.last_floor = 3
    elevator.direction = Direction.DOWN
    state.calls.press(1, Direction.UP)
    state.calls.press(4, Direction.UP)
    host.car_requests[0] = {5}

    assert rescheduler.candidates(0) == [
        Stop(1, Direction.UP),
        Stop(4, Direction.UP),
        Stop(4, Direction.UP),
    ]
    commands = rescheduler.reschedule(0)
    assert commands == [MoveTo(0, 1, True), SetIndicators(0, up=False, down=True)]


def test_reopen_at_current_floor(rescheduler, state):
    elevator = state.elevator(0)
    elevator.last_floor = 2
    state.calls.press(2, Direction.DOWN)

    commands = rescheduler.reschedule(0)

    assert commands == [MoveTo(0, 2, True)]
    assert elevator.direction is Direction.UP
    assert elevator.next_direction is Direction.DOWN
    assert elevator.next_stop == Stop(2, Direction.DOWN)
    assert state.calls[2].down_claimed_by == 0


def test_car_request_move_is_not_claimed(rescheduler, state, host):
    elevator = state.elevator(0)
    elevator.next_direction = Direction.DOWN
    host.car_requests[0] = {2}

    commands = rescheduler.reschedule(0)

    assert commands == [MoveTo(0, 2, True), SetIndicators(0, up=True, down=False)]
    assert elevator.next_stop == Stop(2, Direction.ANY)
    assert elevator.next_direction is None
    assert state.claim_holders() == {}


@pytest.mark.parametrize(
    "last_floor, direction, up_calls, down_calls, car_requests",
    [
        (0, Direction.UP, [5], [], []),
        (3, Direction.UP, [1], [3], [0]),
        (4, Direction.DOWN, [4], [], [5]),
        (2, Direction.DOWN, [], [2], []),
        (1, Direction.UP, [], [], [4]),
        (4, Direction.UP, [1], [], []),
    ],
)
def test_reschedule_is_idempotent(
    rescheduler, state, host, last_floor, direction, up_calls, down_calls, car_requests
):
    elevator = state.elevator(0)
    elevator.last_floor = last_floor
    elevator.direction = direction
    for floor in up_calls:
        state.calls.press(floor, Direction.UP)
    for floor in down_calls:
        state.calls.press(floor, Direction.DOWN)
    host.car_requests[0] = set(car_requests)

    first = rescheduler.reschedule(0)
    first_stop = elevator.next_stop
    second = rescheduler.reschedule(0)

    assert second == first
    assert elevator.next_stop == first_stop


def test_commit_reports_violation_without_mutating(rescheduler, state):
    state.calls.press(3, Direction.UP)
    state.calls.claim(3, Direction.UP, 1)
    elevator = state.elevator(0)

    result = rescheduler.commit(0, Stop(3, Direction.UP))

    assert result == InvariantViolation(elevator_id=0, floor=3, direction=Direction.UP, holder=1)
    assert state.calls[3].up_claimed_by == 1
    assert elevator.next_stop is None
    assert elevator.next_direction is None


def test_commit_ok_carries_commands(rescheduler, state):
    state.calls.press(3, Direction.UP)
    result = rescheduler.commit(0, Stop(3, Direction.UP))
    assert isinstance(result, CommitOk)
    assert result.commands == [MoveTo(0, 3, True), SetIndicators(0, up=True, down=False)]


def _conflicting(state, finder, strict):
    state.calls.press(3, Direction.UP)
    state.calls.claim(3, Direction.UP, 1)
    rescheduler = Rescheduler(state, finder, strict_claims=strict)
    rescheduler.candidates = lambda elevator_id: [Stop(3, Direction.UP)]
    return rescheduler


def test_strict_policy_raises_with_context(state, finder):
    rescheduler = _conflicting(state, finder, strict=True)

    with pytest.raises(ClaimConflictError) as excinfo:
        rescheduler.reschedule(0)

    violation = excinfo.value.violation
    assert (violation.elevator_id, violation.floor, violation.direction, violation.holder) == (
        0,
        3,
        Direction.UP,
        1,
    )
    assert "already claimed by elevator 1" in str(excinfo.value)


def test_lenient_policy_logs_and_refuses(state, finder, caplog):
    rescheduler = _conflicting(state, finder, strict=False)

    with caplog.at_level(logging.ERROR, logger="dispatch.rescheduler"):
        assert rescheduler.reschedule(0) == []

    assert state.calls[3].up_claimed_by == 1
    assert state.elevator(0).next_stop is None
    assert "refusing commit" in caplog.text
