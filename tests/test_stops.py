from dispatch import Direction, Stop


def test_nothing_pending(finder):
    assert finder.scan_up(0, 0, True) is None
    assert finder.scan_down(0, 5, True) is None


def test_car_request_only(finder, host):
    host.car_requests[0] = {2, 4}
    assert finder.scan_up(0, 1, False) == Stop(2, Direction.ANY)
    assert finder.scan_down(0, 5, False) == Stop(4, Direction.ANY)
    assert finder.scan_up(0, 5, True) is None


def test_car_requests_belong_to_one_elevator(finder, host):
    host.car_requests[1] = {3}
    assert finder.scan_up(0, 0, True) is None
    assert finder.scan_up(1, 0, True) == Stop(3, Direction.ANY)


def test_same_direction_hall_call(finder, state):
    state.calls.press(3, Direction.UP)
    assert finder.scan_up(0, 1, False) == Stop(3, Direction.UP)
    assert finder.scan_up(0, 3, False) == Stop(3, Direction.UP)
    assert finder.scan_up(0, 4, False) is None


def test_opposite_direction_needs_permission(finder, state):
    state.calls.press(3, Direction.DOWN)
    assert finder.scan_up(0, 1, False) is None
    assert finder.scan_up(0, 1, True) == Stop(3, Direction.DOWN)


def test_up_call_checked_before_down_call_on_same_floor(finder, state):
    state.calls.press(2, Direction.UP)
    state.calls.press(2, Direction.DOWN)
    assert finder.scan_up(0, 0, True) == Stop(2, Direction.UP)
    assert finder.scan_down(0, 5, True) == Stop(2, Direction.DOWN)


def test_calls_claimed_by_others_are_skipped(finder, state):
    state.calls.press(2, Direction.UP)
    state.calls.press(4, Direction.UP)
    state.calls.claim(2, Direction.UP, 1)
    assert finder.scan_up(0, 0, False) == Stop(4, Direction.UP)
    assert finder.scan_up(1, 0, False) == Stop(2, Direction.UP)


def test_closer_car_request_beats_hall_call_going_up(finder, state, host):
    state.calls.press(4, Direction.UP)
    host.car_requests[0] = {2}
    assert finder.scan_up(0, 0, False) == Stop(2, Direction.ANY)


def test_hall_call_wins_ties_and_when_closer(finder, state, host):
    state.calls.press(3, Direction.UP)
    host.car_requests[0] = {3, 5}
    assert finder.scan_up(0, 0, False) == Stop(3, Direction.UP)
    host.car_requests[0] = {5}
    assert finder.scan_up(0, 0, False) == Stop(3, Direction.UP)


def test_scan_down_mirrors_tie_break(finder, state, host):
    state.calls.press(2, Direction.DOWN)
    host.car_requests[0] = {3}
    assert finder.scan_down(0, 4, False) == Stop(3, Direction.ANY)
    host.car_requests[0] = {1}
    assert finder.scan_down(0, 4, False) == Stop(2, Direction.DOWN)
    host.car_requests[0] = {2}
    assert finder.scan_down(0, 4, False) == Stop(2, Direction.DOWN)


def test_scan_down_opposite_direction(finder, state):
    state.calls.press(1, Direction.UP)
    assert finder.scan_down(0, 4, False) is None
    assert finder.scan_down(0, 4, True) == Stop(1, Direction.UP)


def test_scan_bounds(finder, state):
    state.calls.press(5, Direction.UP)
    state.calls.press(0, Direction.DOWN)
    # one past the top / below the bottom scans nothing
    assert finder.scan_up(0, 6, True) is None
    assert finder.scan_down(0, -1, True) is None
    assert finder.scan_up(0, 5, False) == Stop(5, Direction.UP)
    assert finder.scan_down(0, 0, False) == Stop(0, Direction.DOWN)
