from ghostmatch.components.grid import Grid
from ghostmatch.events.bus import EVENT_HINT_FOUND, EVENT_HINT_REQUEST, EVENT_HINT_UNAVAILABLE
from ghostmatch.systems.board_ops import find_any_solving_move, find_valid_swaps
from ghostmatch.systems.hint_system import HintSystem
from tests.helpers import build_world, filler_rows, grid_with


def hint_rows():
    # Row 0: X X c X -> only (0,2)<->(0,3) completes a run.
    grid = grid_with({(0, 0): 'X', (0, 1): 'X', (0, 3): 'X'})
    return [list(row) for row in grid.snapshot()]


def test_first_solving_move_in_scan_order():
    grid = Grid.from_rows(hint_rows())
    assert find_any_solving_move(grid) == ((0, 2), (0, 3))
    assert find_valid_swaps(grid)[0] == ((0, 2), (0, 3))


def test_hint_is_deterministic():
    grid = Grid.from_rows(hint_rows())
    assert find_any_solving_move(grid) == find_any_solving_move(grid.copy())


def test_deadlocked_board_has_no_hint():
    grid = Grid.from_rows(filler_rows())
    assert find_any_solving_move(grid) is None
    assert find_valid_swaps(grid) == []


def test_hint_system_emits_found_and_unavailable():
    bus, world, board = build_world(hint_rows())
    hints = HintSystem(world, bus)
    found = []
    missing = []
    bus.subscribe(EVENT_HINT_FOUND, lambda s, **k: found.append((k['src'], k['dst'])))
    bus.subscribe(EVENT_HINT_UNAVAILABLE, lambda s, **k: missing.append(True))

    bus.emit(EVENT_HINT_REQUEST)
    assert found == [((0, 2), (0, 3))]

    board.grid.load(filler_rows())
    assert hints.find_hint() is None
    assert missing == [True]
