from ghostmatch.components.grid import EMPTY, Grid
from ghostmatch.systems.board_ops import (
    RunLengths,
    find_all_matches,
    find_match_groups,
    find_run_at,
    has_matches,
    is_matched,
    match_group_at,
)
from tests.helpers import filler_rows, grid_with


def test_filler_background_has_no_matches():
    grid = Grid.from_rows(filler_rows())
    assert find_all_matches(grid) == set()
    assert not has_matches(grid)


def test_vertical_run_in_column_zero_reported_exactly():
    grid = grid_with({
        (0, 0): 'A', (0, 1): 'A', (0, 2): 'B', (0, 3): 'C', (0, 4): 'D', (0, 5): 'E',
        (1, 0): 'A',
        (2, 0): 'A',
    })
    assert find_all_matches(grid) == {(0, 0), (1, 0), (2, 0)}
    assert find_run_at(grid, 0, 0) == RunLengths(horizontal=2, vertical=3)
    assert not is_matched(grid, 0, 1)


def test_run_lengths_stop_at_edges_and_differing_tokens():
    grid = grid_with({(3, 1): 'X', (3, 2): 'X', (3, 3): 'X', (3, 4): 'X'})
    assert find_run_at(grid, 3, 2) == RunLengths(4, 1)
    assert find_run_at(grid, 3, 4).horizontal == 4
    assert is_matched(grid, 3, 4)
    assert match_group_at(grid, 3, 1) == {(3, 1), (3, 2), (3, 3), (3, 4)}


def test_empty_cells_never_match():
    grid = Grid.from_rows([[EMPTY, EMPTY, EMPTY], ['a', 'b', 'c'], ['b', 'c', 'a']])
    assert find_run_at(grid, 0, 1) == RunLengths(0, 0)
    assert find_all_matches(grid) == set()


def test_lone_run_of_three_is_one_group():
    grid = grid_with({(4, 2): 'X', (4, 3): 'X', (4, 4): 'X'})
    groups = find_match_groups(grid)
    assert groups == [frozenset({(4, 2), (4, 3), (4, 4)})]


def test_l_shape_merges_into_single_five_cell_group():
    grid = grid_with({
        (2, 1): 'X', (2, 2): 'X', (2, 3): 'X',
        (3, 1): 'X', (4, 1): 'X',
    })
    expected = {(2, 1), (2, 2), (2, 3), (3, 1), (4, 1)}
    assert match_group_at(grid, 2, 1) == expected
    assert find_match_groups(grid) == [frozenset(expected)]
    assert find_all_matches(grid) == expected


def test_t_shape_merges_into_single_group():
    grid = grid_with({
        (1, 1): 'X', (1, 2): 'X', (1, 3): 'X',
        (2, 2): 'X', (3, 2): 'X',
    })
    groups = find_match_groups(grid)
    assert len(groups) == 1
    assert len(groups[0]) == 5


def test_separate_runs_stay_separate_groups():
    grid = grid_with({
        (0, 0): 'X', (0, 1): 'X', (0, 2): 'X',
        (5, 3): 'Y', (5, 4): 'Y', (5, 5): 'Y',
    })
    groups = find_match_groups(grid)
    assert groups == [
        frozenset({(0, 0), (0, 1), (0, 2)}),
        frozenset({(5, 3), (5, 4), (5, 5)}),
    ]


def test_detection_is_independent_of_scan_order():
    grid = grid_with({
        (2, 1): 'X', (2, 2): 'X', (2, 3): 'X', (3, 1): 'X', (4, 1): 'X',
        (5, 3): 'Y', (5, 4): 'Y', (5, 5): 'Y',
    })
    forward = find_all_matches(grid)
    backward = set()
    for row in reversed(range(grid.rows)):
        for col in reversed(range(grid.cols)):
            backward |= match_group_at(grid, row, col)
    assert forward == backward


def test_custom_match_min():
    grid = grid_with({(0, 0): 'X', (0, 1): 'X'})
    assert find_all_matches(grid) == set()
    assert find_all_matches(grid, match_min=2) == {(0, 0), (0, 1)}
