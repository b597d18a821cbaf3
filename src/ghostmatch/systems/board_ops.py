"""Pure board operations over a :class:`Grid`.

Everything here works on a plain grid so systems, tools and tests share one
implementation of match detection, gravity, refill and swap prediction.
"""
from __future__ import annotations

import random
from typing import Iterable, List, NamedTuple, Optional, Sequence, Set, Tuple

from ghostmatch.components.grid import EMPTY, Grid, Position
from ghostmatch.components.resolution_step import GravityMove
from ghostmatch.constants import MATCH_MIN
from ghostmatch.errors import NotAdjacentError

Swap = Tuple[Position, Position]


class RunLengths(NamedTuple):
    horizontal: int
    vertical: int


def _sweep(grid: Grid, row: int, col: int, dr: int, dc: int) -> List[Position]:
    """Cells with the same token as (row, col), walking away from it in one direction."""
    token = grid.cells[row][col]
    found: List[Position] = []
    r, c = row + dr, col + dc
    while grid.in_bounds(r, c) and grid.cells[r][c] == token:
        found.append((r, c))
        r += dr
        c += dc
    return found


def _runs_through(grid: Grid, row: int, col: int) -> Tuple[List[Position], List[Position]]:
    if grid.get(row, col) is EMPTY:
        return [], []
    h_run = _sweep(grid, row, col, 0, -1) + [(row, col)] + _sweep(grid, row, col, 0, 1)
    v_run = _sweep(grid, row, col, -1, 0) + [(row, col)] + _sweep(grid, row, col, 1, 0)
    return h_run, v_run


def find_run_at(grid: Grid, row: int, col: int) -> RunLengths:
    """Length of the horizontal and vertical runs through (row, col), the cell included."""
    h_run, v_run = _runs_through(grid, row, col)
    return RunLengths(len(h_run), len(v_run))


def is_matched(grid: Grid, row: int, col: int, *, match_min: int = MATCH_MIN) -> bool:
    runs = find_run_at(grid, row, col)
    return runs.horizontal >= match_min or runs.vertical >= match_min


def match_group_at(grid: Grid, row: int, col: int, *, match_min: int = MATCH_MIN) -> Set[Position]:
    """Union of the qualifying horizontal and vertical runs through (row, col)."""
    h_run, v_run = _runs_through(grid, row, col)
    group: Set[Position] = set()
    if len(h_run) >= match_min:
        group.update(h_run)
    if len(v_run) >= match_min:
        group.update(v_run)
    return group


def find_all_matches(grid: Grid, *, match_min: int = MATCH_MIN) -> Set[Position]:
    """Every cell that belongs to a run of at least ``match_min``."""
    matched: Set[Position] = set()
    for row, col in grid.positions():
        if (row, col) in matched:
            continue
        matched |= match_group_at(grid, row, col, match_min=match_min)
    return matched


def has_matches(grid: Grid, *, match_min: int = MATCH_MIN) -> bool:
    return any(is_matched(grid, r, c, match_min=match_min) for r, c in grid.positions())


def find_match_groups(grid: Grid, *, match_min: int = MATCH_MIN) -> List[frozenset]:
    """Connected match groups; runs sharing a cell merge into one group."""
    groups = []
    for row, col in grid.positions():
        group = match_group_at(grid, row, col, match_min=match_min)
        if group:
            groups.append(group)
    merged: List[Set[Position]] = []
    while groups:
        first = groups.pop()
        changed = True
        while changed:
            changed = False
            for g in groups[:]:
                if first & g:
                    first |= g
                    groups.remove(g)
                    changed = True
        merged.append(first)
    return sorted((frozenset(g) for g in merged), key=lambda g: min(g))


def clear_positions(grid: Grid, positions: Iterable[Position]) -> List[Tuple[Position, str]]:
    """Empty the given cells and return what was there, in row-major order."""
    cleared: List[Tuple[Position, str]] = []
    for row, col in sorted(set(positions)):
        token = grid.get(row, col)
        if token is EMPTY:
            continue
        cleared.append(((row, col), token))
        grid.set(row, col, EMPTY)
    return cleared


def compute_gravity_moves(grid: Grid) -> List[GravityMove]:
    """Moves that compact every column downward, bottom row first."""
    moves: List[GravityMove] = []
    for col in range(grid.cols):
        write_row = grid.rows - 1
        for row in range(grid.rows - 1, -1, -1):
            token = grid.cells[row][col]
            if token is EMPTY:
                continue
            if row != write_row:
                moves.append(GravityMove(source=(row, col), target=(write_row, col), token=token))
            write_row -= 1
    return moves


def apply_gravity(grid: Grid) -> List[GravityMove]:
    moves = compute_gravity_moves(grid)
    # Moves are ordered bottom-up per column so a target is always vacated first.
    for move in moves:
        grid.set(*move.target, move.token)
        grid.set(*move.source, EMPTY)
    return moves


def refill_empty_cells(grid: Grid, tokens: Sequence[str], rng: random.Random) -> List[Position]:
    """Draw a fresh token for every empty cell, row-major."""
    spawned = grid.empty_positions()
    for row, col in spawned:
        grid.set(row, col, rng.choice(tokens))
    return spawned


def _require_swap(grid: Grid, a: Position, b: Position) -> None:
    if not (grid.in_bounds(*a) and grid.in_bounds(*b)):
        raise IndexError(f"swap {a} <-> {b} leaves the {grid.rows}x{grid.cols} grid")
    if not Grid.is_adjacent(a, b):
        raise NotAdjacentError(a, b)


def would_match(grid: Grid, a: Position, b: Position, *, match_min: int = MATCH_MIN) -> bool:
    """True if swapping ``a`` and ``b`` creates a run through either moved cell.

    The committed grid is never touched; the swap happens on a scratch copy.
    """
    _require_swap(grid, a, b)
    scratch = grid.copy()
    scratch.swap(a, b)
    return is_matched(scratch, *a, match_min=match_min) or is_matched(scratch, *b, match_min=match_min)


def commit_swap(grid: Grid, a: Position, b: Position) -> None:
    _require_swap(grid, a, b)
    grid.swap(a, b)


def _candidate_swaps(grid: Grid):
    for row in range(grid.rows):
        for col in range(grid.cols):
            if col + 1 < grid.cols:
                yield (row, col), (row, col + 1)
            if row + 1 < grid.rows:
                yield (row, col), (row + 1, col)


def find_valid_swaps(grid: Grid, *, match_min: int = MATCH_MIN) -> List[Swap]:
    """All adjacent swaps that create a match, row-major, right before down."""
    return [pair for pair in _candidate_swaps(grid) if would_match(grid, *pair, match_min=match_min)]


def find_any_solving_move(grid: Grid, *, match_min: int = MATCH_MIN) -> Optional[Swap]:
    """The first solving swap in scan order, or ``None`` when the board is deadlocked."""
    for pair in _candidate_swaps(grid):
        if would_match(grid, *pair, match_min=match_min):
            return pair
    return None


def is_solvable(grid: Grid, *, match_min: int = MATCH_MIN) -> bool:
    return find_any_solving_move(grid, match_min=match_min) is not None
