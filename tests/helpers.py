from __future__ import annotations

import random
from typing import Dict, List, Sequence, Tuple

from esper import World

from ghostmatch.components.grid import Grid, Position
from ghostmatch.config import EngineConfig
from ghostmatch.events.bus import EventBus
from ghostmatch.systems.board import BoardSystem
from ghostmatch.systems.world_queries import get_grid
from ghostmatch.world import create_world

FILLER = ('a', 'b', 'c', 'd', 'e', 'f')


def filler_rows(rows: int = 6, cols: int = 6) -> List[List[str]]:
    """Match-free, deadlocked background: (2*row + col) mod 6 over six tokens.

    Any three consecutive cells in a row or column differ, and no single swap
    creates a run, so tests can paste uppercase tokens on top of it.
    """
    return [[FILLER[(2 * r + c) % len(FILLER)] for c in range(cols)] for r in range(rows)]


def stalemate_rows(rows: int = 6, cols: int = 6, tokens: Sequence[str] = ('a', 'b', 'c')) -> List[List[str]]:
    """Three-token diagonal stripes: stable and without any solving swap."""
    return [[tokens[(r + c) % 3] for c in range(cols)] for r in range(rows)]


def grid_with(overrides: Dict[Position, str], rows: int = 6, cols: int = 6) -> Grid:
    grid = Grid.from_rows(filler_rows(rows, cols))
    for (r, c), token in overrides.items():
        grid.set(r, c, token)
    return grid


def cascade_rows() -> List[List[str]]:
    """Vertical X run in column 0 whose clearing drops a Y next to two Ys.

    Step 1 clears (3,0)-(5,0); gravity moves the Y at (2,0) to (5,0), which
    completes Y Y Y on the bottom row for step 2.
    """
    grid = grid_with({
        (2, 0): 'Y',
        (3, 0): 'X', (4, 0): 'X', (5, 0): 'X',
        (5, 1): 'Y', (5, 2): 'Y',
    })
    return [list(row) for row in grid.snapshot()]


def build_world(
    rows: Sequence[Sequence[str]] | None = None,
    *,
    config: EngineConfig | None = None,
    seed: int = 1234,
) -> Tuple[EventBus, World, BoardSystem]:
    """World with a board entity, optionally loaded with a fixed layout."""
    bus = EventBus()
    world = create_world(bus, config, rng=random.Random(seed))
    cfg = config or EngineConfig()
    board = BoardSystem(world, bus, cfg.rows, cfg.cols, match_min=cfg.match_min)
    if rows is not None:
        get_grid(world).load(rows)
    return bus, world, board
