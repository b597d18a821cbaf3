from __future__ import annotations

import logging
import random
from typing import Sequence

from ghostmatch.components.grid import Grid
from ghostmatch.constants import MATCH_MIN, MAX_GENERATE_ROUNDS, MAX_PLAYABLE_ATTEMPTS
from ghostmatch.errors import AlphabetError, BoardStabilizationError, ConfigError
from ghostmatch.systems.board_ops import find_all_matches, is_solvable

logger = logging.getLogger(__name__)


def break_matches(
    grid: Grid,
    tokens: Sequence[str],
    rng: random.Random,
    *,
    match_min: int = MATCH_MIN,
    max_rounds: int = MAX_GENERATE_ROUNDS,
) -> int:
    """Redraw matched cells until the grid is match-free.

    Only the cells that are part of a match are redrawn each round. Returns
    the number of rounds used; raises ``BoardStabilizationError`` once
    ``max_rounds`` is exceeded.
    """
    for rounds in range(max_rounds + 1):
        matched = find_all_matches(grid, match_min=match_min)
        if not matched:
            return rounds
        for row, col in sorted(matched):
            grid.set(row, col, rng.choice(tokens))
    raise BoardStabilizationError(
        f"board still has matches after {max_rounds} redraw rounds"
    )


def generate_board(
    tokens: Sequence[str],
    rows: int,
    cols: int,
    rng: random.Random,
    *,
    match_min: int = MATCH_MIN,
    max_rounds: int = MAX_GENERATE_ROUNDS,
) -> Grid:
    """Uniform random fill followed by the match-breaking loop."""
    grid = Grid(rows=rows, cols=cols)
    grid.fill(rng.choice(tokens) for _ in range(rows * cols))
    rounds = break_matches(grid, tokens, rng, match_min=match_min, max_rounds=max_rounds)
    logger.debug("generated %dx%d board in %d redraw rounds", rows, cols, rounds)
    return grid


def validate_board_config(tokens: Sequence[str], rows: int, cols: int, match_min: int = MATCH_MIN) -> None:
    if rows < 1 or cols < 1:
        raise ConfigError(f"board dimensions must be positive, got {rows}x{cols}")
    if match_min < 2:
        raise ConfigError(f"match_min must be at least 2, got {match_min}")
    if max(rows, cols) < match_min:
        raise ConfigError(
            f"a {rows}x{cols} board has no line long enough for a match of {match_min}"
        )
    if len(set(tokens)) < 2:
        raise AlphabetError(
            f"at least two distinct tokens are needed for a match-free board, got {list(tokens)!r}"
        )


class BoardGenerator:
    """Builds fresh match-free boards for a fixed alphabet and size.

    Configuration is validated up front so a hopeless alphabet fails here
    instead of spinning in the redraw loop.
    """

    def __init__(
        self,
        tokens: Sequence[str],
        rows: int,
        cols: int,
        *,
        rng: random.Random | None = None,
        match_min: int = MATCH_MIN,
        max_rounds: int = MAX_GENERATE_ROUNDS,
        max_playable_attempts: int = MAX_PLAYABLE_ATTEMPTS,
    ) -> None:
        validate_board_config(tokens, rows, cols, match_min)
        self.tokens = list(dict.fromkeys(tokens))
        self.rows = rows
        self.cols = cols
        self.rng = rng or random.Random()
        self.match_min = match_min
        self.max_rounds = max_rounds
        self.max_playable_attempts = max_playable_attempts

    def generate(self) -> Grid:
        return generate_board(
            self.tokens,
            self.rows,
            self.cols,
            self.rng,
            match_min=self.match_min,
            max_rounds=self.max_rounds,
        )

    def generate_playable(self) -> Grid:
        """A match-free board that also has at least one solving swap."""
        for attempt in range(1, self.max_playable_attempts + 1):
            grid = self.generate()
            if is_solvable(grid, match_min=self.match_min):
                if attempt > 1:
                    logger.debug("playable board found after %d attempts", attempt)
                return grid
        raise BoardStabilizationError(
            f"no solvable board after {self.max_playable_attempts} generation attempts"
        )
