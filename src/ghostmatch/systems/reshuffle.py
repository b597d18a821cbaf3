from __future__ import annotations

import logging
import random
from collections import Counter
from dataclasses import dataclass
from typing import Sequence

from ghostmatch.components.grid import Grid
from ghostmatch.constants import (
    MATCH_MIN,
    MAX_GENERATE_ROUNDS,
    MAX_PLAYABLE_ATTEMPTS,
    MAX_RESHUFFLE_ATTEMPTS,
)
from ghostmatch.errors import BoardStabilizationError
from ghostmatch.systems.board_generator import BoardGenerator, break_matches
from ghostmatch.systems.board_ops import is_solvable

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ReshuffleResult:
    attempts: int
    preserved: bool  # same multiset of tokens as before the shuffle
    fallback: bool = False


def reshuffle_board(
    grid: Grid,
    spawn_tokens: Sequence[str],
    rng: random.Random,
    *,
    match_min: int = MATCH_MIN,
    max_attempts: int = MAX_RESHUFFLE_ATTEMPTS,
    max_rounds: int = MAX_GENERATE_ROUNDS,
) -> ReshuffleResult:
    """Permute the tokens already on ``grid`` into a match-free, solvable layout.

    Each attempt shuffles the full multiset and writes it back row-major;
    cells that still form matches are redrawn from ``spawn_tokens``. After
    ``max_attempts`` unsolvable results the board is regenerated from fresh
    draws instead. The grid is only modified once a good layout is found.
    """
    original = grid.tokens()
    if any(token is None for token in original):
        raise ValueError("cannot reshuffle a board with empty cells")
    before = Counter(original)

    for attempt in range(1, max_attempts + 1):
        values = list(original)
        rng.shuffle(values)
        candidate = Grid(rows=grid.rows, cols=grid.cols)
        candidate.fill(values)
        try:
            break_matches(candidate, spawn_tokens, rng, match_min=match_min, max_rounds=max_rounds)
        except BoardStabilizationError:
            continue
        if not is_solvable(candidate, match_min=match_min):
            continue
        grid.load(candidate.snapshot())
        preserved = Counter(candidate.tokens()) == before
        logger.debug("reshuffled board in %d attempts (preserved=%s)", attempt, preserved)
        return ReshuffleResult(attempts=attempt, preserved=preserved)

    logger.warning(
        "reshuffle gave up after %d attempts; regenerating %dx%d board from fresh draws",
        max_attempts,
        grid.rows,
        grid.cols,
    )
    generator = BoardGenerator(
        spawn_tokens,
        grid.rows,
        grid.cols,
        rng=rng,
        match_min=match_min,
        max_rounds=max_rounds,
        max_playable_attempts=MAX_PLAYABLE_ATTEMPTS,
    )
    fresh = generator.generate_playable()
    grid.load(fresh.snapshot())
    return ReshuffleResult(
        attempts=max_attempts,
        preserved=Counter(fresh.tokens()) == before,
        fallback=True,
    )
