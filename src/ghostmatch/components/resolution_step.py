from __future__ import annotations

from dataclasses import dataclass
from typing import FrozenSet, NamedTuple, Optional, Tuple

from ghostmatch.components.grid import Position, Snapshot
from ghostmatch.constants import LARGE_MATCH_MIN


class ClearedCell(NamedTuple):
    position: Position
    token: str


@dataclass(frozen=True, slots=True)
class GravityMove:
    source: Position
    target: Position
    token: str


def longest_line(group: FrozenSet[Position]) -> int:
    """Length of the longest contiguous row or column segment inside ``group``."""
    best = 0
    for axis in (0, 1):
        lines: dict[int, list[int]] = {}
        for pos in group:
            lines.setdefault(pos[axis], []).append(pos[1 - axis])
        for values in lines.values():
            values.sort()
            run = 1
            best = max(best, 1)
            for prev, cur in zip(values, values[1:]):
                run = run + 1 if cur == prev + 1 else 1
                best = max(best, run)
    return best


@dataclass(frozen=True, slots=True)
class ResolutionStep:
    """One clear → gravity → refill pass of a cascade.

    ``grid`` is the board after refill, so a renderer can replay the
    cascade step by step without touching the live grid.
    """
    depth: int
    cleared: Tuple[ClearedCell, ...]
    groups: Tuple[FrozenSet[Position], ...]
    gravity_moves: Tuple[GravityMove, ...]
    new_tiles: Tuple[Position, ...]
    grid: Snapshot
    large_match_min: int = LARGE_MATCH_MIN

    @property
    def cleared_count(self) -> int:
        return len(self.cleared)

    @property
    def positions(self) -> Tuple[Position, ...]:
        return tuple(cell.position for cell in self.cleared)

    @property
    def tokens(self) -> Tuple[str, ...]:
        return tuple(cell.token for cell in self.cleared)

    @property
    def longest_run(self) -> int:
        return max((longest_line(group) for group in self.groups), default=0)

    @property
    def is_large_match(self) -> bool:
        """At least ``large_match_min`` cells cleared in this step, in any shape."""
        return self.cleared_count >= self.large_match_min

    @property
    def has_long_line(self) -> bool:
        return self.longest_run >= self.large_match_min


@dataclass(frozen=True, slots=True)
class CascadeResult:
    steps: Tuple[ResolutionStep, ...]
    grid: Snapshot

    @property
    def depth(self) -> int:
        return len(self.steps)

    @property
    def cleared_count(self) -> int:
        return sum(step.cleared_count for step in self.steps)


@dataclass(frozen=True, slots=True)
class SwapOutcome:
    """What happened to a swap request, as reported by ``MatchEngine.swap``."""
    src: Position
    dst: Position
    valid: bool
    reason: Optional[str] = None
    steps: Tuple[ResolutionStep, ...] = ()
    score_delta: int = 0
    reshuffled: bool = False
    grid: Optional[Snapshot] = None

    @property
    def depth(self) -> int:
        return len(self.steps)
