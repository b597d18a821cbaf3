from __future__ import annotations

import logging
import random
from typing import Callable, Iterator, List, Optional, Sequence

from esper import World

from ghostmatch.components.engine_state import Phase
from ghostmatch.components.grid import Grid
from ghostmatch.components.resolution_step import CascadeResult, ClearedCell, ResolutionStep
from ghostmatch.constants import LARGE_MATCH_MIN, MATCH_MIN, MAX_CASCADE_DEPTH
from ghostmatch.errors import BoardStabilizationError, NoMatchError
from ghostmatch.events.bus import (
    EVENT_BOARD_CHANGED,
    EVENT_CASCADE_COMPLETE,
    EVENT_CASCADE_REQUEST,
    EVENT_CASCADE_STEP,
    EVENT_GRAVITY_APPLIED,
    EVENT_MATCH_CLEARED,
    EVENT_MATCH_FOUND,
    EVENT_REFILL_COMPLETED,
    EventBus,
)
from ghostmatch.systems.board_ops import (
    apply_gravity,
    clear_positions,
    find_match_groups,
    has_matches,
    refill_empty_cells,
)
from ghostmatch.systems.world_queries import get_alphabet, get_grid, get_or_create_engine_state

logger = logging.getLogger(__name__)


class CascadeResolver:
    """Runs detect → clear → gravity → refill until the grid is stable.

    ``steps`` is a generator: each ``next`` performs one full pass on the
    grid and yields its :class:`ResolutionStep`, so callers decide how long
    to dwell between steps. The loop is capped at ``max_depth`` passes.
    """

    def __init__(
        self,
        tokens: Sequence[str] | Callable[[], Sequence[str]],
        rng: random.Random,
        *,
        match_min: int = MATCH_MIN,
        large_match_min: int = LARGE_MATCH_MIN,
        max_depth: int = MAX_CASCADE_DEPTH,
    ) -> None:
        self._tokens = tokens
        self.rng = rng
        self.match_min = match_min
        self.large_match_min = large_match_min
        self.max_depth = max_depth

    def spawn_tokens(self) -> Sequence[str]:
        if callable(self._tokens):
            return self._tokens()
        return self._tokens

    def steps(self, grid: Grid) -> Iterator[ResolutionStep]:
        groups = find_match_groups(grid, match_min=self.match_min)
        if not groups:
            raise NoMatchError("cascade requested on a grid without matches")
        depth = 0
        while groups:
            depth += 1
            if depth > self.max_depth:
                raise BoardStabilizationError(
                    f"cascade did not settle within {self.max_depth} steps"
                )
            matched = set().union(*groups)
            cleared = clear_positions(grid, matched)
            moves = apply_gravity(grid)
            new_tiles = refill_empty_cells(grid, self.spawn_tokens(), self.rng)
            yield ResolutionStep(
                depth=depth,
                cleared=tuple(ClearedCell(pos, token) for pos, token in cleared),
                groups=tuple(groups),
                gravity_moves=tuple(moves),
                new_tiles=tuple(new_tiles),
                grid=grid.snapshot(),
                large_match_min=self.large_match_min,
            )
            groups = find_match_groups(grid, match_min=self.match_min)

    def resolve(self, grid: Grid) -> CascadeResult:
        steps = tuple(self.steps(grid))
        return CascadeResult(steps=steps, grid=grid.snapshot())


class MatchResolutionSystem:
    """Resolves the board to stability after a committed swap or board change.

    Every step is announced on the bus in a fixed order: match found, match
    cleared, gravity applied, refill completed, cascade step. The engine
    state stays ``RESOLVING`` until ``cascade_complete`` is emitted.
    """

    def __init__(
        self,
        world: World,
        event_bus: EventBus,
        *,
        match_min: int = MATCH_MIN,
        large_match_min: int = LARGE_MATCH_MIN,
        max_depth: int = MAX_CASCADE_DEPTH,
        rng: Optional[random.Random] = None,
    ):
        self.world = world
        self.event_bus = event_bus
        self.match_min = match_min
        self.resolver = CascadeResolver(
            lambda: get_alphabet(self.world).spawnable_tokens(),
            rng or getattr(world, "random", None) or random.Random(),
            match_min=match_min,
            large_match_min=large_match_min,
            max_depth=max_depth,
        )
        self.last_steps: List[ResolutionStep] = []
        self.event_bus.subscribe(EVENT_CASCADE_REQUEST, self.on_cascade_request)
        self.event_bus.subscribe(EVENT_BOARD_CHANGED, self.on_board_changed)

    def on_cascade_request(self, sender, **kwargs):
        self.resolve(reason=kwargs.get("reason", "swap"))

    def on_board_changed(self, sender, **kwargs):
        state = get_or_create_engine_state(self.world)
        if not state.idle:
            return
        if not has_matches(get_grid(self.world), match_min=self.match_min):
            return
        self.resolve(reason=kwargs.get("reason", "board_changed"))

    def resolve(self, reason: str = "swap") -> List[ResolutionStep]:
        grid = get_grid(self.world)
        state = get_or_create_engine_state(self.world)
        state.phase = Phase.RESOLVING
        state.cascade_depth = 0
        steps: List[ResolutionStep] = []
        try:
            for step in self.resolver.steps(grid):
                state.cascade_depth = step.depth
                steps.append(step)
                self._announce(step, reason)
        finally:
            state.phase = Phase.IDLE
        self.last_steps = steps
        logger.debug("cascade (%s) settled after %d steps", reason, len(steps))
        self.event_bus.emit(EVENT_CASCADE_COMPLETE, depth=len(steps), grid=grid.snapshot(), reason=reason)
        return steps

    def _announce(self, step: ResolutionStep, reason: str) -> None:
        positions = list(step.positions)
        self.event_bus.emit(
            EVENT_MATCH_FOUND, positions=positions, size=len(positions), depth=step.depth, reason=reason
        )
        self.event_bus.emit(
            EVENT_MATCH_CLEARED,
            positions=positions,
            types=[(pos[0], pos[1], token) for pos, token in step.cleared],
            depth=step.depth,
        )
        self.event_bus.emit(EVENT_GRAVITY_APPLIED, moves=list(step.gravity_moves), depth=step.depth)
        self.event_bus.emit(
            EVENT_REFILL_COMPLETED, new_tiles=list(step.new_tiles), grid=step.grid, depth=step.depth
        )
        self.event_bus.emit(EVENT_CASCADE_STEP, depth=step.depth, step=step, reason=reason)
