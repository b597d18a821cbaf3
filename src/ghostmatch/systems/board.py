import logging
import random
from typing import Tuple

from esper import World

from ghostmatch.components.engine_state import Phase
from ghostmatch.components.grid import Grid
from ghostmatch.constants import BOARD_COLS, BOARD_ROWS, MATCH_MIN, MAX_GENERATE_ROUNDS
from ghostmatch.events.bus import (
    EVENT_BOARD_GENERATED,
    EVENT_CASCADE_REQUEST,
    EVENT_NEW_GAME,
    EVENT_TILE_SWAP_DO,
    EVENT_TILE_SWAP_FINALIZE,
    EventBus,
)
from ghostmatch.systems.board_generator import BoardGenerator
from ghostmatch.systems.board_ops import commit_swap
from ghostmatch.systems.world_queries import get_alphabet, get_or_create_engine_state

logger = logging.getLogger(__name__)

Position = Tuple[int, int]


class BoardSystem:
    """Owns the board entity: creates the grid, commits swaps, regenerates on new game."""

    def __init__(
        self,
        world: World,
        event_bus: EventBus,
        rows: int = BOARD_ROWS,
        cols: int = BOARD_COLS,
        *,
        match_min: int = MATCH_MIN,
        max_rounds: int = MAX_GENERATE_ROUNDS,
        rng: random.Random | None = None,
    ):
        self.world = world
        self.event_bus = event_bus
        self.rows = rows
        self.cols = cols
        self.match_min = match_min
        self.max_rounds = max_rounds
        self.rng = rng or getattr(world, "random", None) or random.Random()
        self.board_entity = self.world.create_entity(self._generator().generate_playable())
        self.event_bus.subscribe(EVENT_TILE_SWAP_DO, self.on_swap_do)
        self.event_bus.subscribe(EVENT_NEW_GAME, self.on_new_game)

    @property
    def grid(self) -> Grid:
        return self.world.component_for_entity(self.board_entity, Grid)

    def _generator(self) -> BoardGenerator:
        # Built per use so changes to the spawnable set apply to the next board.
        return BoardGenerator(
            get_alphabet(self.world).spawnable_tokens(),
            self.rows,
            self.cols,
            rng=self.rng,
            match_min=self.match_min,
            max_rounds=self.max_rounds,
        )

    def swap_tiles(self, a: Position, b: Position) -> None:
        commit_swap(self.grid, a, b)

    def regenerate(self) -> Grid:
        fresh = self._generator().generate_playable()
        self.grid.load(fresh.snapshot())
        logger.debug("regenerated %dx%d board", self.rows, self.cols)
        self.event_bus.emit(EVENT_BOARD_GENERATED, grid=self.grid.snapshot())
        return self.grid

    def on_swap_do(self, sender, **kwargs):
        src = kwargs.get('src')
        dst = kwargs.get('dst')
        if not src or not dst:
            return
        self.swap_tiles(src, dst)
        # Every finalize listener sees the landed swap before resolution starts,
        # and requests made from those listeners are rejected as busy.
        state = get_or_create_engine_state(self.world)
        state.phase = Phase.RESOLVING
        try:
            self.event_bus.emit(EVENT_TILE_SWAP_FINALIZE, src=src, dst=dst)
        finally:
            state.phase = Phase.IDLE
        self.event_bus.emit(EVENT_CASCADE_REQUEST, reason="swap")

    def on_new_game(self, sender, **kwargs):
        self.regenerate()
