import logging
import random
from typing import Optional

from esper import World

from ghostmatch.constants import MATCH_MIN, MAX_GENERATE_ROUNDS, MAX_RESHUFFLE_ATTEMPTS
from ghostmatch.events.bus import (
    EVENT_BOARD_CHANGED,
    EVENT_BOARD_GENERATED,
    EVENT_BOARD_RESHUFFLED,
    EVENT_CASCADE_COMPLETE,
    EventBus,
)
from ghostmatch.systems.board_ops import has_matches, is_solvable
from ghostmatch.systems.reshuffle import ReshuffleResult, reshuffle_board
from ghostmatch.systems.world_queries import get_alphabet, get_grid

logger = logging.getLogger(__name__)


class StalemateSystem:
    """Repairs deadlocked boards once the board settles.

    Runs after every cascade, after a fresh board is generated and after a
    board is loaded from outside. When no swap can make a match the tokens
    are reshuffled and ``board_reshuffled`` is emitted so the presentation
    layer can tell the player.
    """

    def __init__(
        self,
        world: World,
        event_bus: EventBus,
        *,
        match_min: int = MATCH_MIN,
        max_attempts: int = MAX_RESHUFFLE_ATTEMPTS,
        max_rounds: int = MAX_GENERATE_ROUNDS,
        rng: random.Random | None = None,
    ):
        self.world = world
        self.event_bus = event_bus
        self.match_min = match_min
        self.max_attempts = max_attempts
        self.max_rounds = max_rounds
        self.rng = rng or getattr(world, "random", None) or random.Random()
        self.last_result: Optional[ReshuffleResult] = None
        self.event_bus.subscribe(EVENT_CASCADE_COMPLETE, self.on_board_settled)
        self.event_bus.subscribe(EVENT_BOARD_GENERATED, self.on_board_settled)
        self.event_bus.subscribe(EVENT_BOARD_CHANGED, self.on_board_changed)

    def on_board_settled(self, sender, **kwargs):
        self.ensure_solvable(reason=kwargs.get("reason", "settled"))

    def on_board_changed(self, sender, **kwargs):
        # A board with live matches is resolved first; the cascade settles it.
        if has_matches(get_grid(self.world), match_min=self.match_min):
            return
        self.ensure_solvable(reason=kwargs.get("reason", "board_changed"))

    def ensure_solvable(self, reason: str = "stalemate") -> Optional[ReshuffleResult]:
        if is_solvable(get_grid(self.world), match_min=self.match_min):
            return None
        logger.debug("no solving move left (%s); reshuffling", reason)
        return self.reshuffle(reason=reason)

    def reshuffle(self, reason: str = "stalemate") -> ReshuffleResult:
        grid = get_grid(self.world)
        result = reshuffle_board(
            grid,
            get_alphabet(self.world).spawnable_tokens(),
            self.rng,
            match_min=self.match_min,
            max_attempts=self.max_attempts,
            max_rounds=self.max_rounds,
        )
        self.last_result = result
        self.event_bus.emit(
            EVENT_BOARD_RESHUFFLED,
            attempts=result.attempts,
            preserved=result.preserved,
            fallback=result.fallback,
            grid=grid.snapshot(),
            reason=reason,
        )
        return result
