from typing import Optional, Tuple

from esper import World

from ghostmatch.components.game_session import GameSession
from ghostmatch.constants import MATCH_MIN
from ghostmatch.events.bus import (
    EVENT_TILE_SWAP_DO,
    EVENT_TILE_SWAP_INVALID,
    EVENT_TILE_SWAP_REQUEST,
    EVENT_TILE_SWAP_VALID,
    EventBus,
)
from ghostmatch.systems.board_ops import would_match
from ghostmatch.systems.world_queries import get_grid, get_or_create_engine_state

Position = Tuple[int, int]


class MatchSystem:
    """Validates swap requests against the committed grid without mutating it.

    A valid swap is announced and handed to the board with ``tile_swap_do``;
    an invalid one is reported with a reason and the grid stays as it was.
    Non-adjacent pairs are caller bugs and raise ``NotAdjacentError``.
    """

    def __init__(self, world: World, event_bus: EventBus, *, match_min: int = MATCH_MIN):
        self.world = world
        self.event_bus = event_bus
        self.match_min = match_min
        event_bus.subscribe(EVENT_TILE_SWAP_REQUEST, self.on_swap_request)

    def on_swap_request(self, sender, **kwargs):
        src = kwargs.get('src')
        dst = kwargs.get('dst')
        if not src or not dst:
            return
        self.request_swap(tuple(src), tuple(dst))

    def request_swap(self, src: Position, dst: Position) -> Tuple[bool, Optional[str]]:
        grid = get_grid(self.world)
        # Raises before anything else happens for diagonal or out-of-range pairs.
        valid = would_match(grid, src, dst, match_min=self.match_min)
        reason = None
        if not get_or_create_engine_state(self.world).idle:
            reason = 'busy'
        elif self._game_over():
            reason = 'game_over'
        elif not valid:
            reason = 'no_match'
        if reason is not None:
            self.event_bus.emit(EVENT_TILE_SWAP_INVALID, src=src, dst=dst, reason=reason)
            return False, reason
        self.event_bus.emit(EVENT_TILE_SWAP_VALID, src=src, dst=dst)
        self.event_bus.emit(EVENT_TILE_SWAP_DO, src=src, dst=dst)
        return True, None

    def _game_over(self) -> bool:
        for _, session in self.world.get_component(GameSession):
            return session.over
        return False
