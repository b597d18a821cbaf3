"""Session bookkeeping: moves, win/lose checks and new games."""
from __future__ import annotations

from esper import World

from ghostmatch.components.game_session import Outcome
from ghostmatch.events.bus import (
    EVENT_CASCADE_COMPLETE,
    EVENT_GAME_LOST,
    EVENT_GAME_WON,
    EVENT_MOVES_CHANGED,
    EVENT_NEW_GAME,
    EVENT_SCORE_CHANGED,
    EVENT_TILE_SWAP_VALID,
    EventBus,
)
from ghostmatch.systems.world_queries import get_session


class GameFlowSystem:
    """Counts moves and decides the outcome once a move's cascade settles.

    Reaching the target wins even on the last move; running out of moves
    below the target loses.
    """

    def __init__(self, world: World, event_bus: EventBus) -> None:
        self.world = world
        self.event_bus = event_bus
        self._move_pending = False
        self.event_bus.subscribe(EVENT_TILE_SWAP_VALID, self._on_swap_valid)
        self.event_bus.subscribe(EVENT_CASCADE_COMPLETE, self._on_cascade_complete)
        self.event_bus.subscribe(EVENT_NEW_GAME, self._on_new_game)

    # ------------------------------------------------------------------
    # Event handlers
    # ------------------------------------------------------------------

    def _on_swap_valid(self, sender, **payload) -> None:
        session = get_session(self.world)
        if session.over:
            return
        session.moves_left = max(0, session.moves_left - 1)
        self._move_pending = True
        self.event_bus.emit(EVENT_MOVES_CHANGED, moves_left=session.moves_left)

    def _on_cascade_complete(self, sender, **payload) -> None:
        if not self._move_pending:
            return
        self._move_pending = False
        self.check_game_over()

    def _on_new_game(self, sender, **payload) -> None:
        session = get_session(self.world)
        session.reset()
        self._move_pending = False
        self.event_bus.emit(EVENT_SCORE_CHANGED, score=session.score, delta=0, depth=0)
        self.event_bus.emit(EVENT_MOVES_CHANGED, moves_left=session.moves_left)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def check_game_over(self) -> Outcome | None:
        session = get_session(self.world)
        if session.over:
            return session.outcome
        if session.score >= session.target:
            session.outcome = Outcome.WON
            self.event_bus.emit(EVENT_GAME_WON, score=session.score, target=session.target)
        elif session.moves_left <= 0:
            session.outcome = Outcome.LOST
            self.event_bus.emit(EVENT_GAME_LOST, score=session.score, target=session.target)
        return session.outcome
