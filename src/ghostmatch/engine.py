"""Engine facade wiring one world, one event bus and the board systems.

Each ``MatchEngine`` is fully independent; collaborators (renderers, audio,
score displays) subscribe to ``engine.event_bus`` for per-step events.
"""
from __future__ import annotations

import random
from typing import List, Optional, Sequence, Tuple

from ghostmatch.components.engine_state import EngineState
from ghostmatch.components.game_session import GameSession
from ghostmatch.components.grid import Grid, Position, Snapshot
from ghostmatch.components.resolution_step import ResolutionStep, SwapOutcome
from ghostmatch.config import EngineConfig
from ghostmatch.events.bus import (
    EVENT_BOARD_CHANGED,
    EVENT_BOARD_RESHUFFLED,
    EVENT_CASCADE_STEP,
    EVENT_NEW_GAME,
    EVENT_SCORE_CHANGED,
    EVENT_TILE_SWAP_INVALID,
    EVENT_TILE_SWAP_REQUEST,
    EventBus,
)
from ghostmatch.systems.board import BoardSystem
from ghostmatch.systems.board_ops import Swap, is_solvable, would_match
from ghostmatch.systems.game_flow_system import GameFlowSystem
from ghostmatch.systems.hint_system import HintSystem
from ghostmatch.systems.match import MatchSystem
from ghostmatch.systems.match_resolution import MatchResolutionSystem
from ghostmatch.systems.reshuffle import ReshuffleResult
from ghostmatch.systems.score_system import ScoreSystem
from ghostmatch.systems.stalemate_system import StalemateSystem
from ghostmatch.systems.world_queries import get_or_create_engine_state, get_session
from ghostmatch.world import create_world


class MatchEngine:
    def __init__(
        self,
        config: EngineConfig | None = None,
        *,
        rng: random.Random | None = None,
        seed: int | None = None,
        event_bus: EventBus | None = None,
    ) -> None:
        self.config = config or EngineConfig()
        if rng is None:
            rng = random.Random(seed)
        self.rng = rng
        self.event_bus = event_bus or EventBus()
        self.world = create_world(self.event_bus, self.config, rng=rng)
        cfg = self.config
        self.board = BoardSystem(
            self.world,
            self.event_bus,
            cfg.rows,
            cfg.cols,
            match_min=cfg.match_min,
            max_rounds=cfg.max_generate_rounds,
        )
        self.match = MatchSystem(self.world, self.event_bus, match_min=cfg.match_min)
        self.resolution = MatchResolutionSystem(
            self.world,
            self.event_bus,
            match_min=cfg.match_min,
            large_match_min=cfg.large_match_min,
            max_depth=cfg.max_cascade_depth,
        )
        self.scores = ScoreSystem(self.world, self.event_bus)
        self.stalemate = StalemateSystem(
            self.world,
            self.event_bus,
            match_min=cfg.match_min,
            max_attempts=cfg.max_reshuffle_attempts,
            max_rounds=cfg.max_generate_rounds,
        )
        self.hints = HintSystem(self.world, self.event_bus, match_min=cfg.match_min)
        self.flow = GameFlowSystem(self.world, self.event_bus)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def grid(self) -> Grid:
        return self.board.grid

    @property
    def session(self) -> GameSession:
        return get_session(self.world)

    @property
    def state(self) -> EngineState:
        return get_or_create_engine_state(self.world)

    def snapshot(self) -> Snapshot:
        return self.grid.snapshot()

    def would_match(self, a: Position, b: Position) -> bool:
        return would_match(self.grid, a, b, match_min=self.config.match_min)

    def is_solvable(self) -> bool:
        return is_solvable(self.grid, match_min=self.config.match_min)

    def hint(self) -> Optional[Swap]:
        return self.hints.find_hint()

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def swap(self, src: Position, dst: Position) -> SwapOutcome:
        """Validate, commit and fully resolve one player swap.

        Raises ``NotAdjacentError`` for a non-adjacent pair before the grid
        is touched.

        If the cascade hits ``max_cascade_depth`` the
        ``BoardStabilizationError`` propagates out of this call. By then the
        move has been spent, the steps already taken are on the grid, the
        grid still holds the matches of the step that was not run, no
        ``cascade_complete`` is emitted and the engine is back to idle. Call
        ``new_game`` or ``load_board`` to continue.
        """
        src, dst = tuple(src), tuple(dst)
        steps: List[ResolutionStep] = []
        score_deltas: List[int] = []
        invalid: List[str] = []
        reshuffles: List[bool] = []
        listeners: List[Tuple[str, object]] = [
            (EVENT_CASCADE_STEP, lambda sender, **k: steps.append(k["step"])),
            (EVENT_SCORE_CHANGED, lambda sender, **k: score_deltas.append(k.get("delta", 0))),
            (EVENT_TILE_SWAP_INVALID, lambda sender, **k: self._collect_rejection(invalid, src, dst, k)),
            (EVENT_BOARD_RESHUFFLED, lambda sender, **k: reshuffles.append(True)),
        ]
        for name, fn in listeners:
            self.event_bus.subscribe(name, fn)
        try:
            self.event_bus.emit(EVENT_TILE_SWAP_REQUEST, src=src, dst=dst)
        finally:
            for name, fn in listeners:
                self.event_bus.unsubscribe(name, fn)
        return SwapOutcome(
            src=src,
            dst=dst,
            valid=not invalid,
            reason=invalid[0] if invalid else None,
            steps=tuple(steps),
            score_delta=sum(score_deltas),
            reshuffled=bool(reshuffles),
            grid=self.snapshot(),
        )

    @staticmethod
    def _collect_rejection(reasons: List[str], src: Position, dst: Position, payload: dict) -> None:
        # Requests emitted by listeners during the cascade are not this swap.
        if (payload.get("src"), payload.get("dst")) == (src, dst):
            reasons.append(payload.get("reason"))

    def reshuffle(self) -> ReshuffleResult:
        """Reshuffle unconditionally, e.g. for a player-requested shuffle."""
        return self.stalemate.reshuffle(reason="requested")

    def load_board(self, rows: Sequence[Sequence[str]]) -> Snapshot:
        """Replace the board contents and settle them.

        Live matches are resolved as a cascade; a deadlocked result is
        reshuffled.
        """
        self.grid.load(rows)
        self.event_bus.emit(EVENT_BOARD_CHANGED, reason="load")
        return self.snapshot()

    def new_game(self) -> Snapshot:
        self.event_bus.emit(EVENT_NEW_GAME)
        return self.snapshot()
