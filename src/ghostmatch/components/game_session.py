"""Per-game progress: score, remaining moves and the final outcome."""
from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional

from ghostmatch.constants import INITIAL_MOVES, TARGET_SCORE


class Outcome(Enum):
    WON = auto()
    LOST = auto()


@dataclass(slots=True)
class GameSession:
    """Singleton component for the running game.

    ``initial_moves`` and ``target`` are level parameters supplied by the caller.
    """
    initial_moves: int = INITIAL_MOVES
    target: int = TARGET_SCORE
    score: int = 0
    moves_left: int = INITIAL_MOVES
    outcome: Optional[Outcome] = None

    def reset(self) -> None:
        self.score = 0
        self.moves_left = self.initial_moves
        self.outcome = None

    @property
    def over(self) -> bool:
        return self.outcome is not None
