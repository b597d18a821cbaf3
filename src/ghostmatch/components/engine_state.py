from dataclasses import dataclass
from enum import Enum, auto


class Phase(Enum):
    IDLE = auto()
    RESOLVING = auto()


@dataclass(slots=True)
class EngineState:
    """Tracks whether a cascade is running; swaps are only accepted while idle."""

    phase: Phase = Phase.IDLE
    cascade_depth: int = 0

    @property
    def idle(self) -> bool:
        return self.phase is Phase.IDLE
