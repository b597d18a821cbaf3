"""Ghostmatch: board-state and cascade-resolution engine for match-3 puzzles.

Modules:
- components/: plain dataclasses stored in the esper world (Grid, TokenAlphabet, ...)
- systems/board_ops.py: pure match detection, gravity, refill and swap prediction
- systems/: event-driven systems wired by :class:`ghostmatch.engine.MatchEngine`
- events/bus.py: blinker-backed EventBus and event names
"""
from ghostmatch.components.grid import EMPTY, Grid
from ghostmatch.config import EngineConfig, load_config
from ghostmatch.engine import MatchEngine
from ghostmatch.errors import (
    AlphabetError,
    BoardStabilizationError,
    ConfigError,
    NoMatchError,
    NotAdjacentError,
)

__all__ = [
    "EMPTY",
    "Grid",
    "EngineConfig",
    "load_config",
    "MatchEngine",
    "AlphabetError",
    "BoardStabilizationError",
    "ConfigError",
    "NoMatchError",
    "NotAdjacentError",
]
