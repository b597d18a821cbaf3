from __future__ import annotations

from typing import Type, TypeVar

from esper import World

from ghostmatch.components.engine_state import EngineState
from ghostmatch.components.game_session import GameSession
from ghostmatch.components.grid import Grid
from ghostmatch.components.scoring import ScoringConfig
from ghostmatch.components.token_alphabet import TokenAlphabet

C = TypeVar("C")


def _singleton(world: World, component_type: Type[C]) -> C:
    for _, component in world.get_component(component_type):
        return component
    raise RuntimeError(f"{component_type.__name__} not found in world")


def get_grid(world: World) -> Grid:
    return _singleton(world, Grid)


def get_alphabet(world: World) -> TokenAlphabet:
    return _singleton(world, TokenAlphabet)


def get_session(world: World) -> GameSession:
    return _singleton(world, GameSession)


def get_scoring(world: World) -> ScoringConfig:
    return _singleton(world, ScoringConfig)


def get_or_create_engine_state(world: World) -> EngineState:
    """Return the shared EngineState component, creating it if absent."""
    existing = list(world.get_component(EngineState))
    if existing:
        return existing[0][1]
    world.create_entity(EngineState())
    return list(world.get_component(EngineState))[0][1]
