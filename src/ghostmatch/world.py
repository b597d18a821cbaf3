import random

from esper import World

from ghostmatch.components.engine_state import EngineState
from ghostmatch.components.game_session import GameSession
from ghostmatch.components.scoring import ScoringConfig
from ghostmatch.components.token_alphabet import TokenAlphabet
from ghostmatch.config import EngineConfig
from ghostmatch.events.bus import EventBus


def create_world(
    event_bus: EventBus,
    config: EngineConfig | None = None,
    *,
    rng: random.Random | None = None,
) -> World:
    """Create a world holding the shared engine resources.

    The board entity itself is added by ``BoardSystem``; this only registers
    the alphabet, scoring weights, session and engine state singletons.
    """
    config = config or EngineConfig()
    world = World()
    setattr(world, "random", rng or random.Random())
    setattr(world, "config", config)

    world.create_entity(EngineState())
    world.create_entity(
        GameSession(
            initial_moves=config.initial_moves,
            target=config.target_score,
            moves_left=config.initial_moves,
        )
    )
    world.create_entity(config.scoring)
    world.create_entity(TokenAlphabet(tokens=list(config.tokens), spawnable=list(config.spawnable)))
    return world
