from esper import World

from ghostmatch.components.resolution_step import ResolutionStep
from ghostmatch.events.bus import EVENT_CASCADE_STEP, EVENT_SCORE_CHANGED, EventBus
from ghostmatch.systems.world_queries import get_scoring, get_session


class ScoreSystem:
    """Adds each resolution step's score to the running session.

    Only cascades started by a player swap score; settling a loaded board
    does not.
    """

    def __init__(self, world: World, event_bus: EventBus):
        self.world = world
        self.event_bus = event_bus
        self.event_bus.subscribe(EVENT_CASCADE_STEP, self.on_cascade_step)

    def on_cascade_step(self, sender, **kwargs):
        step: ResolutionStep | None = kwargs.get("step")
        if step is None or kwargs.get("reason", "swap") != "swap":
            return
        delta = get_scoring(self.world).score_for(step)
        if delta == 0:
            return
        session = get_session(self.world)
        session.score += delta
        self.event_bus.emit(EVENT_SCORE_CHANGED, score=session.score, delta=delta, depth=step.depth)
