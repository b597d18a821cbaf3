from esper import World

from ghostmatch.constants import MATCH_MIN
from ghostmatch.events.bus import EVENT_HINT_FOUND, EVENT_HINT_REQUEST, EVENT_HINT_UNAVAILABLE, EventBus
from ghostmatch.systems.board_ops import Swap, find_any_solving_move
from ghostmatch.systems.world_queries import get_grid


class HintSystem:
    """Answers hint requests with the first solving swap in scan order."""

    def __init__(self, world: World, event_bus: EventBus, *, match_min: int = MATCH_MIN):
        self.world = world
        self.event_bus = event_bus
        self.match_min = match_min
        self.event_bus.subscribe(EVENT_HINT_REQUEST, self.on_hint_request)

    def on_hint_request(self, sender, **kwargs):
        self.find_hint()

    def find_hint(self) -> Swap | None:
        move = find_any_solving_move(get_grid(self.world), match_min=self.match_min)
        if move is None:
            self.event_bus.emit(EVENT_HINT_UNAVAILABLE)
        else:
            self.event_bus.emit(EVENT_HINT_FOUND, src=move[0], dst=move[1])
        return move
