from blinker import Signal
from typing import Dict

class EventBus:
    """Simple event bus leveraging blinker Signal objects."""
    def __init__(self):
        self._signals: Dict[str, Signal] = {}

    def subscribe(self, name: str, fn):
        sig = self._signals.setdefault(name, Signal(name))
        # weak=False keeps bound methods of systems alive even when nobody holds the system.
        sig.connect(fn, weak=False)

    def unsubscribe(self, name: str, fn):
        sig = self._signals.get(name)
        if sig:
            sig.disconnect(fn)

    def emit(self, name: str, **payload):
        sig = self._signals.get(name)
        if sig:
            sig.send(self, **payload)


# ============================================================================
# SWAPS
# ============================================================================
EVENT_TILE_SWAP_REQUEST = "tile_swap_request"      # payload: src=(r,c), dst=(r,c)
EVENT_TILE_SWAP_VALID = "tile_swap_valid"          # payload: src=(r,c), dst=(r,c)
EVENT_TILE_SWAP_INVALID = "tile_swap_invalid"      # payload: src=(r,c), dst=(r,c), reason=str
EVENT_TILE_SWAP_DO = "tile_swap_do"                # payload: src=(r,c), dst=(r,c)
EVENT_TILE_SWAP_FINALIZE = "tile_swap_finalize"    # payload: src=(r,c), dst=(r,c)


# ============================================================================
# CASCADE
# ============================================================================
EVENT_CASCADE_REQUEST = "cascade_request"          # payload: reason=str
EVENT_MATCH_FOUND = "match_found"                  # payload: positions=[(r,c),...], size=int, depth=int
EVENT_MATCH_CLEARED = "match_cleared"              # payload: positions=[(r,c),...], types=[(r,c,token),...], depth=int
EVENT_GRAVITY_APPLIED = "gravity_applied"          # payload: moves=[GravityMove,...], depth=int
EVENT_REFILL_COMPLETED = "refill_completed"        # payload: new_tiles=[(r,c),...], grid=snapshot, depth=int
EVENT_CASCADE_STEP = "cascade_step"                # payload: depth=int, step=ResolutionStep, reason=str
EVENT_CASCADE_COMPLETE = "cascade_complete"        # payload: depth=int, grid=snapshot, reason=str


# ============================================================================
# BOARD
# ============================================================================
EVENT_BOARD_GENERATED = "board_generated"          # payload: grid=snapshot
EVENT_BOARD_CHANGED = "board_changed"              # payload: reason=str
EVENT_BOARD_RESHUFFLED = "board_reshuffled"        # payload: attempts=int, preserved=bool, grid=snapshot
EVENT_HINT_REQUEST = "hint_request"                # payload: None
EVENT_HINT_FOUND = "hint_found"                    # payload: src=(r,c), dst=(r,c)
EVENT_HINT_UNAVAILABLE = "hint_unavailable"        # payload: None


# ============================================================================
# SESSION
# ============================================================================
EVENT_NEW_GAME = "new_game"                        # payload: None
EVENT_SCORE_CHANGED = "score_changed"              # payload: score=int, delta=int, depth=int
EVENT_MOVES_CHANGED = "moves_changed"              # payload: moves_left=int
EVENT_GAME_WON = "game_won"                        # payload: score=int, target=int
EVENT_GAME_LOST = "game_lost"                      # payload: score=int, target=int
