import logging
from functools import wraps
from blinker import Signal
from typing import Dict

logger = logging.getLogger(__name__)


class EventBus:
    """Simple event bus leveraging blinker Signal objects."""
    def __init__(self):
        self._signals: Dict[str, Signal] = {}

    def subscribe(self, name: str, fn, *, isolated: bool = False):
        sig = self._signals.setdefault(name, Signal(name))
        # Observers outside the engine (reporting, rendering) must never break a turn.
        if isolated:
            fn = _isolate(name, fn)
        # Use weak=False to retain strong reference to bound methods so systems not kept in a variable still receive events.
        sig.connect(fn, weak=False)

    def emit(self, name: str, **payload):
        sig = self._signals.get(name)
        if sig:
            sig.send(self, **payload)


def _isolate(name: str, fn):
    @wraps(fn)
    def receiver(sender, **payload):
        try:
            fn(sender, **payload)
        except Exception:
            logger.warning("Observer %r failed on %s", fn, name, exc_info=True)
    return receiver


# ============================================================================
# SYSTEM & TIMING
# ============================================================================
EVENT_TICK = "tick"                                # payload: dt=float


# ============================================================================
# INPUT & INTERACTION
# ============================================================================
EVENT_MOUSE_PRESS = "mouse_press"                  # payload: x, y, button
EVENT_TILE_CLICK = "tile_click"                    # payload: position=int
EVENT_TILE_SELECTED = "tile_selected"              # payload: position=int
EVENT_TILE_DESELECTED = "tile_deselected"          # payload: position=int, reason=str


# ============================================================================
# TURN & CASCADE
# ============================================================================
EVENT_TILE_SWAP_REQUEST = "tile_swap_request"      # payload: src=int, dst=int
EVENT_TURN_ACTION_STARTED = "turn_action_started"  # payload: src=int, dst=int
EVENT_BOARD_STAGE = "board_stage"                  # payload: stage=CascadeStage
EVENT_CASCADE_STEP = "cascade_step"                # payload: depth=int, positions=tuple
EVENT_TURN_RESOLVED = "turn_resolved"              # payload: summary=TurnSummary
EVENT_CASCADE_COMPLETE = "cascade_complete"        # payload: depth=int


# ============================================================================
# SCORE & SESSION
# ============================================================================
EVENT_SCORE_CHANGED = "score_changed"              # payload: snapshot=LedgerSnapshot, delta=int, summary=TurnSummary
EVENT_CLOCK_TICK = "clock_tick"                    # payload: elapsed_seconds=int
EVENT_PAUSE_CHANGED = "pause_changed"              # payload: paused=bool
EVENT_NEW_GAME = "new_game"                        # payload: restart=bool
EVENT_SESSION_EXIT = "session_exit"                # payload: snapshot=LedgerSnapshot
EVENT_HIGH_SCORE_CHANGED = "high_score_changed"    # payload: player_key=str, best_score=int
EVENT_SCORE_REPORTED = "score_reported"            # payload: report=ScoreReport
