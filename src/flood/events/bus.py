from blinker import Signal
from typing import Dict

class EventBus:
    """Simple event bus leveraging blinker Signal objects."""
    def __init__(self):
        self._signals: Dict[str, Signal] = {}

    def subscribe(self, name: str, fn):
        sig = self._signals.setdefault(name, Signal(name))
        # weak=False keeps bound methods of systems nobody else holds on to alive.
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
# SYSTEM & TIMING
# ============================================================================
EVENT_TICK = "tick"                                # payload: dt=float


# ============================================================================
# SESSION REQUESTS (inbound)
# ============================================================================
EVENT_COLOR_SELECTED = "color_selected"            # payload: color=GameColor
EVENT_SESSION_RESET_REQUEST = "session_reset_request"  # payload: board=Board, total_moves=int, optimal_moves=int
EVENT_EXTRA_MOVES_REQUEST = "extra_moves_request"  # payload: amount=int


# ============================================================================
# BOARD MECHANICS (outbound)
# ============================================================================
EVENT_FLOOD_WAVES = "flood_waves"                  # payload: color, waves=list[list[(r,c)]], previous_colors={(r,c): GameColor}
EVENT_BOARD_CHANGED = "board_changed"              # payload: reason=str, positions=list[(r,c)]
EVENT_ICE_CRACKED = "ice_cracked"                  # payload: positions=list[(r,c)]
EVENT_COUNTDOWN_EXPLODED = "countdown_exploded"    # payload: positions=list[(r,c)], scrambled={(r,c): GameColor}


# ============================================================================
# SESSION STATE (outbound)
# ============================================================================
EVENT_MOVE_RESOLVED = "move_resolved"              # payload: result=MoveResult
EVENT_MOVE_IGNORED = "move_ignored"                # payload: color, reason=str
EVENT_SESSION_RESET = "session_reset"              # payload: total_moves=int, optimal_moves=int
EVENT_EXTRA_MOVES_GRANTED = "extra_moves_granted"  # payload: amount=int, moves_remaining=int
EVENT_GAME_WON = "game_won"                        # payload: moves_made, moves_remaining, optimal_moves, max_combo
EVENT_GAME_LOST = "game_lost"                      # payload: moves_made, unflooded=int


# ============================================================================
# SCORE
# ============================================================================
EVENT_SCORE_CHANGED = "score_changed"              # payload: total=int, delta=int, reason=str
EVENT_TALLY_TICK = "tally_tick"                    # payload: remaining=int, total=int
EVENT_TALLY_COMPLETE = "tally_complete"            # payload: total=int, perfect=bool


# ============================================================================
# PROGRESS
# ============================================================================
EVENT_LEVEL_COMPLETED = "level_completed"          # payload: level_id, stars, score
EVENT_DAILY_COMPLETED = "daily_completed"          # payload: result=DailyResult
EVENT_PROGRESS_SAVED = "progress_saved"            # payload: key=str
