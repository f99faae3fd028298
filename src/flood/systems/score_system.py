from __future__ import annotations

from esper import World

from flood.constants import END_BONUS_PER_MOVE, PERFECT_BONUS, TALLY_TICK_INTERVAL
from flood.events.bus import (
    EVENT_SCORE_CHANGED,
    EVENT_SESSION_RESET,
    EVENT_TALLY_COMPLETE,
    EVENT_TALLY_TICK,
    EVENT_TICK,
    EventBus,
)
from flood.utils.session_state import get_or_create_score_state


class ScoreSystem:
    """Counts a staged end-of-game bonus into the score, one step per interval.

    Driven by ``EVENT_TICK`` so a presentation layer can animate the tally;
    :meth:`flush` applies whatever is left immediately.
    """

    def __init__(self, world: World, event_bus: EventBus, *, interval: float = TALLY_TICK_INTERVAL) -> None:
        self.world = world
        self.event_bus = event_bus
        self.interval = interval
        self._elapsed = 0.0
        self.event_bus.subscribe(EVENT_TICK, self.on_tick)
        self.event_bus.subscribe(EVENT_SESSION_RESET, self.on_session_reset)

    def on_tick(self, sender, **kwargs) -> None:
        score = get_or_create_score_state(self.world)
        if not score.is_tallying:
            self._elapsed = 0.0
            return
        self._elapsed += kwargs.get("dt", 1 / 60)
        while self._elapsed >= self.interval and score.is_tallying:
            self._elapsed -= self.interval
            self.step()

    def on_session_reset(self, sender, **kwargs) -> None:
        self._elapsed = 0.0

    def step(self) -> bool:
        """Apply one tally step; the perfect bonus lands after the last move tick."""
        score = get_or_create_score_state(self.world)
        if score.apply_tally_tick():
            self.event_bus.emit(EVENT_TALLY_TICK, remaining=score.pending_tally_ticks, total=score.total_score)
            self.event_bus.emit(
                EVENT_SCORE_CHANGED,
                total=score.total_score,
                delta=END_BONUS_PER_MOVE,
                reason="tally",
            )
            if not score.is_tallying:
                self.event_bus.emit(EVENT_TALLY_COMPLETE, total=score.total_score, perfect=False)
            return True
        if score.apply_perfect_bonus():
            self.event_bus.emit(
                EVENT_SCORE_CHANGED,
                total=score.total_score,
                delta=PERFECT_BONUS,
                reason="perfect",
            )
            self.event_bus.emit(EVENT_TALLY_COMPLETE, total=score.total_score, perfect=True)
            return True
        return False

    def flush(self) -> int:
        score = get_or_create_score_state(self.world)
        before = score.total_score
        while self.step():
            pass
        return score.total_score - before
