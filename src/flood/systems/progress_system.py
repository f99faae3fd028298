from __future__ import annotations

import datetime
import json
import logging
from typing import Any, Dict, MutableMapping

from esper import World

from flood.components.progress_tracker import DailyResult, ProgressTracker
from flood.constants import DAILY_STORE_KEY_PREFIX, LEVEL_COUNT, PROGRESS_STORE_KEY
from flood.events.bus import (
    EVENT_DAILY_COMPLETED,
    EVENT_GAME_LOST,
    EVENT_GAME_WON,
    EVENT_LEVEL_COMPLETED,
    EVENT_PROGRESS_SAVED,
    EventBus,
)
from flood.utils.session_state import get_or_create_score_state, get_session
from flood.utils.star_rating import calculate_stars

logger = logging.getLogger(__name__)


class ProgressSystem:
    """Records level results, best scores and the daily streak.

    Progress is written as JSON documents into ``store``, any mutable mapping
    of strings (an in-memory dict by default, or a
    :class:`flood.utils.json_store.JsonFileStore`).
    """

    def __init__(
        self,
        world: World,
        event_bus: EventBus,
        *,
        store: MutableMapping[str, str] | None = None,
        load_existing: bool = True,
    ) -> None:
        self.world = world
        self.event_bus = event_bus
        self.store: MutableMapping[str, str] = store if store is not None else {}
        self._tracker_entity = self._ensure_tracker_entity()
        self._daily: Dict[str, Any] | None = None

        self.event_bus.subscribe(EVENT_GAME_WON, self._on_game_won)
        self.event_bus.subscribe(EVENT_GAME_LOST, self._on_game_lost)

        if load_existing:
            self.load_progress()

    def _ensure_tracker_entity(self) -> int:
        existing = list(self.world.get_component(ProgressTracker))
        if existing:
            return existing[0][0]
        return self.world.create_entity(ProgressTracker())

    def tracker(self) -> ProgressTracker:
        return self.world.component_for_entity(self._tracker_entity, ProgressTracker)

    # Session context ----------------------------------------------------

    def begin_level(self, level_id: int) -> None:
        self.tracker().current_level_id = level_id
        self._daily = None

    def begin_daily(self, date_string: str, move_budget: int) -> None:
        self.tracker().current_level_id = None
        self._daily = {"date_string": date_string, "move_budget": move_budget}

    # Queries ------------------------------------------------------------

    def stars_for(self, level_id: int) -> int:
        return self.tracker().best_stars.get(level_id, 0)

    @property
    def total_stars(self) -> int:
        return sum(self.tracker().best_stars.values())

    def daily_result(self, date_string: str) -> DailyResult | None:
        tracker = self.tracker()
        if date_string in tracker.daily_results:
            return tracker.daily_results[date_string]
        raw = self.store.get(DAILY_STORE_KEY_PREFIX + date_string)
        if raw is None:
            return None
        result = DailyResult.from_dict(json.loads(raw))
        tracker.daily_results[date_string] = result
        return result

    # Recording ----------------------------------------------------------

    def record_level_result(self, level_id: int, stars: int, score: int) -> None:
        """Keep the best stars and score for ``level_id`` and unlock the next level."""
        tracker = self.tracker()
        if stars > tracker.best_stars.get(level_id, 0):
            tracker.best_stars[level_id] = stars
        if score > tracker.best_scores.get(level_id, 0):
            tracker.best_scores[level_id] = score
        tracker.highest_unlocked_level = max(
            tracker.highest_unlocked_level,
            min(LEVEL_COUNT, level_id + 1),
        )
        self.save_progress()
        self.event_bus.emit(EVENT_LEVEL_COMPLETED, level_id=level_id, stars=stars, score=score)

    def record_daily_result(self, result: DailyResult) -> None:
        """Keep the day's best result and extend the streak on a win the day after the last win.

        A replay only replaces the stored record when it earns more stars, or
        the same stars in fewer moves.
        """
        tracker = self.tracker()
        previous = self.daily_result(result.date_string)
        improved = previous is None or _is_better_daily(result, previous)
        if result.stars_earned > 0 and tracker.last_daily_date != result.date_string:
            if _is_next_day(tracker.last_daily_date, result.date_string):
                tracker.current_streak += 1
            else:
                tracker.current_streak = 1
            tracker.best_streak = max(tracker.best_streak, tracker.current_streak)
            tracker.last_daily_date = result.date_string
        if improved:
            tracker.daily_results[result.date_string] = result
            self.store[DAILY_STORE_KEY_PREFIX + result.date_string] = json.dumps(result.to_dict())
        self.save_progress()
        self.event_bus.emit(EVENT_DAILY_COMPLETED, result=result)

    # Persistence --------------------------------------------------------

    def load_progress(self) -> None:
        tracker = self.tracker()
        raw = self.store.get(PROGRESS_STORE_KEY)
        if raw is None:
            return
        try:
            payload = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Discarding unreadable progress record")
            return
        tracker.best_stars = {int(k): int(v) for k, v in payload.get("best_stars", {}).items()}
        tracker.best_scores = {int(k): int(v) for k, v in payload.get("best_scores", {}).items()}
        tracker.highest_unlocked_level = int(payload.get("highest_unlocked_level", 1))
        tracker.current_streak = int(payload.get("current_streak", 0))
        tracker.best_streak = int(payload.get("best_streak", 0))
        tracker.last_daily_date = payload.get("last_daily_date")

    def save_progress(self) -> None:
        tracker = self.tracker()
        self.store[PROGRESS_STORE_KEY] = json.dumps({
            "best_stars": {str(k): v for k, v in tracker.best_stars.items()},
            "best_scores": {str(k): v for k, v in tracker.best_scores.items()},
            "highest_unlocked_level": tracker.highest_unlocked_level,
            "current_streak": tracker.current_streak,
            "best_streak": tracker.best_streak,
            "last_daily_date": tracker.last_daily_date,
        })
        self.event_bus.emit(EVENT_PROGRESS_SAVED, key=PROGRESS_STORE_KEY)

    # Event handlers -----------------------------------------------------

    def _on_game_won(self, sender, **payload) -> None:
        session = get_session(self.world)
        stars = calculate_stars(session.moves_made, session.optimal_moves, session.max_combo)
        if self._daily is not None:
            self._record_daily(session, stars)
            return
        level_id = self.tracker().current_level_id
        if level_id is None:
            return
        score = get_or_create_score_state(self.world).final_score
        self.record_level_result(level_id, stars, score)

    def _on_game_lost(self, sender, **payload) -> None:
        if self._daily is not None:
            self._record_daily(get_session(self.world), 0)

    def _record_daily(self, session, stars: int) -> None:
        self.record_daily_result(
            DailyResult(
                date_string=self._daily["date_string"],
                moves_used=session.moves_made,
                move_budget=self._daily["move_budget"],
                stars_earned=stars,
                colors_used=list(session.color_history),
            )
        )


def _is_better_daily(candidate: DailyResult, current: DailyResult) -> bool:
    if candidate.stars_earned != current.stars_earned:
        return candidate.stars_earned > current.stars_earned
    return candidate.moves_used < current.moves_used


def _is_next_day(previous: str | None, current: str) -> bool:
    if previous is None:
        return False
    try:
        before = datetime.date.fromisoformat(previous)
        after = datetime.date.fromisoformat(current)
    except ValueError:
        return False
    return after - before == datetime.timedelta(days=1)
