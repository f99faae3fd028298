from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List

from flood.components.game_color import GameColor


@dataclass(frozen=True, slots=True)
class DailyResult:
    date_string: str
    moves_used: int
    move_budget: int
    stars_earned: int
    colors_used: List[GameColor] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date_string": self.date_string,
            "moves_used": self.moves_used,
            "move_budget": self.move_budget,
            "stars_earned": self.stars_earned,
            "colors_used": [color.value for color in self.colors_used],
        }

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "DailyResult":
        return cls(
            date_string=str(payload["date_string"]),
            moves_used=int(payload.get("moves_used", 0)),
            move_budget=int(payload.get("move_budget", 0)),
            stars_earned=int(payload.get("stars_earned", 0)),
            colors_used=[GameColor(value) for value in payload.get("colors_used", [])],
        )


@dataclass(slots=True)
class ProgressTracker:
    """Long-lived player progress; the session-independent half of the world."""

    best_stars: Dict[int, int] = field(default_factory=dict)
    best_scores: Dict[int, int] = field(default_factory=dict)
    highest_unlocked_level: int = 1
    current_streak: int = 0
    best_streak: int = 0
    last_daily_date: str | None = None
    daily_results: Dict[str, DailyResult] = field(default_factory=dict)

    # Level currently being played (not persisted)
    current_level_id: int | None = None
