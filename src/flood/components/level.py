"""Level records produced by the level factories."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from flood.components.board import Board
from flood.components.obstacle_config import ObstacleConfig


class Tier(Enum):
    SPLASH = "splash"    # levels 1-50
    CURRENT = "current"  # levels 51-100


class Difficulty(Enum):
    """Extra moves granted on top of the solver estimate."""
    EASY = 8
    MEDIUM = 4
    HARD = 2
    EXPERT = 0

    @property
    def extra_moves(self) -> int:
        return self.value


@dataclass(frozen=True, slots=True)
class LevelData:
    id: int
    seed: int
    grid_size: int
    color_count: int
    optimal_moves: int
    move_budget: int
    tier: Tier
    obstacle_config: Optional[ObstacleConfig] = None


@dataclass(slots=True)
class GeneratedLevel:
    board: Board
    move_budget: int
    optimal_moves: int
    seed: int
    difficulty: Difficulty
