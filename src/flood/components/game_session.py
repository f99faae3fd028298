"""Per-game session counters and the record of a resolved move."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Dict, List

from flood.components.cell import Position
from flood.components.game_color import GameColor


class GameStatus(Enum):
    PLAYING = auto()
    WON = auto()
    LOST = auto()


@dataclass(slots=True)
class GameSession:
    """Singleton component; the board lives beside it on the same entity."""
    total_moves: int
    moves_remaining: int = -1
    moves_made: int = 0
    status: GameStatus = GameStatus.PLAYING
    combo_count: int = 0
    max_combo: int = 0
    optimal_moves: int = 0
    color_history: List[GameColor] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.total_moves < 0:
            raise ValueError(f"total_moves must be non-negative, got {self.total_moves}")
        if self.moves_remaining < 0:
            self.moves_remaining = self.total_moves

    @property
    def is_playing(self) -> bool:
        return self.status == GameStatus.PLAYING

    @property
    def is_optimal_plus_one(self) -> bool:
        return self.moves_made <= self.optimal_moves + 1


@dataclass(slots=True)
class MoveResult:
    color: GameColor
    waves: List[List[Position]]
    previous_colors: Dict[Position, GameColor]
    absorbed_count: int
    cascade_multiplier: float
    combo_multiplier: int
    bonus_multiplier: int
    move_score: int
    status: GameStatus
    cracked: List[Position] = field(default_factory=list)
    exploded: List[Position] = field(default_factory=list)
    scrambled: Dict[Position, GameColor] = field(default_factory=dict)
