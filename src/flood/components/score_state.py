from __future__ import annotations

from dataclasses import dataclass

from flood.constants import END_BONUS_PER_MOVE, PERFECT_BONUS, POINTS_PER_CELL


def calculate_move_score(
    cells_absorbed: int,
    combo_multiplier: float = 1.0,
    cascade_multiplier: float = 1.0,
    bonus_multiplier: int = 1,
) -> int:
    return int(cells_absorbed * POINTS_PER_CELL * combo_multiplier * cascade_multiplier * bonus_multiplier)


def calculate_end_bonus(moves_remaining: int, is_optimal_plus_one: bool) -> int:
    bonus = max(0, moves_remaining) * END_BONUS_PER_MOVE
    if is_optimal_plus_one:
        bonus += PERFECT_BONUS
    return bonus


@dataclass(slots=True)
class ScoreState:
    """Running score plus the end-of-game tally still waiting to be counted up."""
    total_score: int = 0
    last_move_score: int = 0
    last_cells_absorbed: int = 0
    pending_tally_ticks: int = 0
    has_perfect_bonus: bool = False

    calculate_move_score = staticmethod(calculate_move_score)
    calculate_end_bonus = staticmethod(calculate_end_bonus)

    def record_move(self, cells_absorbed: int, score: int) -> None:
        self.last_cells_absorbed = cells_absorbed
        self.last_move_score = score
        self.total_score += score

    def record_end_bonus(self, moves_remaining: int, is_optimal_plus_one: bool) -> None:
        """Stage the end bonus; it reaches ``total_score`` through tally ticks."""
        self.pending_tally_ticks = max(0, moves_remaining)
        self.has_perfect_bonus = is_optimal_plus_one

    def apply_tally_tick(self) -> bool:
        """Count one remaining move into the score. False once nothing is pending."""
        if self.pending_tally_ticks <= 0:
            return False
        self.pending_tally_ticks -= 1
        self.total_score += END_BONUS_PER_MOVE
        return True

    def apply_perfect_bonus(self) -> bool:
        if not self.has_perfect_bonus:
            return False
        self.has_perfect_bonus = False
        self.total_score += PERFECT_BONUS
        return True

    def settle(self) -> int:
        """Apply everything still staged at once; returns the amount added."""
        before = self.total_score
        while self.apply_tally_tick():
            pass
        self.apply_perfect_bonus()
        return self.total_score - before

    @property
    def final_score(self) -> int:
        """Total once the staged tally has been counted in."""
        staged = self.pending_tally_ticks * END_BONUS_PER_MOVE
        if self.has_perfect_bonus:
            staged += PERFECT_BONUS
        return self.total_score + staged

    @property
    def is_tallying(self) -> bool:
        return self.pending_tally_ticks > 0 or self.has_perfect_bonus

    def reset(self) -> None:
        self.total_score = 0
        self.last_move_score = 0
        self.last_cells_absorbed = 0
        self.pending_tally_ticks = 0
        self.has_perfect_bonus = False
