"""Level construction: ad-hoc difficulty levels and the fixed 100-level table.

The table is built on first access and cached; every entry is a pure function
of its level number, so two processes always agree on it.
"""
from __future__ import annotations

import logging
from dataclasses import replace
from functools import lru_cache
from typing import List, Optional, Sequence, Tuple

from flood.ai.solver import solve_move_count
from flood.components.board import Board
from flood.components.cell import Position
from flood.components.game_color import ALL_COLORS, GameColor, palette_of
from flood.components.level import Difficulty, GeneratedLevel, LevelData, Tier
from flood.components.obstacle_config import ObstacleConfig, PlacementRequest
from flood.constants import (
    BONUS_SEED_OFFSET,
    BONUS_SEED_STRIDE,
    DEFAULT_COLOR_COUNT,
    DEFAULT_GRID_SIZE,
    LEVEL_COUNT,
    LEVEL_SEED_OFFSET,
    LEVEL_SEED_STRIDE,
    ONBOARDING_CONFIGS,
    SPLASH_TIER_LAST_LEVEL,
)
from flood.factories import board_shapes
from flood.factories.obstacles import place_obstacles
from flood.systems.board_ops import apply_obstacle_config, generate_board
from flood.utils.rng import SplitMix64

logger = logging.getLogger(__name__)


def generate_level(
    seed: int,
    difficulty: Difficulty = Difficulty.MEDIUM,
    *,
    size: int = DEFAULT_GRID_SIZE,
    colors: Sequence[GameColor] = ALL_COLORS,
) -> GeneratedLevel:
    board = generate_board(size, colors, seed)
    optimal = solve_move_count(board)
    return GeneratedLevel(
        board=board,
        move_budget=optimal + difficulty.extra_moves,
        optimal_moves=optimal,
        seed=seed,
        difficulty=difficulty,
    )


def generate_board_from_level(level: LevelData) -> Board:
    board = generate_board(level.grid_size, palette_of(level.color_count), level.seed)
    return apply_obstacle_config(board, level.obstacle_config)


# ---------------------------------------------------------------------------
# Level table
# ---------------------------------------------------------------------------

def level_seed(level_id: int) -> int:
    return level_id * LEVEL_SEED_STRIDE + LEVEL_SEED_OFFSET


def tier_for(level_id: int) -> Tier:
    return Tier.SPLASH if level_id <= SPLASH_TIER_LAST_LEVEL else Tier.CURRENT


def get_level(level_id: int) -> Optional[LevelData]:
    """1-based lookup; ``None`` outside the table."""
    if not 1 <= level_id <= LEVEL_COUNT:
        return None
    return all_levels()[level_id - 1]


@lru_cache(maxsize=1)
def all_levels() -> Tuple[LevelData, ...]:
    levels = tuple(build_level(level_id) for level_id in range(1, LEVEL_COUNT + 1))
    logger.info("Generated %d levels", len(levels))
    return levels


def build_level(level_id: int) -> LevelData:
    if level_id <= len(ONBOARDING_CONFIGS):
        return _onboarding_level(level_id)
    request, extra = level_schedule(level_id)
    if request is None:
        return _standard_level(level_id, extra, None)
    config = place_obstacles(DEFAULT_GRID_SIZE, DEFAULT_COLOR_COUNT, level_seed(level_id), request)
    return _standard_level(level_id, extra, config)


def bonus_for_level(level_id: int) -> Tuple[int, int]:
    """(count, multiplier) of bonus tiles; roughly a third of levels from 15 on get them."""
    if level_id < 15:
        return 0, 2
    roll = SplitMix64(level_id * BONUS_SEED_STRIDE + BONUS_SEED_OFFSET).next_u64() % 100
    if level_id <= 30:
        threshold = 30
    elif level_id <= 50:
        threshold = 35
    elif level_id <= 70:
        threshold = 40
    else:
        threshold = 45
    if roll >= threshold:
        return 0, 2
    multiplier = 3 if level_id >= 70 else 2
    count = 2 if level_id >= 80 else 1
    return count, multiplier


def level_schedule(level_id: int) -> Tuple[Optional[PlacementRequest], int]:
    """Obstacle request and extra-move allowance for a post-onboarding level."""
    bonus_count, bonus_multiplier = bonus_for_level(level_id)
    bonus = dict(bonus_count=bonus_count, bonus_multiplier=bonus_multiplier)

    if level_id <= 20:
        extra = 8 if level_id <= 10 else 6
        if bonus_count == 0:
            return None, extra
        return PlacementRequest(**bonus), extra

    if level_id <= 30:
        voids: List[Position] = []
        if level_id in (23, 27):
            voids = board_shapes.l_shape(DEFAULT_GRID_SIZE)
        elif level_id in (25, 29):
            voids = board_shapes.diamond(DEFAULT_GRID_SIZE)
        stones = 2 if level_id <= 24 else (3 if level_id <= 27 else 4)
        return PlacementRequest(stone_count=stones, voids=tuple(voids), **bonus), 6

    if level_id <= 40:
        return PlacementRequest(
            stone_count=1 if level_id <= 36 else 2,
            ice_count=2 if level_id <= 34 else 3,
            ice_layers=1 if level_id <= 35 else 2,
            **bonus,
        ), 4

    if level_id <= 50:
        boss = level_id == 50
        return PlacementRequest(
            stone_count=2 if level_id >= 45 else 1,
            ice_count=1 if level_id >= 47 else 0,
            ice_layers=1,
            countdown_count=3 if boss else (1 if level_id <= 44 else 2),
            countdown_moves=3 if boss else (5 if level_id <= 44 else 4),
            **bonus,
        ), 2 if boss else 4

    if level_id <= 65:
        return _wall_portal_request(level_id, bonus)

    return _expert_request(level_id, bonus)


def _wall_portal_request(level_id: int, bonus: dict) -> Tuple[PlacementRequest, int]:
    if level_id in (56, 62):
        return PlacementRequest(wall_count=1, **bonus), 5
    if level_id <= 54:
        walls, portals, stones = level_id - 49, 0, 1
    elif level_id in (55, 57, 58):
        walls, portals, stones = 2, 1, 1
    elif level_id <= 61:
        walls, portals, stones = 3, 1, 2
    else:
        walls, portals, stones = 4, 2, 2
    return PlacementRequest(
        stone_count=stones, wall_count=walls, portal_pair_count=portals, **bonus
    ), 3


def _expert_request(level_id: int, bonus: dict) -> Tuple[PlacementRequest, int]:
    if level_id == 100:
        return PlacementRequest(
            stone_count=3,
            ice_count=3,
            ice_layers=2,
            countdown_count=2,
            countdown_moves=3,
            wall_count=4,
            portal_pair_count=2,
            voids=tuple(board_shapes.donut(DEFAULT_GRID_SIZE)),
            **bonus,
        ), 1

    if level_id % 7 == 0 or level_id in (70, 80, 90):
        return PlacementRequest(stone_count=1, countdown_moves=5, wall_count=1, **bonus), 5

    band, within = divmod(level_id - 66, 5)
    base = max(1, 3 - band // 2)
    extra = base + 1 if within == 0 else base

    shapes = {
        72: board_shapes.diamond,
        78: board_shapes.cross,
        85: board_shapes.l_shape,
        92: board_shapes.heart,
        97: board_shapes.donut,
    }
    shape = shapes.get(level_id)
    voids = tuple(shape(DEFAULT_GRID_SIZE)) if shape else ()

    return PlacementRequest(
        stone_count=min(4, 1 + band // 2),
        ice_count=min(3, band // 2),
        ice_layers=2 if band >= 4 else 1,
        countdown_count=min(2, band // 3 + 1) if band >= 2 else 0,
        countdown_moves=3 if band >= 4 else 4,
        wall_count=min(4, 1 + band // 2),
        portal_pair_count=1 if band >= 3 else 0,
        voids=voids,
        **bonus,
    ), extra


def _onboarding_level(level_id: int) -> LevelData:
    grid_size, color_count, budget = ONBOARDING_CONFIGS[level_id - 1]
    seed = level_seed(level_id)
    board = generate_board(grid_size, palette_of(color_count), seed)
    return LevelData(
        id=level_id,
        seed=seed,
        grid_size=grid_size,
        color_count=color_count,
        optimal_moves=solve_move_count(board),
        move_budget=budget,
        tier=tier_for(level_id),
    )


def _standard_level(level_id: int, extra_moves: int, config: Optional[ObstacleConfig]) -> LevelData:
    draft = LevelData(
        id=level_id,
        seed=level_seed(level_id),
        grid_size=DEFAULT_GRID_SIZE,
        color_count=DEFAULT_COLOR_COUNT,
        optimal_moves=0,
        move_budget=0,
        tier=tier_for(level_id),
        obstacle_config=config,
    )
    optimal = solve_move_count(generate_board_from_level(draft))
    return replace(draft, optimal_moves=optimal, move_budget=optimal + extra_moves)
