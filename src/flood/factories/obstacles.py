"""Seeded obstacle placement with solver verification.

A placement is sampled, stamped onto the board the level seed generates and
handed to the greedy solver. Rejected placements are resampled; past half the
retry budget the request shrinks by one of each countable obstacle per retry.
When nothing passes, only the requested voids are kept.
"""
from __future__ import annotations

import logging
from typing import List, Optional, Set, Tuple

from flood.ai.solver import solve_move_count
from flood.components.cell import Direction, Position
from flood.components.game_color import palette_of
from flood.components.obstacle_config import (
    BonusPlacement,
    CountdownPlacement,
    IcePlacement,
    ObstacleConfig,
    PlacementRequest,
    PortalPairPlacement,
    WallPlacement,
)
from flood.constants import ORIGIN, PLACEMENT_MAX_RETRIES, PLACEMENT_SEED_OFFSET
from flood.systems.board_ops import apply_obstacle_config, generate_board
from flood.utils.rng import MASK64, SplitMix64

logger = logging.getLogger(__name__)


def place_obstacles(
    grid_size: int,
    color_count: int,
    seed: int,
    request: PlacementRequest,
) -> ObstacleConfig:
    rng = SplitMix64((seed + PLACEMENT_SEED_OFFSET) & MASK64)
    current = request
    for attempt in range(PLACEMENT_MAX_RETRIES):
        config = _sample_config(grid_size, current, rng)
        if is_solvable(grid_size, color_count, seed, config):
            if attempt:
                logger.debug("Obstacle placement for seed %d accepted on attempt %d", seed, attempt + 1)
            return config
        if attempt >= PLACEMENT_MAX_RETRIES // 2:
            current = current.degraded()
    logger.warning(
        "Obstacle placement for seed %d failed %d times; falling back to voids only",
        seed,
        PLACEMENT_MAX_RETRIES,
    )
    return ObstacleConfig(voids=tuple(request.voids))


def is_solvable(grid_size: int, color_count: int, seed: int, config: ObstacleConfig) -> bool:
    board = generate_board(grid_size, palette_of(color_count), seed)
    apply_obstacle_config(board, config)
    if not board.is_playable(ORIGIN):
        return False
    return solve_move_count(board) < grid_size * grid_size


def _sample_config(grid_size: int, request: PlacementRequest, rng: SplitMix64) -> ObstacleConfig:
    voids: Set[Position] = {Position(*p) for p in request.voids}
    origin = Position(*ORIGIN)

    pool: List[Position] = [
        Position(r, c)
        for r in range(grid_size)
        for c in range(grid_size)
        if Position(r, c) not in voids and Position(r, c) != origin
    ]
    rng.shuffle(pool)
    cursor = iter(pool)

    def take() -> Optional[Position]:
        return next(cursor, None)

    stones: List[Position] = []
    for _ in range(request.stone_count):
        pos = take()
        if pos is None:
            break
        stones.append(pos)

    ice: List[IcePlacement] = []
    for _ in range(request.ice_count):
        pos = take()
        if pos is None:
            break
        ice.append(IcePlacement(pos, request.ice_layers))

    countdowns: List[CountdownPlacement] = []
    for _ in range(request.countdown_count):
        pos = take()
        if pos is None:
            break
        countdowns.append(CountdownPlacement(pos, request.countdown_moves))

    portals: List[PortalPairPlacement] = []
    for pair_id in range(request.portal_pair_count):
        first, second = take(), take()
        if first is None or second is None:
            break
        portals.append(PortalPairPlacement(first, second, pair_id))

    bonuses: List[BonusPlacement] = []
    for _ in range(request.bonus_count):
        pos = take()
        if pos is None:
            break
        bonuses.append(BonusPlacement(pos, request.bonus_multiplier))

    candidates = _wall_candidates(grid_size, voids)
    rng.shuffle(candidates)
    walls = [WallPlacement(pos, direction) for pos, direction in candidates[: request.wall_count]]

    return ObstacleConfig(
        stones=tuple(stones),
        ice=tuple(ice),
        countdowns=tuple(countdowns),
        walls=tuple(walls),
        portals=tuple(portals),
        bonuses=tuple(bonuses),
        voids=tuple(request.voids),
    )


def _wall_candidates(grid_size: int, voids: Set[Position]) -> List[Tuple[Position, Direction]]:
    """South and east edges between non-void cells, skipping the origin's edges."""
    origin = Position(*ORIGIN)
    candidates: List[Tuple[Position, Direction]] = []
    for r in range(grid_size):
        for c in range(grid_size):
            pos = Position(r, c)
            if pos in voids or pos == origin:
                continue
            if r < grid_size - 1 and Position(r + 1, c) not in voids:
                candidates.append((pos, Direction.SOUTH))
            if c < grid_size - 1 and Position(r, c + 1) not in voids:
                candidates.append((pos, Direction.EAST))
    return candidates
