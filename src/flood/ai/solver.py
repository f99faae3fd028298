"""Greedy move-count estimator used for level calibration and star ratings."""
from __future__ import annotations

import logging
import random
from typing import List, Optional

from flood.components.board import Board
from flood.components.game_color import GameColor
from flood.systems.board_ops import (
    absorbed_count,
    cells_absorbed_by,
    flood,
    is_complete,
    region_color,
    tick_countdowns,
)
from flood.utils.rng import SplitMix64

logger = logging.getLogger(__name__)


def choose_greedy_color(board: Board) -> Optional[GameColor]:
    """Palette colour absorbing the most cells; earlier palette entries win ties."""
    current = region_color(board)
    best_color: Optional[GameColor] = None
    best_count = -1
    for color in board.palette:
        if color == current:
            continue
        count = absorbed_count(cells_absorbed_by(board, color))
        if count > best_count:
            best_color, best_count = color, count
    return best_color


def solve(board: Board, rng: Optional[random.Random] = None) -> List[GameColor]:
    """Play ``board`` greedily on a private copy and return the chosen colours.

    Stops after ``size * size`` moves even when the board is still incomplete.
    Countdowns tick after every move using ``rng`` (seed 0 when omitted), the
    same schedule a session with a default random stream follows.
    """
    scratch = board.clone()
    rng = rng if rng is not None else SplitMix64(0)
    cap = scratch.size * scratch.size
    moves: List[GameColor] = []
    while not is_complete(scratch) and len(moves) < cap:
        color = choose_greedy_color(scratch)
        if color is None:
            break
        flood(scratch, color)
        tick_countdowns(scratch, rng)
        moves.append(color)
    if not is_complete(scratch):
        logger.debug("Greedy solver stopped incomplete after %d moves", len(moves))
    return moves


def solve_move_count(board: Board) -> int:
    return len(solve(board))
