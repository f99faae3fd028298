import random

from esper import World

from flood.components.board import Board
from flood.components.game_color import ALL_COLORS
from flood.components.game_session import GameSession
from flood.components.score_state import ScoreState
from flood.constants import DEFAULT_GRID_SIZE, DEFAULT_MOVE_BUDGET
from flood.systems.board_ops import generate_board
from flood.utils.rng import SplitMix64


def create_world(
    board: Board | None = None,
    *,
    total_moves: int = DEFAULT_MOVE_BUDGET,
    optimal_moves: int = 0,
    rng: random.Random | None = None,
) -> World:
    """Build a world holding one session entity (Board, GameSession, ScoreState).

    ``world.random`` drives countdown scrambles and defaults to a seed-0
    SplitMix64 stream so that sessions replay the solver's estimate exactly.
    """
    world = World()
    setattr(world, "random", rng if rng is not None else SplitMix64(0))

    if board is None:
        board = generate_board(DEFAULT_GRID_SIZE, ALL_COLORS, seed=0)

    world.create_entity(
        board,
        GameSession(total_moves=total_moves, optimal_moves=optimal_moves),
        ScoreState(),
    )
    return world
