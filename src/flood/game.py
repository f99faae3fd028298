"""Headless entry point: one world, one bus and the systems that play it."""
from __future__ import annotations

import random
from typing import MutableMapping, Optional

from flood.ai.solver import solve_move_count
from flood.components.board import Board
from flood.components.game_color import GameColor
from flood.components.game_session import GameSession, GameStatus, MoveResult
from flood.components.score_state import ScoreState
from flood.constants import DAILY_EXTRA_MOVES, DEFAULT_MOVE_BUDGET
from flood.events.bus import EVENT_COLOR_SELECTED, EVENT_TICK, EventBus
from flood.factories import daily_challenge
from flood.factories.levels import generate_board_from_level, get_level
from flood.systems.flood_system import FloodSystem
from flood.systems.progress_system import ProgressSystem
from flood.systems.score_system import ScoreSystem
from flood.utils.session_state import get_board, get_or_create_score_state, get_session
from flood.utils.star_rating import calculate_stars
from flood.world import create_world


class FloodGame:
    def __init__(
        self,
        board: Board | None = None,
        *,
        total_moves: int = DEFAULT_MOVE_BUDGET,
        optimal_moves: int = 0,
        event_bus: EventBus | None = None,
        rng: random.Random | None = None,
        store: MutableMapping[str, str] | None = None,
    ) -> None:
        self.event_bus = event_bus or EventBus()
        self.world = create_world(
            board,
            total_moves=total_moves,
            optimal_moves=optimal_moves,
            rng=rng,
        )
        self.flood_system = FloodSystem(self.world, self.event_bus)
        self.score_system = ScoreSystem(self.world, self.event_bus)
        self.progress_system = ProgressSystem(self.world, self.event_bus, store=store)

    @classmethod
    def for_level(cls, level_id: int, **kwargs) -> "FloodGame":
        level = get_level(level_id)
        if level is None:
            raise ValueError(f"No level {level_id}")
        game = cls(
            generate_board_from_level(level),
            total_moves=level.move_budget,
            optimal_moves=level.optimal_moves,
            **kwargs,
        )
        game.progress_system.begin_level(level_id)
        return game

    @classmethod
    def for_daily(cls, when: daily_challenge.DateLike | None = None, **kwargs) -> "FloodGame":
        board = daily_challenge.generate_daily_board(when)
        optimal = solve_move_count(board)
        budget = optimal + DAILY_EXTRA_MOVES
        game = cls(
            board,
            total_moves=budget,
            optimal_moves=optimal,
            **kwargs,
        )
        game.progress_system.begin_daily(daily_challenge.date_string(when), budget)
        return game

    # Inbound ------------------------------------------------------------

    def perform_move(self, color: GameColor) -> Optional[MoveResult]:
        return self.flood_system.perform_move(color)

    def select_color(self, color: GameColor) -> None:
        """Route a selection through the bus, as an input layer would."""
        self.event_bus.emit(EVENT_COLOR_SELECTED, color=color)

    def reset(self, board: Board, total_moves: int, *, optimal_moves: int = 0) -> None:
        self.flood_system.reset(board, total_moves, optimal_moves=optimal_moves)

    def grant_extra_moves(self, amount: int) -> bool:
        return self.flood_system.grant_extra_moves(amount)

    def tick(self, dt: float) -> None:
        self.event_bus.emit(EVENT_TICK, dt=dt)

    # Outbound -----------------------------------------------------------

    @property
    def board(self) -> Board:
        return get_board(self.world)

    @property
    def session(self) -> GameSession:
        return get_session(self.world)

    @property
    def score(self) -> ScoreState:
        return get_or_create_score_state(self.world)

    @property
    def status(self) -> GameStatus:
        return self.session.status

    @property
    def stars(self) -> int:
        """Stars for the current result; 0 until the session is won."""
        session = self.session
        if session.status != GameStatus.WON:
            return 0
        return calculate_stars(session.moves_made, session.optimal_moves, session.max_combo)
