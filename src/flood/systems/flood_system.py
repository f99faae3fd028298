from __future__ import annotations

import logging
import random
from typing import Optional

from esper import World

from flood.components.board import Board
from flood.components.game_color import GameColor
from flood.components.game_session import GameSession, GameStatus, MoveResult
from flood.components.score_state import ScoreState, calculate_move_score
from flood.constants import CASCADE_BASE, COMBO_MIN_MULTIPLIER, COMBO_THRESHOLD
from flood.events.bus import (
    EVENT_BOARD_CHANGED,
    EVENT_COLOR_SELECTED,
    EVENT_COUNTDOWN_EXPLODED,
    EVENT_EXTRA_MOVES_GRANTED,
    EVENT_EXTRA_MOVES_REQUEST,
    EVENT_FLOOD_WAVES,
    EVENT_GAME_LOST,
    EVENT_GAME_WON,
    EVENT_ICE_CRACKED,
    EVENT_MOVE_IGNORED,
    EVENT_MOVE_RESOLVED,
    EVENT_SCORE_CHANGED,
    EVENT_SESSION_RESET,
    EVENT_SESSION_RESET_REQUEST,
    EventBus,
)
from flood.systems.board_ops import (
    absorbed_count,
    bonus_multiplier,
    cells_absorbed_by,
    flood,
    flood_region,
    is_complete,
    region_color,
    tick_countdowns,
    unflooded_cell_count,
)
from flood.utils.rng import SplitMix64
from flood.utils.session_state import (
    get_board,
    get_or_create_score_state,
    get_session,
    get_session_entity,
)

logger = logging.getLogger(__name__)


class FloodSystem:
    """Applies colour selections to the session board and advances the session.

    Listens for ``EVENT_COLOR_SELECTED``, ``EVENT_SESSION_RESET_REQUEST`` and
    ``EVENT_EXTRA_MOVES_REQUEST``. Each resolved move emits the absorption
    waves before the board is touched, then board, score and status events.
    """

    def __init__(self, world: World, event_bus: EventBus, *, rng: random.Random | None = None) -> None:
        self.world = world
        self.event_bus = event_bus
        self.rng = rng or getattr(world, "random", None) or SplitMix64(0)
        self.event_bus.subscribe(EVENT_COLOR_SELECTED, self.on_color_selected)
        self.event_bus.subscribe(EVENT_SESSION_RESET_REQUEST, self.on_reset_request)
        self.event_bus.subscribe(EVENT_EXTRA_MOVES_REQUEST, self.on_extra_moves_request)

    # Event handlers -----------------------------------------------------

    def on_color_selected(self, sender, **kwargs) -> None:
        color = kwargs.get("color")
        if color is None:
            return
        self.perform_move(color)

    def on_reset_request(self, sender, **kwargs) -> None:
        board = kwargs.get("board")
        if board is None:
            return
        self.reset(
            board,
            kwargs.get("total_moves", 0),
            optimal_moves=kwargs.get("optimal_moves", 0),
        )

    def on_extra_moves_request(self, sender, **kwargs) -> None:
        self.grant_extra_moves(int(kwargs.get("amount", 0)))

    # Operations ---------------------------------------------------------

    def perform_move(self, color: GameColor) -> Optional[MoveResult]:
        session = get_session(self.world)
        board = get_board(self.world)
        score = get_or_create_score_state(self.world)

        if not session.is_playing:
            self.event_bus.emit(EVENT_MOVE_IGNORED, color=color, reason="game_over")
            return None
        if color == region_color(board):
            self.event_bus.emit(EVENT_MOVE_IGNORED, color=color, reason="same_color")
            return None

        waves = cells_absorbed_by(board, color)
        previous_colors = {pos: board.color_at(pos) for pos in sorted(flood_region(board))}
        self.event_bus.emit(
            EVENT_FLOOD_WAVES,
            color=color,
            waves=waves,
            previous_colors=dict(previous_colors),
        )

        outcome = flood(board, color)
        session.moves_remaining -= 1
        session.moves_made += 1
        session.color_history.append(color)

        absorbed = absorbed_count(waves)
        if absorbed >= COMBO_THRESHOLD:
            session.combo_count += 1
            session.max_combo = max(session.max_combo, session.combo_count)
        else:
            session.combo_count = 0

        combo_multiplier = session.combo_count if session.combo_count >= COMBO_MIN_MULTIPLIER else 1
        cascade_multiplier = CASCADE_BASE ** (len(waves) - 1) if len(waves) > 1 else 1.0
        bonus = bonus_multiplier(board, outcome.newly_absorbed)
        move_score = calculate_move_score(absorbed, combo_multiplier, cascade_multiplier, bonus)
        score.record_move(absorbed, move_score)

        countdowns = tick_countdowns(board, self.rng)

        if is_complete(board):
            session.status = GameStatus.WON
            score.record_end_bonus(session.moves_remaining, session.is_optimal_plus_one)
        elif session.moves_remaining <= 0:
            session.status = GameStatus.LOST

        result = MoveResult(
            color=color,
            waves=waves,
            previous_colors=previous_colors,
            absorbed_count=absorbed,
            cascade_multiplier=cascade_multiplier,
            combo_multiplier=combo_multiplier,
            bonus_multiplier=bonus,
            move_score=move_score,
            status=session.status,
            cracked=list(outcome.cracked),
            exploded=list(countdowns.exploded),
            scrambled=dict(countdowns.scrambled),
        )
        logger.debug(
            "Move %d: %s absorbed %d cells in %d waves for %d points",
            session.moves_made,
            color.value,
            absorbed,
            len(waves),
            move_score,
        )
        self._emit_move_events(session, score, result)
        return result

    def reset(self, board: Board, total_moves: int, *, optimal_moves: int = 0) -> None:
        """Replace the board and start a fresh session with ``total_moves``."""
        entity = get_session_entity(self.world)
        self.world.add_component(entity, board)
        self.world.add_component(
            entity,
            GameSession(total_moves=total_moves, optimal_moves=optimal_moves),
        )
        get_or_create_score_state(self.world).reset()
        self.event_bus.emit(EVENT_SESSION_RESET, total_moves=total_moves, optimal_moves=optimal_moves)
        self.event_bus.emit(
            EVENT_BOARD_CHANGED,
            reason="reset",
            positions=list(board.positions()),
        )

    def grant_extra_moves(self, amount: int) -> bool:
        """Add ``amount`` moves to the budget; revives a lost session.

        Ignored for non-positive amounts and for won sessions.
        """
        session = get_session(self.world)
        if amount <= 0 or session.status == GameStatus.WON:
            return False
        session.moves_remaining += amount
        session.total_moves += amount
        if session.status == GameStatus.LOST:
            session.status = GameStatus.PLAYING
            logger.info("Session revived with %d extra moves", amount)
        self.event_bus.emit(
            EVENT_EXTRA_MOVES_GRANTED,
            amount=amount,
            moves_remaining=session.moves_remaining,
        )
        return True

    # Helpers ------------------------------------------------------------

    def _emit_move_events(self, session: GameSession, score: ScoreState, result: MoveResult) -> None:
        changed = sorted(set(result.previous_colors) | set(result.scrambled))
        self.event_bus.emit(EVENT_BOARD_CHANGED, reason="flood", positions=changed)
        if result.cracked:
            self.event_bus.emit(EVENT_ICE_CRACKED, positions=list(result.cracked))
        if result.exploded:
            self.event_bus.emit(
                EVENT_COUNTDOWN_EXPLODED,
                positions=list(result.exploded),
                scrambled=dict(result.scrambled),
            )
        self.event_bus.emit(
            EVENT_SCORE_CHANGED,
            total=score.total_score,
            delta=result.move_score,
            reason="move",
        )
        self.event_bus.emit(EVENT_MOVE_RESOLVED, result=result)
        if session.status == GameStatus.WON:
            self.event_bus.emit(
                EVENT_GAME_WON,
                moves_made=session.moves_made,
                moves_remaining=session.moves_remaining,
                optimal_moves=session.optimal_moves,
                max_combo=session.max_combo,
            )
        elif session.status == GameStatus.LOST:
            self.event_bus.emit(
                EVENT_GAME_LOST,
                moves_made=session.moves_made,
                unflooded=unflooded_cell_count(get_board(self.world)),
            )
