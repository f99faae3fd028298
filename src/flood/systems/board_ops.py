"""Flood-fill rules over a :class:`Board`.

Every algorithm walks the board through :func:`neighbors`, so walls and
portal links are honoured identically by region queries, the mutating flood,
the wave preview and the ice pass.
"""
from __future__ import annotations

import logging
import random
from collections import deque
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence, Set

from flood.components.board import Board
from flood.components.cell import (
    NORMAL,
    STONE,
    VOID,
    Bonus,
    Countdown,
    Direction,
    Ice,
    Portal,
    Position,
)
from flood.components.game_color import ALL_COLORS, GameColor
from flood.components.obstacle_config import ObstacleConfig
from flood.constants import COUNTDOWN_BLAST_RADIUS, ORIGIN
from flood.utils.rng import SplitMix64

logger = logging.getLogger(__name__)

PortalLinks = Dict[Position, List[Position]]
Wave = List[Position]


@dataclass(slots=True)
class FloodOutcome:
    """What a committed flood changed, for event payloads."""
    region: Set[Position]
    absorbed: Set[Position]
    cracked: List[Position] = field(default_factory=list)
    defused: List[Position] = field(default_factory=list)

    @property
    def newly_absorbed(self) -> Set[Position]:
        return self.absorbed - self.region


@dataclass(slots=True)
class CountdownOutcome:
    exploded: List[Position] = field(default_factory=list)
    scrambled: Dict[Position, GameColor] = field(default_factory=dict)  # position -> colour before scramble


# ---------------------------------------------------------------------------
# Generation
# ---------------------------------------------------------------------------

def generate_board(size: int, colors: Sequence[GameColor] = ALL_COLORS, seed: int = 0) -> Board:
    """Fill a ``size`` x ``size`` board uniformly from ``colors``; pure in its arguments."""
    if size <= 0:
        raise ValueError(f"Board size must be positive, got {size}")
    palette = tuple(colors)
    if not palette:
        raise ValueError("Must have at least one color")
    rng = SplitMix64(seed)
    grid = [[palette[rng.randbelow(len(palette))] for _ in range(size)] for _ in range(size)]
    return Board(size=size, colors=grid, palette=palette)


def apply_obstacle_config(board: Board, config: Optional[ObstacleConfig]) -> Board:
    """Stamp ``config`` onto ``board`` in place and return it."""
    if config is None:
        return board
    for pos in config.voids:
        board.set_tag(pos, VOID)
    for pos in config.stones:
        board.set_tag(pos, STONE)
    for ice in config.ice:
        board.set_tag(ice.position, Ice(ice.layers))
    for countdown in config.countdowns:
        board.set_tag(countdown.position, Countdown(countdown.moves_left))
    for portal in config.portals:
        board.set_tag(portal.first, Portal(portal.pair_id))
        board.set_tag(portal.second, Portal(portal.pair_id))
    for bonus in config.bonuses:
        board.set_tag(bonus.position, Bonus(bonus.multiplier))
    for wall in config.walls:
        board.add_wall(wall.position, wall.direction)
    return board


# ---------------------------------------------------------------------------
# Adjacency
# ---------------------------------------------------------------------------

def portal_links(board: Board) -> PortalLinks:
    by_pair: Dict[int, List[Position]] = {}
    for pos in board.positions():
        tag = board.tag_at(pos)
        if isinstance(tag, Portal):
            by_pair.setdefault(tag.pair_id, []).append(pos)
    links: PortalLinks = {}
    for members in by_pair.values():
        for pos in members:
            links[pos] = [other for other in members if other != pos]
    return links


def neighbors(board: Board, pos: Position, links: Optional[PortalLinks] = None) -> List[Position]:
    """In-bounds, unwalled orthogonal neighbours plus any linked portal partners."""
    pos = Position(*pos)
    walled = bool(board.walls)
    result: List[Position] = []
    for direction in Direction:
        nxt = pos.step(direction)
        if not board.in_bounds(nxt):
            continue
        if walled and board.has_wall(pos, direction):
            continue
        result.append(nxt)
    if links is None:
        links = portal_links(board)
    result.extend(links.get(pos, ()))
    return result


def _expand(
    board: Board,
    seeds: Iterable[Position],
    color: GameColor,
    visited: Set[Position],
    links: PortalLinks,
) -> Set[Position]:
    """BFS from ``seeds`` over traversable cells of ``color``; grows ``visited`` in place."""
    queue = deque(seeds)
    while queue:
        current = queue.popleft()
        for nxt in neighbors(board, current, links):
            if nxt in visited:
                continue
            if board.can_flood_traverse(nxt) and board.color_at(nxt) == color:
                visited.add(nxt)
                queue.append(nxt)
    return visited


# ---------------------------------------------------------------------------
# Region queries
# ---------------------------------------------------------------------------

def flood_region(board: Board, links: Optional[PortalLinks] = None) -> Set[Position]:
    origin = Position(*ORIGIN)
    if not board.can_flood_traverse(origin):
        return set()
    if links is None:
        links = portal_links(board)
    return _expand(board, [origin], board.color_at(origin), {origin}, links)


def region_color(board: Board) -> GameColor:
    return board.color_at(ORIGIN)


def is_complete(board: Board) -> bool:
    target = board.color_at(ORIGIN)
    return all(
        board.color_at(pos) == target
        for pos in board.positions()
        if board.can_flood_traverse(pos)
    )


def playable_cell_count(board: Board) -> int:
    return sum(1 for pos in board.positions() if board.is_playable(pos))


def unflooded_cell_count(board: Board) -> int:
    return max(0, playable_cell_count(board) - len(flood_region(board)))


def flood_completion_percentage(board: Board) -> float:
    playable = playable_cell_count(board)
    if playable == 0:
        return 1.0
    return min(1.0, len(flood_region(board)) / playable)


# ---------------------------------------------------------------------------
# Waves
# ---------------------------------------------------------------------------

def cells_absorbed_by(board: Board, new_color: GameColor) -> List[Wave]:
    """BFS layers of cells ``flood(new_color)`` would absorb, without mutating.

    Wave 0 touches the current region; wave k+1 touches wave k. Each wave is
    sorted row-major. Empty when nothing would be absorbed.
    """
    if new_color == region_color(board):
        return []
    links = portal_links(board)
    region = flood_region(board, links)
    visited = set(region)
    frontier: Iterable[Position] = sorted(region)
    waves: List[Wave] = []
    while True:
        wave: Set[Position] = set()
        for current in frontier:
            for nxt in neighbors(board, current, links):
                if nxt in visited:
                    continue
                if board.can_flood_traverse(nxt) and board.color_at(nxt) == new_color:
                    visited.add(nxt)
                    wave.add(nxt)
        if not wave:
            break
        ordered = sorted(wave)
        waves.append(ordered)
        frontier = ordered
    return waves


def cascade_waves(board: Board, new_color: GameColor) -> List[Wave]:
    """Waves beyond the first; cells reached only through earlier absorptions."""
    return cells_absorbed_by(board, new_color)[1:]


def absorbed_count(waves: Sequence[Wave]) -> int:
    return sum(len(wave) for wave in waves)


# ---------------------------------------------------------------------------
# Mutation
# ---------------------------------------------------------------------------

def flood(board: Board, new_color: GameColor) -> FloodOutcome:
    """Recolour the region to ``new_color`` and absorb matching neighbours in place."""
    links = portal_links(board)
    region = flood_region(board, links)
    for pos in region:
        board.set_color(pos, new_color)

    absorbed = _expand(board, sorted(region), new_color, set(region), links)
    for pos in absorbed:
        board.set_color(pos, new_color)

    outcome = FloodOutcome(region=region, absorbed=absorbed)
    for pos in sorted(absorbed):
        if isinstance(board.tag_at(pos), Countdown):
            board.set_tag(pos, NORMAL)
            outcome.defused.append(pos)

    seen: Set[Position] = set()
    for pos in sorted(absorbed):
        for nxt in neighbors(board, pos, links):
            if nxt in absorbed or nxt in seen:
                continue
            seen.add(nxt)
            tag = board.tag_at(nxt)
            if isinstance(tag, Ice):
                board.set_tag(nxt, Ice(tag.layers - 1) if tag.layers > 1 else NORMAL)
                outcome.cracked.append(nxt)
    return outcome


def would_complete(board: Board, new_color: GameColor) -> bool:
    scratch = board.clone()
    flood(scratch, new_color)
    return is_complete(scratch)


def bonus_multiplier(board: Board, positions: Iterable[Position]) -> int:
    """Largest bonus multiplier among ``positions``; 1 when none carry a bonus."""
    best = 1
    for pos in positions:
        tag = board.tag_at(pos)
        if isinstance(tag, Bonus) and tag.multiplier > best:
            best = tag.multiplier
    return best


def tick_countdowns(board: Board, rng: random.Random) -> CountdownOutcome:
    """Advance every countdown by one move; expired timers scramble their surroundings.

    Cells inside the current flood region are never scrambled. Each scrambled
    cell receives a palette colour different from the one it held.
    """
    outcome = CountdownOutcome()
    for pos in board.positions():
        tag = board.tag_at(pos)
        if not isinstance(tag, Countdown):
            continue
        remaining = tag.moves_left - 1
        if remaining <= 0:
            board.set_tag(pos, NORMAL)
            outcome.exploded.append(pos)
        else:
            board.set_tag(pos, Countdown(remaining))
    if not outcome.exploded:
        return outcome

    region = flood_region(board)
    for center in outcome.exploded:
        for dr in range(-COUNTDOWN_BLAST_RADIUS, COUNTDOWN_BLAST_RADIUS + 1):
            for dc in range(-COUNTDOWN_BLAST_RADIUS, COUNTDOWN_BLAST_RADIUS + 1):
                target = Position(center.row + dr, center.col + dc)
                if not board.in_bounds(target) or target in region:
                    continue
                if not board.can_flood_traverse(target):
                    continue
                current = board.color_at(target)
                choices = [color for color in board.palette if color != current]
                if not choices:
                    continue
                outcome.scrambled.setdefault(target, current)
                board.set_color(target, rng.choice(choices))
    logger.debug("Countdowns exploded at %s, scrambled %d cells", outcome.exploded, len(outcome.scrambled))
    return outcome
