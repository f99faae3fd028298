"""Void masks for non-rectangular boards.

Every mask keeps the origin playable and 4-connected to the rest of the
shape; see :func:`ensure_connectivity`.
"""
from __future__ import annotations

import math
from collections import deque
from typing import Callable, Dict, List, Set

from flood.components.cell import Direction, Position
from flood.constants import ORIGIN


def rectangular(grid_size: int) -> List[Position]:
    return []


def l_shape(grid_size: int) -> List[Position]:
    """Top-right quadrant removed."""
    half = grid_size // 2
    voids = [Position(r, c) for r in range(half) for c in range(grid_size - half, grid_size)]
    return ensure_connectivity(voids, grid_size)


def donut(grid_size: int) -> List[Position]:
    """Hollow centre."""
    inset = grid_size // 3
    voids = [
        Position(r, c)
        for r in range(inset, grid_size - inset)
        for c in range(inset, grid_size - inset)
    ]
    return ensure_connectivity(voids, grid_size)


def diamond(grid_size: int) -> List[Position]:
    center = grid_size // 2
    voids = [
        Position(r, c)
        for r in range(grid_size)
        for c in range(grid_size)
        if abs(r - center) + abs(c - center) > center
    ]
    return ensure_connectivity(voids, grid_size)


def cross(grid_size: int) -> List[Position]:
    """Plus sign; the four corner blocks are removed."""
    arm = grid_size // 3
    voids = []
    for r in range(grid_size):
        for c in range(grid_size):
            in_vertical = arm <= c < grid_size - arm
            in_horizontal = arm <= r < grid_size - arm
            if not in_vertical and not in_horizontal:
                voids.append(Position(r, c))
    return ensure_connectivity(voids, grid_size)


def heart(grid_size: int) -> List[Position]:
    """Two circles on top of a downward triangle."""
    n = grid_size
    half = n // 2
    left_center = n // 4
    right_center = n - 1 - n // 4
    center_row = half // 2
    radius = half * 0.6
    mid = (n - 1) / 2.0
    voids = []
    for r in range(n):
        for c in range(n):
            if r < half:
                d_left = math.hypot(r - center_row, c - left_center)
                d_right = math.hypot(r - center_row, c - right_center)
                inside = d_left <= radius or d_right <= radius
            else:
                progress = (r - half) / (n - half)
                half_width = half * (1.0 - progress)
                inside = mid - half_width <= c <= mid + half_width
            if not inside:
                voids.append(Position(r, c))
    return ensure_connectivity(voids, grid_size)


def ensure_connectivity(voids: List[Position], grid_size: int) -> List[Position]:
    """Adjust ``voids`` so every non-void cell is reachable from the origin.

    The origin is always cleared. A corridor is then opened along row 0, one
    cell at a time, and column 0 is cleared after that. Any island still cut
    off is voided and appended. Surviving voids keep their input order.
    """
    void_set: Set[Position] = {Position(*p) for p in voids}
    origin = Position(*ORIGIN)
    void_set.discard(origin)

    def connected() -> bool:
        return len(_reachable(origin, void_set, grid_size)) >= grid_size * grid_size - len(void_set)

    if not connected():
        for c in range(1, grid_size):
            void_set.discard(Position(0, c))
            if connected():
                break
    if not connected():
        for r in range(1, grid_size):
            void_set.discard(Position(r, 0))
    kept = [Position(*p) for p in voids if Position(*p) in void_set]
    if connected():
        return kept
    reachable = _reachable(origin, void_set, grid_size)
    islands = [
        Position(r, c)
        for r in range(grid_size)
        for c in range(grid_size)
        if Position(r, c) not in void_set and Position(r, c) not in reachable
    ]
    return kept + islands


def _reachable(start: Position, void_set: Set[Position], grid_size: int) -> Set[Position]:
    if start in void_set:
        return set()
    visited = {start}
    queue = deque([start])
    while queue:
        current = queue.popleft()
        for direction in Direction:
            nxt = current.step(direction)
            if not (0 <= nxt.row < grid_size and 0 <= nxt.col < grid_size):
                continue
            if nxt in void_set or nxt in visited:
                continue
            visited.add(nxt)
            queue.append(nxt)
    return visited


SHAPES: Dict[str, Callable[[int], List[Position]]] = {
    "rectangular": rectangular,
    "l_shape": l_shape,
    "donut": donut,
    "diamond": diamond,
    "cross": cross,
    "heart": heart,
}
