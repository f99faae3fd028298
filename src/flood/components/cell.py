"""Grid coordinates, directions, wall edges and per-cell obstacle tags."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import NamedTuple, Tuple, Union


class Direction(Enum):
    NORTH = (-1, 0)
    SOUTH = (1, 0)
    WEST = (0, -1)
    EAST = (0, 1)

    @property
    def delta(self) -> Tuple[int, int]:
        return self.value

    @property
    def opposite(self) -> "Direction":
        return _OPPOSITES[self]


_OPPOSITES = {
    Direction.NORTH: Direction.SOUTH,
    Direction.SOUTH: Direction.NORTH,
    Direction.WEST: Direction.EAST,
    Direction.EAST: Direction.WEST,
}


class Position(NamedTuple):
    row: int
    col: int

    def step(self, direction: Direction) -> "Position":
        dr, dc = direction.delta
        return Position(self.row + dr, self.col + dc)


class WallEdge(NamedTuple):
    """Blocked edge between ``position`` and its neighbour in ``direction``."""
    position: Position
    direction: Direction


# Obstacle tags -------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Normal:
    pass


@dataclass(frozen=True, slots=True)
class Stone:
    pass


@dataclass(frozen=True, slots=True)
class Void:
    pass


@dataclass(frozen=True, slots=True)
class Ice:
    layers: int


@dataclass(frozen=True, slots=True)
class Countdown:
    moves_left: int


@dataclass(frozen=True, slots=True)
class Portal:
    pair_id: int


@dataclass(frozen=True, slots=True)
class Bonus:
    multiplier: int


CellTag = Union[Normal, Stone, Void, Ice, Countdown, Portal, Bonus]

NORMAL = Normal()
STONE = Stone()
VOID = Void()


def is_playable_tag(tag: CellTag) -> bool:
    match tag:
        case Stone() | Void():
            return False
        case _:
            return True


def is_traversable_tag(tag: CellTag) -> bool:
    match tag:
        case Stone() | Void():
            return False
        case Ice(layers=layers):
            return layers <= 0
        case Normal() | Countdown() | Portal() | Bonus():
            return True
    raise TypeError(f"Unknown cell tag {tag!r}")
