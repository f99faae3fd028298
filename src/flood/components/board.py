from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Sequence, Set, Tuple

from flood.components.cell import (
    NORMAL,
    CellTag,
    Direction,
    Position,
    WallEdge,
    is_playable_tag,
    is_traversable_tag,
)
from flood.components.game_color import ALL_COLORS, GameColor


@dataclass(slots=True)
class Board:
    """Square grid of colours with obstacle tags and wall edges.

    The flood algorithms live in ``flood.systems.board_ops``; this component
    only owns the grids and their cell-level queries.
    """
    size: int
    colors: List[List[GameColor]]
    tags: Optional[List[List[CellTag]]] = None
    walls: Set[WallEdge] = field(default_factory=set)
    palette: Tuple[GameColor, ...] = ALL_COLORS

    def __post_init__(self) -> None:
        if self.size <= 0:
            raise ValueError(f"Board size must be positive, got {self.size}")
        if len(self.colors) != self.size or any(len(row) != self.size for row in self.colors):
            raise ValueError(f"Color grid must be {self.size}x{self.size}")
        if self.tags is None:
            self.tags = [[NORMAL] * self.size for _ in range(self.size)]
        elif len(self.tags) != self.size or any(len(row) != self.size for row in self.tags):
            raise ValueError(f"Tag grid must be {self.size}x{self.size}")
        self.palette = tuple(self.palette)
        if not self.palette:
            raise ValueError("Board palette must not be empty")

    @classmethod
    def from_rows(
        cls,
        rows: Sequence[Sequence[GameColor]],
        palette: Sequence[GameColor] = ALL_COLORS,
    ) -> "Board":
        if not rows:
            raise ValueError("Board needs at least one row")
        return cls(size=len(rows), colors=[list(row) for row in rows], palette=tuple(palette))

    # Cell access -----------------------------------------------------------

    def in_bounds(self, pos: Tuple[int, int]) -> bool:
        r, c = pos
        return 0 <= r < self.size and 0 <= c < self.size

    def color_at(self, pos: Tuple[int, int]) -> GameColor:
        r, c = pos
        return self.colors[r][c]

    def set_color(self, pos: Tuple[int, int], color: GameColor) -> None:
        r, c = pos
        self.colors[r][c] = color

    def tag_at(self, pos: Tuple[int, int]) -> CellTag:
        r, c = pos
        return self.tags[r][c]

    def set_tag(self, pos: Tuple[int, int], tag: CellTag) -> None:
        r, c = pos
        self.tags[r][c] = tag

    def is_playable(self, pos: Tuple[int, int]) -> bool:
        return is_playable_tag(self.tag_at(pos))

    def can_flood_traverse(self, pos: Tuple[int, int]) -> bool:
        return is_traversable_tag(self.tag_at(pos))

    def positions(self) -> Iterator[Position]:
        """Every position, row-major."""
        for r in range(self.size):
            for c in range(self.size):
                yield Position(r, c)

    # Walls -----------------------------------------------------------------

    def add_wall(self, pos: Tuple[int, int], direction: Direction) -> None:
        origin = Position(*pos)
        neighbor = origin.step(direction)
        if not self.in_bounds(origin) or not self.in_bounds(neighbor):
            return
        self.walls.add(WallEdge(origin, direction))
        self.walls.add(WallEdge(neighbor, direction.opposite))

    def has_wall(self, pos: Tuple[int, int], direction: Direction) -> bool:
        return WallEdge(Position(*pos), direction) in self.walls

    # Copies ----------------------------------------------------------------

    def clone(self) -> "Board":
        """Independent copy; tags are immutable so only the grids are rebuilt."""
        return Board(
            size=self.size,
            colors=[list(row) for row in self.colors],
            tags=[list(row) for row in self.tags],
            walls=set(self.walls),
            palette=self.palette,
        )

    def __deepcopy__(self, memo) -> "Board":
        return self.clone()
