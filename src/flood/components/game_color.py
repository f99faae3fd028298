"""Palette colours a cell can hold."""
from enum import Enum
from typing import Tuple


class GameColor(Enum):
    """Closed palette; equality is by member identity, never by RGB distance."""
    CORAL = "coral"
    AMBER = "amber"
    EMERALD = "emerald"
    SAPPHIRE = "sapphire"
    VIOLET = "violet"

    @property
    def light(self) -> Tuple[int, int, int]:
        return _LIGHT[self]

    @property
    def dark(self) -> Tuple[int, int, int]:
        return _DARK[self]


_LIGHT = {
    GameColor.CORAL:    (255, 107, 107),  # #FF6B6B
    GameColor.AMBER:    (255, 217, 61),   # #FFD93D
    GameColor.EMERALD:  (107, 203, 119),  # #6BCB77
    GameColor.SAPPHIRE: (77, 150, 255),   # #4D96FF
    GameColor.VIOLET:   (199, 125, 255),  # #C77DFF
}

_DARK = {
    GameColor.CORAL:    (192, 57, 43),    # #C0392B
    GameColor.AMBER:    (224, 168, 0),    # #E0A800
    GameColor.EMERALD:  (39, 174, 96),    # #27AE60
    GameColor.SAPPHIRE: (26, 107, 196),   # #1A6BC4
    GameColor.VIOLET:   (142, 68, 173),   # #8E44AD
}

ALL_COLORS: Tuple[GameColor, ...] = tuple(GameColor)


def palette_of(count: int) -> Tuple[GameColor, ...]:
    """First ``count`` palette colours in declaration order."""
    if count <= 0 or count > len(ALL_COLORS):
        raise ValueError(f"color count must be within 1..{len(ALL_COLORS)}, got {count}")
    return ALL_COLORS[:count]
