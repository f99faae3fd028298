from __future__ import annotations

from typing import Dict, List

from flood.components.board import Board
from flood.components.game_color import ALL_COLORS, GameColor
from flood.events.bus import EventBus

_LETTERS: Dict[str, GameColor] = {
    "C": GameColor.CORAL,
    "A": GameColor.AMBER,
    "E": GameColor.EMERALD,
    "S": GameColor.SAPPHIRE,
    "V": GameColor.VIOLET,
}


def board_from(*rows: str, palette=ALL_COLORS) -> Board:
    """Build a board from rows of colour initials, e.g. ``board_from("CA", "AA")``."""
    return Board.from_rows([[_LETTERS[ch] for ch in row] for row in rows], palette=palette)


def capture_events(bus: EventBus, name: str) -> List[dict]:
    """Subscribe to ``name`` and collect every payload emitted on it."""
    received: List[dict] = []
    bus.subscribe(name, lambda sender, **kwargs: received.append(kwargs))
    return received
