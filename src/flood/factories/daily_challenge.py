"""Daily challenge boards derived from the UTC calendar date.

Every player gets the same board on the same day: the date string is hashed
with 64-bit FNV-1a and the hash seeds board generation.
"""
from __future__ import annotations

import datetime
from typing import Union

from flood.ai.solver import solve_move_count
from flood.components.board import Board
from flood.components.game_color import ALL_COLORS
from flood.constants import (
    DAILY_EPOCH,
    DAILY_EXTRA_MOVES,
    DAILY_GRID_SIZE,
    FNV_OFFSET_BASIS,
    FNV_PRIME,
)
from flood.systems.board_ops import generate_board
from flood.utils.rng import MASK64

DateLike = Union[datetime.date, datetime.datetime, str]


def fnv1a_64(text: str) -> int:
    value = FNV_OFFSET_BASIS
    for byte in text.encode("utf-8"):
        value ^= byte
        value = (value * FNV_PRIME) & MASK64
    return value


def utc_date(when: DateLike | None = None) -> datetime.date:
    """Normalise ``when`` to a UTC calendar date; ``None`` means today."""
    if when is None:
        return datetime.datetime.now(datetime.timezone.utc).date()
    if isinstance(when, str):
        return datetime.date.fromisoformat(when)
    if isinstance(when, datetime.datetime):
        if when.tzinfo is not None:
            when = when.astimezone(datetime.timezone.utc)
        return when.date()
    return when


def date_string(when: DateLike | None = None) -> str:
    return utc_date(when).strftime("%Y-%m-%d")


def seed(when: DateLike | None = None) -> int:
    return fnv1a_64(date_string(when))


def challenge_number(when: DateLike | None = None) -> int:
    """Days since the epoch; the epoch itself is challenge 0."""
    return (utc_date(when) - DAILY_EPOCH).days


def generate_daily_board(when: DateLike | None = None) -> Board:
    return generate_board(DAILY_GRID_SIZE, ALL_COLORS, seed(when))


def move_budget(when: DateLike | None = None) -> int:
    return solve_move_count(generate_daily_board(when)) + DAILY_EXTRA_MOVES
