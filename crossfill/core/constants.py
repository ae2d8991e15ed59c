"""Shared constants and enumerations for the crossword cursor engine."""

from __future__ import annotations

from enum import Enum
from typing import Dict, Tuple


class Direction(str, Enum):
    """Clue directions, valued as they appear in puzzle documents."""

    ACROSS = "Across"
    DOWN = "Down"

    @classmethod
    def parse(cls, value: str) -> "Direction":
        for member in cls:
            if member.value.lower() == str(value).strip().lower():
                return member
        raise ValueError(f"Unknown clue direction: {value!r}")


class ArrowKey(str, Enum):
    """Axis directions used for grid navigation."""

    LEFT = "left"
    RIGHT = "right"
    UP = "up"
    DOWN = "down"

    @property
    def clue_direction(self) -> Direction:
        if self in (ArrowKey.LEFT, ArrowKey.RIGHT):
            return Direction.ACROSS
        return Direction.DOWN


# (row step, col step)
AXIS_STEPS: Dict[ArrowKey, Tuple[int, int]] = {
    ArrowKey.LEFT: (0, -1),
    ArrowKey.RIGHT: (0, 1),
    ArrowKey.UP: (-1, 0),
    ArrowKey.DOWN: (1, 0),
}

# Key names as delivered by keyboard events.
KEY_NAMES: Dict[str, ArrowKey] = {
    "ArrowLeft": ArrowKey.LEFT,
    "ArrowRight": ArrowKey.RIGHT,
    "ArrowUp": ArrowKey.UP,
    "ArrowDown": ArrowKey.DOWN,
}

DIRECTION_ORDER: Tuple[Direction, ...] = (Direction.ACROSS, Direction.DOWN)

REBUS_MAX_LENGTH = 10
BASE_FONT_PX = 18
MIN_FONT_PX = 10
