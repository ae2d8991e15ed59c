"""Data models for puzzle documents and cursor state."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import FrozenSet, Optional, Tuple

from .constants import Direction


@dataclass(frozen=True)
class ClueTextPart:
    """One fragment of a clue's text; either field may be absent."""

    plain: Optional[str] = None
    formatted: Optional[str] = None

    def render(self) -> str:
        return self.plain or self.formatted or ""


@dataclass(frozen=True)
class Cell:
    """A grid square. A cell without an answer is a black (blocked) square."""

    answer: Optional[str] = None
    label: Optional[str] = None
    across_clue_id: Optional[int] = None
    down_clue_id: Optional[int] = None

    @property
    def is_black(self) -> bool:
        return not self.answer

    def clue_id(self, direction: Direction) -> Optional[int]:
        if direction == Direction.ACROSS:
            return self.across_clue_id
        return self.down_clue_id


@dataclass(frozen=True)
class Clue:
    """A directional entry: its cells are listed in reading order."""

    id: int
    direction: Direction
    cells: Tuple[int, ...]
    label: Optional[str] = None
    text_parts: Tuple[ClueTextPart, ...] = ()

    @property
    def first_cell(self) -> int:
        return self.cells[0]


@dataclass(frozen=True)
class ClueGroup:
    """A named, ordered clue list such as the "Across" panel."""

    name: str
    clue_ids: Tuple[int, ...]


@dataclass(frozen=True)
class Dimensions:
    height: int
    width: int


@dataclass(frozen=True)
class PuzzleDocument:
    """Parsed puzzle body consumed by the engine."""

    cells: Tuple[Cell, ...]
    clues: Tuple[Clue, ...]
    clue_groups: Tuple[ClueGroup, ...] = ()
    dimensions: Optional[Dimensions] = None
    circled_cells: FrozenSet[int] = field(default_factory=frozenset)


@dataclass(frozen=True)
class CursorState:
    """Focused cell, active direction and active clue; all unset initially."""

    focused_cell: Optional[int] = None
    active_direction: Optional[Direction] = None
    active_clue_id: Optional[int] = None
