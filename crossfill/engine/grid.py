"""Read-only grid geometry with scanning neighbour lookups."""

from __future__ import annotations

import math
from typing import Iterator, Optional, Sequence, Tuple

from ..core.constants import AXIS_STEPS, ArrowKey
from ..core.exceptions import InvalidCellError, MalformedPuzzleError
from ..core.models import Cell, Dimensions


class GridModel:
    """Immutable view over the puzzle cells laid out in reading order.

    Grids are square unless explicit ``dimensions`` are supplied; the side
    length is then ``round(sqrt(len(cells)))``.
    """

    def __init__(self, cells: Sequence[Cell], dimensions: Optional[Dimensions] = None) -> None:
        self._cells: Tuple[Cell, ...] = tuple(cells)
        if dimensions is None:
            side = self.dimension_side()
            dimensions = Dimensions(height=side, width=side)
        if dimensions.height * dimensions.width != len(self._cells):
            raise MalformedPuzzleError(
                f"Grid of {len(self._cells)} cells does not fit "
                f"{dimensions.height}x{dimensions.width} dimensions"
            )
        self.height = dimensions.height
        self.width = dimensions.width

    def __len__(self) -> int:
        return len(self._cells)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def dimension_side(self) -> int:
        return int(round(math.sqrt(len(self._cells))))

    def cell(self, index: int) -> Cell:
        self.check_index(index)
        return self._cells[index]

    def is_black(self, index: int) -> bool:
        return self.cell(index).is_black

    def check_index(self, index: int) -> None:
        if not isinstance(index, int) or isinstance(index, bool) or not 0 <= index < len(self._cells):
            raise InvalidCellError(f"Cell index {index!r} outside grid of {len(self._cells)} cells")

    def contains(self, row: int, col: int) -> bool:
        return 0 <= row < self.height and 0 <= col < self.width

    def position(self, index: int) -> Tuple[int, int]:
        self.check_index(index)
        return divmod(index, self.width)

    def index_of(self, row: int, col: int) -> int:
        return row * self.width + col

    def playable_cells(self) -> Iterator[int]:
        for index, cell in enumerate(self._cells):
            if not cell.is_black:
                yield index

    def first_playable(self) -> Optional[int]:
        return next(self.playable_cells(), None)

    def neighbor(self, index: int, axis: ArrowKey) -> Optional[int]:
        """Return the nearest open cell beyond ``index`` along ``axis``.

        Black cells are skipped; ``None`` means the edge was reached first.
        """

        row, col = self.position(index)
        dr, dc = AXIS_STEPS[ArrowKey(axis)]
        r, c = row + dr, col + dc
        while self.contains(r, c):
            candidate = self.index_of(r, c)
            if not self._cells[candidate].is_black:
                return candidate
            r += dr
            c += dc
        return None

    def previous_open_cell(self, index: int) -> Optional[int]:
        """Scan backwards in raw reading order for the nearest open cell."""

        self.check_index(index)
        for candidate in range(index - 1, -1, -1):
            if not self._cells[candidate].is_black:
                return candidate
        return None
