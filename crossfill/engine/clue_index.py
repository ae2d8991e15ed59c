"""Precomputed cell-to-clue lookups built once per puzzle."""

from __future__ import annotations

from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from ..core.constants import DIRECTION_ORDER, Direction
from ..core.exceptions import MalformedPuzzleError, UnknownClueError
from ..core.models import Clue, ClueGroup
from ..utils.logger import get_logger
from .grid import GridModel


LOGGER = get_logger(__name__)


class ClueIndex:
    """Maps cells to their Across/Down clue ids and clues to their cells.

    Construction validates the puzzle and raises :class:`MalformedPuzzleError`
    on the first inconsistency. With ``strict`` set, every playable cell must
    belong to exactly one Across and one Down clue.
    """

    def __init__(
        self,
        grid: GridModel,
        clues: Iterable[Clue],
        groups: Sequence[ClueGroup] = (),
        *,
        strict: bool = True,
    ) -> None:
        self.grid = grid
        self.strict = strict
        self._clues: Dict[int, Clue] = {}
        self._positions: Dict[int, Dict[int, int]] = {}
        self._by_cell: Dict[Direction, Dict[int, int]] = {d: {} for d in DIRECTION_ORDER}
        self.groups: Tuple[ClueGroup, ...] = tuple(groups)
        try:
            for clue in clues:
                self._register(clue)
            self._check_declared_ids()
            if strict:
                self._check_coverage()
            self._check_groups()
        except MalformedPuzzleError as exc:
            LOGGER.error("Puzzle rejected: %s", exc)
            raise
        LOGGER.debug(
            "Indexed %s clues over %s cells", len(self._clues), len(grid)
        )

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------
    def _register(self, clue: Clue) -> None:
        if clue.id in self._clues:
            raise MalformedPuzzleError(f"Duplicate clue id {clue.id}")
        if not clue.cells:
            raise MalformedPuzzleError(f"Clue {clue.id} has no cells")
        for index in clue.cells:
            if not isinstance(index, int) or not 0 <= index < len(self.grid):
                raise MalformedPuzzleError(
                    f"Clue {clue.id} references cell {index!r} outside the grid"
                )
            if self.grid.is_black(index):
                raise MalformedPuzzleError(f"Clue {clue.id} covers black cell {index}")
        self._check_axis(clue)

        lookup = self._by_cell[clue.direction]
        for index in clue.cells:
            owner = lookup.get(index)
            if owner is not None:
                raise MalformedPuzzleError(
                    f"Cell {index} belongs to {clue.direction.value} clues {owner} and {clue.id}"
                )
            lookup[index] = clue.id
        self._clues[clue.id] = clue
        self._positions[clue.id] = {cell: pos for pos, cell in enumerate(clue.cells)}

    def _check_axis(self, clue: Clue) -> None:
        step = 1 if clue.direction == Direction.ACROSS else self.grid.width
        for current, following in zip(clue.cells, clue.cells[1:]):
            same_row = current // self.grid.width == following // self.grid.width
            if following - current != step or (clue.direction == Direction.ACROSS and not same_row):
                raise MalformedPuzzleError(
                    f"{clue.direction.value} clue {clue.id} is not contiguous "
                    f"between cells {current} and {following}"
                )

    def _check_declared_ids(self) -> None:
        for index in range(len(self.grid)):
            cell = self.grid.cell(index)
            for direction in DIRECTION_ORDER:
                declared = cell.clue_id(direction)
                if declared is None:
                    continue
                actual = self._by_cell[direction].get(index)
                if declared != actual:
                    raise MalformedPuzzleError(
                        f"Cell {index} declares {direction.value} clue {declared} "
                        f"but clue cells place it in {actual}"
                    )

    def _check_coverage(self) -> None:
        for index in self.grid.playable_cells():
            for direction in DIRECTION_ORDER:
                if index not in self._by_cell[direction]:
                    raise MalformedPuzzleError(
                        f"Playable cell {index} has no {direction.value} clue"
                    )

    def _check_groups(self) -> None:
        for group in self.groups:
            for clue_id in group.clue_ids:
                if clue_id not in self._clues:
                    raise MalformedPuzzleError(
                        f"Clue list {group.name!r} references unknown clue {clue_id}"
                    )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def clue(self, clue_id: int) -> Clue:
        try:
            return self._clues[clue_id]
        except KeyError:
            raise UnknownClueError(clue_id) from None

    def clues(self) -> List[Clue]:
        return [self._clues[clue_id] for clue_id in sorted(self._clues)]

    def clue_for_cell(self, index: int, direction: Direction) -> Optional[int]:
        self.grid.check_index(index)
        return self._by_cell[Direction(direction)].get(index)

    def clues_for_cell(self, index: int) -> Mapping[Direction, int]:
        """Clue ids containing ``index``, Across before Down."""

        self.grid.check_index(index)
        found: Dict[Direction, int] = {}
        for direction in DIRECTION_ORDER:
            clue_id = self._by_cell[direction].get(index)
            if clue_id is not None:
                found[direction] = clue_id
        return found

    def cells_of(self, clue_id: int) -> Tuple[int, ...]:
        return self.clue(clue_id).cells

    def position_in_clue(self, clue_id: int, index: int) -> Optional[int]:
        if clue_id not in self._positions:
            raise UnknownClueError(clue_id)
        return self._positions[clue_id].get(index)

    def group_of(self, clue_id: int) -> Optional[ClueGroup]:
        for group in self.groups:
            if clue_id in group.clue_ids:
                return group
        return None
