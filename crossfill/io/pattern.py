"""Build puzzle documents from text block diagrams."""

from __future__ import annotations

from typing import Callable, Dict, List, Mapping, Optional, Sequence, Tuple

from ..core.constants import Direction
from ..core.exceptions import MalformedPuzzleError
from ..core.models import Cell, Clue, ClueGroup, ClueTextPart, Dimensions, PuzzleDocument

BLOCK = "#"


def document_from_pattern(
    rows: Sequence[str],
    clue_texts: Optional[Mapping[Tuple[str, Direction], str]] = None,
    min_length: int = 2,
) -> PuzzleDocument:
    """Number the grid and derive its Across and Down entries.

    ``rows`` holds one string per grid row; ``#`` marks a black square and
    any other character is that cell's answer. Entries shorter than
    ``min_length`` get no clue. Across clues come first, then Down clues,
    each in numbering order.
    """

    height = len(rows)
    width = len(rows[0]) if rows else 0
    if not height or any(len(row) != width for row in rows):
        raise MalformedPuzzleError("Pattern rows must be non-empty and equally long")
    texts = clue_texts or {}

    def is_open(r: int, c: int) -> bool:
        return 0 <= r < height and 0 <= c < width and rows[r][c] != BLOCK

    labels: Dict[int, str] = {}
    runs: Dict[Direction, List[Tuple[int, List[int]]]] = {Direction.ACROSS: [], Direction.DOWN: []}
    number = 0
    for r in range(height):
        for c in range(width):
            if not is_open(r, c):
                continue
            starts = []
            if not is_open(r, c - 1):
                starts.append((Direction.ACROSS, _collect(is_open, r, c, 0, 1, width)))
            if not is_open(r - 1, c):
                starts.append((Direction.DOWN, _collect(is_open, r, c, 1, 0, width)))
            starts = [(d, cells) for d, cells in starts if len(cells) >= min_length]
            if starts:
                number += 1
                labels[r * width + c] = str(number)
                for direction, cells in starts:
                    runs[direction].append((number, cells))

    clues: List[Clue] = []
    groups: List[ClueGroup] = []
    for direction in (Direction.ACROSS, Direction.DOWN):
        ids = []
        for label_number, cells in runs[direction]:
            label = str(label_number)
            text = texts.get((label, direction))
            clues.append(
                Clue(
                    id=len(clues),
                    direction=direction,
                    cells=tuple(cells),
                    label=label,
                    text_parts=(ClueTextPart(plain=text),) if text else (),
                )
            )
            ids.append(len(clues) - 1)
        groups.append(ClueGroup(name=direction.value, clue_ids=tuple(ids)))

    owners: Dict[Tuple[int, Direction], int] = {}
    for clue in clues:
        for index in clue.cells:
            owners[(index, clue.direction)] = clue.id

    cells = []
    for index in range(height * width):
        r, c = divmod(index, width)
        if not is_open(r, c):
            cells.append(Cell())
            continue
        cells.append(
            Cell(
                answer=rows[r][c],
                label=labels.get(index),
                across_clue_id=owners.get((index, Direction.ACROSS)),
                down_clue_id=owners.get((index, Direction.DOWN)),
            )
        )
    return PuzzleDocument(
        cells=tuple(cells),
        clues=tuple(clues),
        clue_groups=tuple(groups),
        dimensions=Dimensions(height=height, width=width),
    )


def _collect(is_open: Callable[[int, int], bool], row: int, col: int, dr: int, dc: int, width: int) -> List[int]:
    cells: List[int] = []
    r, c = row, col
    while is_open(r, c):
        cells.append(r * width + c)
        r += dr
        c += dc
    return cells
