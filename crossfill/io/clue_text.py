"""Clue text rendering and cross-reference lookup."""

from __future__ import annotations

import re
from typing import Iterable, List, Optional

from ..core.constants import Direction
from ..core.models import Clue

CROSS_REFERENCE_RE = re.compile(r"(\d+)-(Across|Down)", re.IGNORECASE)


def render_clue_text(clue: Optional[Clue]) -> str:
    """Join the clue's text parts with single spaces.

    Each part contributes its plain text, else its formatted text, else an
    empty string.
    """

    if clue is None or not clue.text_parts:
        return ""
    return " ".join(part.render() for part in clue.text_parts)


def referenced_cells(clue: Optional[Clue], clues: Iterable[Clue]) -> List[int]:
    """Cells of every clue mentioned as ``<label>-Across``/``<label>-Down``."""

    text = render_clue_text(clue)
    if not text:
        return []
    by_key = {(c.label, c.direction): c for c in clues}
    cells: List[int] = []
    for label, direction in CROSS_REFERENCE_RE.findall(text):
        target = by_key.get((label, Direction.parse(direction)))
        if target is not None:
            cells.extend(target.cells)
    return cells


__all__ = ["render_clue_text", "referenced_cells", "CROSS_REFERENCE_RE"]
