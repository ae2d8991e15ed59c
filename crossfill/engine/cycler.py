"""Next/previous clue resolution for tab navigation."""

from __future__ import annotations

from typing import Iterable, Optional

from ..core.constants import Direction
from ..core.models import Clue


def cycle_clue(
    clues: Iterable[Clue],
    active_clue_id: int,
    direction: Direction,
    forward: bool = True,
) -> Optional[int]:
    """Return the neighbouring clue id of the same direction, wrapping around.

    Clue ids are scanned in ascending order (descending when ``forward`` is
    false) starting just past ``active_clue_id``; clues of the other direction
    are skipped. ``None`` means no other clue shares the direction.
    """

    same_direction = sorted(clue.id for clue in clues if clue.direction == direction)
    if not forward:
        same_direction.reverse()

    def is_past(clue_id: int) -> bool:
        return clue_id > active_clue_id if forward else clue_id < active_clue_id

    for clue_id in same_direction:
        if is_past(clue_id):
            return clue_id
    for clue_id in same_direction:
        if clue_id == active_clue_id:
            break
        return clue_id
    return None
