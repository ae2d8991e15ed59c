"""Cursor state machine: focus, direction, active clue and letter entry."""

from __future__ import annotations

from typing import Callable, Optional, Tuple

from ..core.constants import DIRECTION_ORDER, REBUS_MAX_LENGTH, ArrowKey, Direction
from ..core.exceptions import CrosswordError
from ..core.models import CursorState
from ..utils.logger import get_logger
from .answers import AnswerBuffer
from .clue_index import ClueIndex
from .cycler import cycle_clue
from .grid import GridModel


LOGGER = get_logger(__name__)

ScrollListener = Callable[[int], None]


class CursorEngine:
    """Sole owner of :class:`CursorState` and sole writer of the answers.

    Every transition runs to completion synchronously. Whenever a transition
    activates a clue the optional ``scroll_listener`` is asked to bring that
    clue into view; the request is best effort and its failures are logged
    and dropped.
    """

    def __init__(
        self,
        grid: GridModel,
        index: ClueIndex,
        answers: Optional[AnswerBuffer] = None,
        *,
        rebus_max_length: int = REBUS_MAX_LENGTH,
        scroll_listener: Optional[ScrollListener] = None,
    ) -> None:
        if rebus_max_length < 1:
            raise CrosswordError("rebus_max_length must be positive")
        self.grid = grid
        self.index = index
        self.answers = answers if answers is not None else AnswerBuffer(len(grid))
        if len(self.answers) != len(grid):
            raise CrosswordError("Answer buffer size does not match the grid")
        self.rebus_max_length = rebus_max_length
        self.scroll_listener = scroll_listener
        self.rebus = False
        self._state = CursorState()

    # ------------------------------------------------------------------
    # State access
    # ------------------------------------------------------------------
    @property
    def state(self) -> CursorState:
        return self._state

    @property
    def focused_cell(self) -> Optional[int]:
        return self._state.focused_cell

    @property
    def active_direction(self) -> Optional[Direction]:
        return self._state.active_direction

    @property
    def active_clue_id(self) -> Optional[int]:
        return self._state.active_clue_id

    def active_cells(self) -> Tuple[int, ...]:
        if self._state.active_clue_id is None:
            return ()
        return self.index.cells_of(self._state.active_clue_id)

    def seed(self) -> CursorState:
        """Focus the first playable cell on its Across clue, if there is one."""

        first = self.grid.first_playable()
        if first is not None:
            self.focus(first, Direction.ACROSS)
        return self._state

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------
    def focus(self, cell: int, preferred: Optional[Direction] = None) -> CursorState:
        """Focus ``cell`` and resolve the active clue, preferring ``preferred``."""

        self.grid.check_index(cell)
        direction, clue_id = self._resolve(cell, preferred)
        self._set_state(cell, direction, clue_id)
        return self._state

    def click(self, cell: int) -> CursorState:
        return self.focus(cell, self._state.active_direction)

    def focus_clue(self, clue_id: int) -> CursorState:
        """Make ``clue_id`` active and focus its first cell."""

        clue = self.index.clue(clue_id)
        self._set_state(clue.first_cell, clue.direction, clue.id)
        return self._state

    def arrow(self, key: ArrowKey) -> CursorState:
        """First press orients along the key's axis; the next press moves."""

        key = ArrowKey(key)
        cell = self._state.focused_cell
        if cell is None:
            return self._state
        implied = key.clue_direction
        if not self._is_oriented(cell, implied):
            LOGGER.debug("Arrow %s re-targets cell %s to %s", key.value, cell, implied.value)
            return self.focus(cell, implied)
        target = self.grid.neighbor(cell, key)
        if target is None:
            return self._state
        return self.focus(target, implied)

    def enter_letter(self, cell: int, raw: Optional[str]) -> CursorState:
        """Write canonicalised input at ``cell`` and auto-advance within the clue.

        The write always happens, even when the value is unchanged.
        """

        self.grid.check_index(cell)
        value = (raw or "").upper()
        if self.rebus:
            value = value[: self.rebus_max_length]
        else:
            value = value[:1]
        self.answers.write(cell, value)
        LOGGER.debug("Cell %s <- %r", cell, value)

        if self.rebus or not value:
            return self._state
        clue_id = self._state.active_clue_id
        if clue_id is None:
            return self._state
        cells = self.index.cells_of(clue_id)
        pos = self.index.position_in_clue(clue_id, cell)
        if pos is not None and pos < len(cells) - 1:
            return self.focus(cells[pos + 1], self._state.active_direction)
        return self._state

    def backspace(self, cell: int) -> CursorState:
        """Clear ``cell``, or step back and clear the previous open cell.

        Fallback order when ``cell`` is empty: previous cell of the active
        clue, nearest open cell to the left, nearest open cell earlier in
        reading order.
        """

        self.grid.check_index(cell)
        if self.answers.has_content(cell):
            self.answers.clear(cell)
            return self._state

        clue_id = self._state.active_clue_id
        if clue_id is not None:
            pos = self.index.position_in_clue(clue_id, cell)
            if pos is not None and pos > 0:
                previous = self.index.cells_of(clue_id)[pos - 1]
                self.answers.clear(previous)
                return self.focus(previous, self._state.active_direction)

        previous = self.grid.neighbor(cell, ArrowKey.LEFT)
        if previous is None:
            previous = self.grid.previous_open_cell(cell)
        if previous is None:
            return self._state
        self.answers.clear(previous)
        return self.focus(previous)

    def cycle_clue(self, forward: bool = True) -> CursorState:
        """Jump to the next (or previous) clue of the active direction."""

        clue_id = self._state.active_clue_id
        direction = self._state.active_direction
        if clue_id is None or direction is None:
            return self._state
        target = cycle_clue(self.index.clues(), clue_id, direction, forward)
        if target is None or target == clue_id:
            return self._state
        clue = self.index.clue(target)
        self._set_state(clue.first_cell, direction, target)
        return self._state

    def toggle_rebus(self) -> bool:
        self.rebus = not self.rebus
        LOGGER.debug("Rebus mode %s", "on" if self.rebus else "off")
        return self.rebus

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _resolve(
        self, cell: int, preferred: Optional[Direction]
    ) -> Tuple[Optional[Direction], Optional[int]]:
        if preferred is not None:
            clue_id = self.index.clue_for_cell(cell, preferred)
            if clue_id is not None:
                return Direction(preferred), clue_id
        for direction in DIRECTION_ORDER:
            clue_id = self.index.clue_for_cell(cell, direction)
            if clue_id is not None:
                return direction, clue_id
        return None, None

    def _is_oriented(self, cell: int, direction: Direction) -> bool:
        clue_id = self._state.active_clue_id
        if clue_id is None or self._state.active_direction != direction:
            return False
        return self.index.position_in_clue(clue_id, cell) is not None

    def _set_state(self, cell: int, direction: Optional[Direction], clue_id: Optional[int]) -> None:
        self._state = CursorState(
            focused_cell=cell,
            active_direction=direction,
            active_clue_id=clue_id,
        )
        LOGGER.debug(
            "Focus cell %s, %s clue %s",
            cell,
            direction.value if direction else None,
            clue_id,
        )
        if clue_id is not None:
            self._request_scroll(clue_id)

    def _request_scroll(self, clue_id: int) -> None:
        if self.scroll_listener is None:
            return
        try:
            self.scroll_listener(clue_id)
        except Exception as exc:
            LOGGER.warning("Scroll to clue %s failed: %s", clue_id, exc)
