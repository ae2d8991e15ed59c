"""Puzzle-solving session: the event surface consumed by a front end."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple

from ..core.constants import BASE_FONT_PX, KEY_NAMES, MIN_FONT_PX, REBUS_MAX_LENGTH, ArrowKey
from ..core.models import CursorState, PuzzleDocument
from ..io.clue_text import referenced_cells, render_clue_text
from ..utils.logger import get_logger
from .answers import AnswerBuffer
from .clue_index import ClueIndex
from .cursor import CursorEngine, ScrollListener
from .grid import GridModel


LOGGER = get_logger(__name__)


@dataclass
class SessionConfig:
    """Configuration values owned by the surrounding application."""

    rebus_max_length: int = REBUS_MAX_LENGTH
    seed_focus: bool = False
    strict_clue_coverage: bool = True
    base_font_px: int = BASE_FONT_PX
    min_font_px: int = MIN_FONT_PX
    reveal: bool = False


@dataclass(frozen=True)
class KeyEvent:
    key: str
    shift: bool = False
    ctrl: bool = False
    meta: bool = False
    alt: bool = False
    composing: bool = False

    @property
    def is_plain_letter(self) -> bool:
        return (
            len(self.key) == 1
            and self.key.isascii()
            and self.key.isalpha()
            and not (self.ctrl or self.meta or self.alt)
        )


@dataclass(frozen=True)
class CellView:
    index: int
    is_black: bool
    label: Optional[str]
    value: str
    selected: bool
    highlighted: bool
    referenced: bool
    circled: bool
    font_px: Optional[int]


@dataclass(frozen=True)
class ClueRow:
    clue_id: int
    label: Optional[str]
    text: str
    active: bool


def rebus_font_size(value: str, rebus: bool, base_px: int = BASE_FONT_PX, min_px: int = MIN_FONT_PX) -> Optional[int]:
    """Display size for a cell entry; ``None`` keeps the default size."""

    if not rebus:
        return None
    if len(value) <= 1:
        return base_px
    return max(min_px, base_px - (len(value) - 1) * 2)


class PuzzleSession:
    """Wires a parsed puzzle to a cursor engine and exposes UI events."""

    def __init__(
        self,
        document: PuzzleDocument,
        config: Optional[SessionConfig] = None,
        scroll_listener: Optional[ScrollListener] = None,
    ) -> None:
        self.document = document
        self.config = config or SessionConfig()
        self.grid = GridModel(document.cells, document.dimensions)
        self.index = ClueIndex(
            self.grid,
            document.clues,
            document.clue_groups,
            strict=self.config.strict_clue_coverage,
        )
        self.answers = AnswerBuffer(len(self.grid))
        self.engine = CursorEngine(
            self.grid,
            self.index,
            self.answers,
            rebus_max_length=self.config.rebus_max_length,
            scroll_listener=scroll_listener,
        )
        self.reveal = self.config.reveal
        if self.config.seed_focus:
            self.engine.seed()

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------
    def on_letter_entry(self, cell: int, raw: str) -> CursorState:
        return self.engine.enter_letter(cell, raw)

    def on_arrow_key(self, key: ArrowKey) -> CursorState:
        return self.engine.arrow(key)

    def on_backspace(self, cell: int) -> CursorState:
        return self.engine.backspace(cell)

    def on_tab(self, shift_held: bool = False) -> CursorState:
        return self.engine.cycle_clue(forward=not shift_held)

    def on_cell_click(self, cell: int) -> CursorState:
        return self.engine.click(cell)

    def on_clue_click(self, clue_id: int) -> CursorState:
        return self.engine.focus_clue(clue_id)

    def on_toggle_rebus(self) -> bool:
        return self.engine.toggle_rebus()

    def on_toggle_reveal(self) -> bool:
        self.reveal = not self.reveal
        return self.reveal

    def handle_key(self, cell: int, event: KeyEvent) -> bool:
        """Dispatch a raw keystroke at ``cell``; return whether it was consumed."""

        if event.composing:
            return False
        if not self.engine.rebus and event.is_plain_letter:
            self.on_letter_entry(cell, event.key)
            return True
        if event.key in KEY_NAMES:
            if self.engine.focused_cell is None:
                self.engine.focus(cell)
            self.on_arrow_key(KEY_NAMES[event.key])
            return True
        if event.key == "Backspace":
            self.on_backspace(cell)
            return True
        if event.key == "Tab":
            if self.engine.active_clue_id is None:
                self.engine.focus(cell)
            self.on_tab(event.shift)
            return True
        LOGGER.debug("Key %r left to the host", event.key)
        return False

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------
    @property
    def state(self) -> CursorState:
        return self.engine.state

    @property
    def rebus(self) -> bool:
        return self.engine.rebus

    def display_value(self, cell: int) -> str:
        if self.reveal:
            return self.grid.cell(cell).answer or ""
        return self.answers[cell]

    def font_size(self, cell: int) -> Optional[int]:
        return rebus_font_size(
            self.answers[cell],
            self.engine.rebus,
            self.config.base_font_px,
            self.config.min_font_px,
        )

    def active_clue_text(self) -> str:
        clue_id = self.engine.active_clue_id
        if clue_id is None:
            return ""
        clue = self.index.clue(clue_id)
        return f"{clue.label or ''} {clue.direction.value}: {render_clue_text(clue)}".strip()

    def referenced_cells(self) -> Tuple[int, ...]:
        clue_id = self.engine.active_clue_id
        if clue_id is None:
            return ()
        return tuple(referenced_cells(self.index.clue(clue_id), self.index.clues()))

    def cell_views(self) -> List[CellView]:
        state = self.engine.state
        active = set(self.engine.active_cells())
        referenced = set(self.referenced_cells())
        views: List[CellView] = []
        for index in range(len(self.grid)):
            cell = self.grid.cell(index)
            if cell.is_black:
                views.append(CellView(index, True, None, "", False, False, False, False, None))
                continue
            views.append(
                CellView(
                    index=index,
                    is_black=False,
                    label=cell.label,
                    value=self.display_value(index),
                    selected=state.focused_cell == index,
                    highlighted=index in active,
                    referenced=index in referenced,
                    circled=index in self.document.circled_cells,
                    font_px=self.font_size(index),
                )
            )
        return views

    def clue_rows(self) -> List[Tuple[str, List[ClueRow]]]:
        """Clue panels in display order, one entry per clue group."""

        active_id = self.engine.active_clue_id
        panels: List[Tuple[str, List[ClueRow]]] = []
        for group in self.index.groups:
            rows = []
            for clue_id in group.clue_ids:
                clue = self.index.clue(clue_id)
                rows.append(ClueRow(clue_id, clue.label, render_clue_text(clue), clue_id == active_id))
            panels.append((group.name, rows))
        return panels
