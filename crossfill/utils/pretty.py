"""Plain-text rendering of a solving session."""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING, List

if TYPE_CHECKING:
    from ..engine.session import CellView, PuzzleSession


def cell_symbol(view: "CellView") -> str:
    if view.is_black:
        return "#"
    text = view.value or "."
    if view.selected:
        return f"[{text}]"
    if view.highlighted:
        return f"*{text}"
    return text


def format_board(session: "PuzzleSession") -> str:
    views = session.cell_views()
    width = session.grid.width
    symbols = [cell_symbol(view) for view in views]
    column = max(3, max(len(symbol) for symbol in symbols) + 1)
    header = "".join(f"{c:>{column}}" for c in range(width))
    lines = ["    " + header]
    lines.append("    " + "-" * (column * width))
    for r in range(session.grid.height):
        row = symbols[r * width:(r + 1) * width]
        lines.append(f"{r:>2} |" + "".join(f"{symbol:>{column}}" for symbol in row))
    return "\n".join(lines)


def format_status(session: "PuzzleSession") -> str:
    state = session.state
    parts: List[str] = [
        f"focus={state.focused_cell}",
        f"direction={state.active_direction.value if state.active_direction else None}",
        f"clue={state.active_clue_id}",
        f"rebus={'on' if session.rebus else 'off'}",
        f"filled={session.answers.filled_count}/{sum(1 for _ in session.grid.playable_cells())}",
    ]
    return " ".join(parts)


def pretty_print_session(session: "PuzzleSession", *, label: str | None = None, stream=None) -> None:
    """Print the board, the cursor status and the active clue."""

    stream = stream or sys.stdout
    if label:
        print(label, file=stream)
    print(format_board(session), file=stream)
    print(format_status(session), file=stream)
    clue_text = session.active_clue_text()
    if clue_text:
        print(clue_text, file=stream)
