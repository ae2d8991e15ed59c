import unittest
from unittest.mock import MagicMock, patch

from crossfill.core.constants import ArrowKey, Direction
from crossfill.core.exceptions import CrosswordError, InvalidCellError
from crossfill.core.models import Cell, Clue, CursorState
from crossfill.engine.clue_index import ClueIndex
from crossfill.engine.cursor import CursorEngine
from crossfill.engine.grid import GridModel
from crossfill.io.pattern import document_from_pattern

# Every cell open: Across clues 0-4 are the rows, Down clues 5-9 the columns.
OPEN5 = ["ABCDE"] * 5
BLOCKED = ["AB#CD", "EFGHI", "J#K#L", "MNOPQ", "RS#TU"]


def make_engine(rows, strict=True, listener=None):
    document = document_from_pattern(rows)
    grid = GridModel(document.cells, document.dimensions)
    index = ClueIndex(grid, document.clues, document.clue_groups, strict=strict)
    return CursorEngine(grid, index, scroll_listener=listener)


class FocusTests(unittest.TestCase):
    def test_initial_state_is_empty(self) -> None:
        engine = make_engine(OPEN5)
        self.assertEqual(engine.state, CursorState())
        self.assertEqual(engine.active_cells(), ())

    def test_focus_uses_preferred_direction(self) -> None:
        engine = make_engine(OPEN5)
        state = engine.focus(7, Direction.DOWN)
        self.assertEqual(state, CursorState(7, Direction.DOWN, 7))
        self.assertEqual(engine.active_cells(), (2, 7, 12, 17, 22))

    def test_focus_defaults_to_across(self) -> None:
        engine = make_engine(OPEN5)
        self.assertEqual(engine.focus(7), CursorState(7, Direction.ACROSS, 1))

    def test_preferred_direction_falls_back_when_missing(self) -> None:
        engine = make_engine(BLOCKED, strict=False)
        state = engine.focus(12, Direction.ACROSS)
        self.assertEqual(state.active_direction, Direction.DOWN)
        self.assertEqual(engine.active_cells(), (7, 12, 17))

    def test_cell_without_clues_clears_active_clue(self) -> None:
        engine = make_engine(["A#", "#B"], strict=False)
        self.assertEqual(engine.focus(3, Direction.ACROSS), CursorState(3, None, None))

    def test_click_keeps_current_direction(self) -> None:
        engine = make_engine(OPEN5)
        engine.focus(0, Direction.DOWN)
        self.assertEqual(engine.click(13), CursorState(13, Direction.DOWN, 8))

    def test_click_falls_back_when_direction_unavailable(self) -> None:
        engine = make_engine(BLOCKED, strict=False)
        engine.focus(5, Direction.ACROSS)
        state = engine.click(12)
        self.assertEqual(state.focused_cell, 12)
        self.assertEqual(state.active_direction, Direction.DOWN)

    def test_focus_clue_uses_clue_direction(self) -> None:
        engine = make_engine(OPEN5)
        self.assertEqual(engine.focus_clue(6), CursorState(1, Direction.DOWN, 6))

    def test_seed_focuses_first_playable_across(self) -> None:
        engine = make_engine(["#CAB", "AREA", "PEAR", "EST#"])
        self.assertEqual(engine.seed(), CursorState(1, Direction.ACROSS, 0))

    def test_invalid_cell_is_programming_error(self) -> None:
        engine = make_engine(OPEN5)
        with self.assertRaises(InvalidCellError):
            engine.focus(25)
        with self.assertRaises(InvalidCellError):
            engine.enter_letter(-1, "A")
        with self.assertRaises(InvalidCellError):
            engine.backspace(99)


class ScrollRequestTests(unittest.TestCase):
    def test_listener_receives_active_clue(self) -> None:
        listener = MagicMock()
        engine = make_engine(OPEN5, listener=listener)
        engine.focus(3, Direction.DOWN)
        listener.assert_called_once_with(8)

    def test_listener_failure_is_logged_and_ignored(self) -> None:
        listener = MagicMock(side_effect=RuntimeError("detached"))
        engine = make_engine(OPEN5, listener=listener)
        with self.assertLogs("crossfill.engine.cursor", level="WARNING"):
            state = engine.focus(3, Direction.ACROSS)
        self.assertEqual(state, CursorState(3, Direction.ACROSS, 0))
        engine.enter_letter(3, "x")
        self.assertEqual(engine.focused_cell, 4)

    def test_no_request_without_clue(self) -> None:
        listener = MagicMock()
        engine = make_engine(["A#", "#B"], strict=False, listener=listener)
        engine.focus(0)
        listener.assert_not_called()


class ArrowTests(unittest.TestCase):
    def test_arrow_without_focus_is_noop(self) -> None:
        engine = make_engine(OPEN5)
        self.assertEqual(engine.arrow(ArrowKey.RIGHT), CursorState())

    def test_first_press_orients_second_press_moves(self) -> None:
        engine = make_engine(OPEN5)
        engine.focus(0, Direction.ACROSS)
        self.assertEqual(engine.arrow(ArrowKey.DOWN), CursorState(0, Direction.DOWN, 5))
        self.assertEqual(engine.arrow(ArrowKey.DOWN), CursorState(5, Direction.DOWN, 5))
        self.assertEqual(engine.arrow(ArrowKey.LEFT), CursorState(5, Direction.ACROSS, 1))

    def test_orientation_ignores_axis_sign(self) -> None:
        engine = make_engine(OPEN5)
        engine.focus(12, Direction.DOWN)
        engine.arrow(ArrowKey.UP)
        self.assertEqual(engine.focused_cell, 7)

    def test_right_walks_clue_and_stops_at_last_cell(self) -> None:
        engine = make_engine(OPEN5)
        engine.focus(0, Direction.ACROSS)
        visited = []
        for _ in range(6):
            visited.append(engine.arrow(ArrowKey.RIGHT).focused_cell)
        self.assertEqual(visited, [1, 2, 3, 4, 4, 4])
        self.assertEqual(engine.active_clue_id, 0)

    def test_arrow_jumps_over_black_cells(self) -> None:
        engine = make_engine(BLOCKED, strict=False)
        engine.focus(1, Direction.ACROSS)
        state = engine.arrow(ArrowKey.RIGHT)
        self.assertEqual(state.focused_cell, 3)
        self.assertEqual(engine.active_cells(), (3, 4))

    def test_arrow_at_edge_keeps_state(self) -> None:
        engine = make_engine(OPEN5)
        engine.focus(20, Direction.DOWN)
        before = engine.state
        self.assertEqual(engine.arrow(ArrowKey.DOWN), before)

    def test_focus_outside_active_clue_reorients_in_place(self) -> None:
        engine = make_engine(OPEN5)
        engine.focus(0, Direction.ACROSS)
        engine._state = CursorState(7, Direction.ACROSS, 0)
        self.assertEqual(engine.arrow(ArrowKey.RIGHT), CursorState(7, Direction.ACROSS, 1))


class LetterEntryTests(unittest.TestCase):
    def test_type_and_backspace_scenario(self) -> None:
        engine = make_engine(OPEN5)
        engine.focus(0, Direction.ACROSS)
        engine.enter_letter(0, "C")
        self.assertEqual(engine.answers[0], "C")
        self.assertEqual(engine.focused_cell, 1)
        engine.enter_letter(1, "A")
        self.assertEqual(engine.answers[1], "A")
        self.assertEqual(engine.focused_cell, 2)
        engine.backspace(2)
        self.assertEqual(engine.focused_cell, 1)
        self.assertEqual(engine.answers[1], "")
        self.assertEqual(engine.answers[0], "C")

    def test_type_and_backspace_with_single_across_clue(self) -> None:
        # One Across clue over the top row plus one Down clue per column.
        clues = [Clue(0, Direction.ACROSS, (0, 1, 2, 3, 4))]
        clues += [Clue(1 + c, Direction.DOWN, tuple(range(c, 25, 5))) for c in range(5)]
        cells = [
            Cell(answer="X", across_clue_id=0 if i < 5 else None, down_clue_id=1 + i % 5)
            for i in range(25)
        ]
        grid = GridModel(cells)
        engine = CursorEngine(grid, ClueIndex(grid, clues, strict=False))

        engine.focus(0, Direction.ACROSS)
        self.assertEqual(engine.active_clue_id, 0)
        engine.enter_letter(0, "c")
        self.assertEqual(engine.answers[0], "C")
        self.assertEqual(engine.state, CursorState(1, Direction.ACROSS, 0))
        engine.enter_letter(1, "A")
        self.assertEqual(engine.focused_cell, 2)
        engine.backspace(2)
        self.assertEqual(engine.state, CursorState(1, Direction.ACROSS, 0))
        self.assertEqual(engine.answers.snapshot()[:3], ("C", "", ""))

    def test_non_rebus_entry_is_one_uppercase_letter(self) -> None:
        engine = make_engine(OPEN5)
        engine.focus(0, Direction.ACROSS)
        engine.enter_letter(0, "xyz")
        self.assertEqual(engine.answers[0], "X")

    def test_empty_entry_clears_without_advancing(self) -> None:
        engine = make_engine(OPEN5)
        engine.focus(0, Direction.ACROSS)
        engine.answers.write(0, "Q")
        engine.enter_letter(0, "")
        self.assertEqual(engine.answers[0], "")
        self.assertEqual(engine.focused_cell, 0)

    def test_last_cell_does_not_advance(self) -> None:
        engine = make_engine(OPEN5)
        engine.focus(4, Direction.ACROSS)
        engine.enter_letter(4, "e")
        self.assertEqual(engine.state, CursorState(4, Direction.ACROSS, 0))

    def test_cell_outside_active_clue_does_not_advance(self) -> None:
        engine = make_engine(OPEN5)
        engine.focus(0, Direction.ACROSS)
        engine.enter_letter(7, "q")
        self.assertEqual(engine.answers[7], "Q")
        self.assertEqual(engine.focused_cell, 0)

    def test_advance_preserves_direction(self) -> None:
        engine = make_engine(OPEN5)
        engine.focus(0, Direction.DOWN)
        engine.enter_letter(0, "a")
        self.assertEqual(engine.state, CursorState(5, Direction.DOWN, 5))

    def test_same_letter_is_still_written(self) -> None:
        engine = make_engine(OPEN5)
        engine.focus(0, Direction.ACROSS)
        engine.answers.write(0, "C")
        with patch.object(engine.answers, "write", wraps=engine.answers.write) as write:
            engine.enter_letter(0, "c")
        write.assert_called_once_with(0, "C")
        self.assertEqual(engine.focused_cell, 1)

    def test_rebus_entry_keeps_focus(self) -> None:
        engine = make_engine(OPEN5)
        engine.toggle_rebus()
        engine.focus(0, Direction.ACROSS)
        engine.enter_letter(0, "oxen")
        self.assertEqual(engine.answers[0], "OXEN")
        self.assertEqual(engine.focused_cell, 0)

    def test_rebus_entry_is_clamped(self) -> None:
        engine = make_engine(OPEN5)
        engine.toggle_rebus()
        engine.focus(0, Direction.ACROSS)
        engine.enter_letter(0, "abcdefghijklmn")
        self.assertEqual(engine.answers[0], "ABCDEFGHIJ")

    def test_rebus_limit_must_be_positive(self) -> None:
        document = document_from_pattern(OPEN5)
        grid = GridModel(document.cells, document.dimensions)
        index = ClueIndex(grid, document.clues)
        with self.assertRaises(CrosswordError):
            CursorEngine(grid, index, rebus_max_length=0)

    def test_toggle_rebus_leaves_content_and_cursor(self) -> None:
        engine = make_engine(OPEN5)
        engine.toggle_rebus()
        engine.focus(0, Direction.ACROSS)
        engine.enter_letter(0, "oxen")
        before = engine.state
        self.assertFalse(engine.toggle_rebus())
        self.assertEqual(engine.answers[0], "OXEN")
        self.assertEqual(engine.state, before)
        engine.enter_letter(0, "oxen")
        self.assertEqual(engine.answers[0], "O")


class BackspaceTests(unittest.TestCase):
    def test_filled_cell_is_cleared_in_place(self) -> None:
        engine = make_engine(OPEN5)
        engine.focus(2, Direction.ACROSS)
        engine.answers.write(2, "X")
        engine.answers.write(1, "Y")
        state = engine.backspace(2)
        self.assertEqual(engine.answers[2], "")
        self.assertEqual(engine.answers[1], "Y")
        self.assertEqual(state.focused_cell, 2)

    def test_walks_back_through_down_clue(self) -> None:
        engine = make_engine(OPEN5)
        engine.focus(10, Direction.DOWN)
        engine.answers.write(5, "Z")
        state = engine.backspace(10)
        self.assertEqual(state, CursorState(5, Direction.DOWN, 5))
        self.assertEqual(engine.answers[5], "")

    def test_clue_start_falls_back_to_left_neighbor(self) -> None:
        engine = make_engine(OPEN5)
        engine.focus(2, Direction.DOWN)
        engine.answers.write(1, "Z")
        state = engine.backspace(2)
        self.assertEqual(state, CursorState(1, Direction.ACROSS, 0))
        self.assertEqual(engine.answers[1], "")

    def test_left_neighbor_skips_black_cells(self) -> None:
        engine = make_engine(BLOCKED, strict=False)
        engine.focus(3, Direction.ACROSS)
        self.assertEqual(engine.backspace(3).focused_cell, 1)

    def test_row_start_falls_back_to_reading_order(self) -> None:
        engine = make_engine(OPEN5)
        engine.focus(5, Direction.ACROSS)
        engine.answers.write(4, "E")
        state = engine.backspace(5)
        self.assertEqual(state, CursorState(4, Direction.ACROSS, 0))
        self.assertEqual(engine.answers[4], "")

    def test_reading_order_scan_skips_black_cells(self) -> None:
        engine = make_engine(["A#", "#B"], strict=False)
        engine.focus(3)
        self.assertEqual(engine.backspace(3).focused_cell, 0)

    def test_first_cell_with_nothing_before_is_noop(self) -> None:
        engine = make_engine(OPEN5)
        engine.focus(0, Direction.ACROSS)
        before = engine.state
        self.assertEqual(engine.backspace(0), before)


class CycleTests(unittest.TestCase):
    def test_tab_moves_to_next_clue_start(self) -> None:
        engine = make_engine(OPEN5)
        engine.focus(2, Direction.ACROSS)
        self.assertEqual(engine.cycle_clue(True), CursorState(5, Direction.ACROSS, 1))

    def test_tab_wraps_from_last_clue(self) -> None:
        engine = make_engine(OPEN5)
        engine.focus(20, Direction.ACROSS)
        self.assertEqual(engine.cycle_clue(True), CursorState(0, Direction.ACROSS, 0))

    def test_shift_tab_wraps_backwards(self) -> None:
        engine = make_engine(OPEN5)
        engine.focus(0, Direction.DOWN)
        self.assertEqual(engine.cycle_clue(False), CursorState(4, Direction.DOWN, 9))

    def test_single_clue_direction_is_noop(self) -> None:
        engine = make_engine(["ABC"], strict=False)
        engine.focus(1, Direction.ACROSS)
        before = engine.state
        self.assertEqual(engine.cycle_clue(True), before)

    def test_requires_active_clue(self) -> None:
        engine = make_engine(OPEN5)
        self.assertEqual(engine.cycle_clue(True), CursorState())


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
