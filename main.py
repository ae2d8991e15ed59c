"""CLI entrypoint: load a puzzle, replay a key script and print the board."""

from __future__ import annotations

import argparse
import sys
from typing import List

from crossfill.core.exceptions import CrosswordError
from crossfill.engine.session import KeyEvent, PuzzleSession, SessionConfig
from crossfill.io.pattern import document_from_pattern
from crossfill.io.puzzle_loader import load_puzzle
from crossfill.utils.logger import configure_logging, get_logger
from crossfill.utils.pretty import pretty_print_session

LOGGER = get_logger("crossfill.cli")


def parse_key_script(script: str) -> List[str]:
    """Split a key script on whitespace. Blank entries are skipped."""
    return [token for token in script.split() if token]


def apply_token(session: PuzzleSession, token: str) -> None:
    """Apply one key-script token to the session."""

    if token == "Rebus":
        session.on_toggle_rebus()
        return
    if token == "Reveal":
        session.on_toggle_reveal()
        return
    if token.startswith("Click:"):
        session.on_cell_click(int(token.split(":", 1)[1]))
        return
    if token.startswith("Clue:"):
        session.on_clue_click(int(token.split(":", 1)[1]))
        return

    if session.state.focused_cell is None:
        session.engine.seed()
    cell = session.state.focused_cell
    if cell is None:
        raise CrosswordError("Puzzle has no playable cells")

    if token.startswith("Text:"):
        session.on_letter_entry(cell, token.split(":", 1)[1])
        return
    if token == "Shift+Tab":
        session.handle_key(cell, KeyEvent("Tab", shift=True))
        return
    event = KeyEvent(token)
    if session.rebus and event.is_plain_letter:
        # Rebus letters extend the cell's entry, like typing into its text field.
        session.on_letter_entry(cell, session.answers[cell] + token)
        return
    if not session.handle_key(cell, event):
        raise CrosswordError(f"Unsupported key in script: {token!r}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Fill in a crossword from a scripted sequence of keystrokes",
    )
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument(
        "--puzzle",
        type=str,
        help="Puzzle JSON file, http(s) URL, or a name resolved via CROSSFILL_PUZZLE_BASE_URL",
    )
    source.add_argument(
        "--pattern",
        type=str,
        help="Block diagram with rows separated by '/' and # for black squares, e.g. '#CAB/AREA/PEAR/EST#'",
    )
    parser.add_argument(
        "--keys",
        type=str,
        default="",
        help=(
            "Whitespace-separated key script: letters, ArrowLeft/Right/Up/Down, "
            "Backspace, Tab, Shift+Tab, Rebus, Reveal, Text:<entry>, Click:<cell>, Clue:<id>"
        ),
    )
    parser.add_argument("--rebus", action="store_true", help="Start in rebus mode")
    parser.add_argument("--reveal", action="store_true", help="Show answers instead of entries")
    parser.add_argument(
        "--seed-focus",
        action="store_true",
        help="Start focused on the first playable cell",
    )
    parser.add_argument(
        "--lenient",
        action="store_true",
        help="Allow playable cells that lack an Across or Down clue",
    )
    parser.add_argument(
        "--steps",
        action="store_true",
        help="Print the board after every key",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        type=str.upper,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    config = SessionConfig(
        seed_focus=args.seed_focus,
        strict_clue_coverage=not args.lenient,
        reveal=args.reveal,
    )
    try:
        if args.pattern:
            document = document_from_pattern(args.pattern.upper().split("/"))
        else:
            document = load_puzzle(args.puzzle)
        session = PuzzleSession(document, config)
        if args.rebus:
            session.on_toggle_rebus()
        for token in parse_key_script(args.keys):
            apply_token(session, token)
            if args.steps:
                pretty_print_session(session, label=f"> {token}")
    except (CrosswordError, ValueError) as exc:
        LOGGER.error("%s", exc)
        return 1

    pretty_print_session(session)
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
