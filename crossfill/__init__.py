"""Crossword solving engine: cursor navigation, letter entry and rebus mode.

This package exposes the public API surface via:

- ``crossfill.engine.session.PuzzleSession``: event surface for a front end.
- ``crossfill.engine.cursor.CursorEngine``: the focus/direction state machine.
- ``crossfill.io.puzzle_loader.load_puzzle``: puzzle document loading.
"""

from .engine.cursor import CursorEngine
from .engine.session import KeyEvent, PuzzleSession, SessionConfig
from .io.puzzle_loader import load_puzzle, parse_puzzle

__all__ = [
    "CursorEngine",
    "KeyEvent",
    "PuzzleSession",
    "SessionConfig",
    "load_puzzle",
    "parse_puzzle",
]

__version__ = "0.1.0"
