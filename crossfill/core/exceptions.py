"""Custom exception hierarchy for puzzle loading and navigation."""


class CrosswordError(Exception):
    """Base exception for crossfill failures."""


class PuzzleLoadError(CrosswordError):
    """Raised when a puzzle document cannot be read, fetched or decoded."""


class MalformedPuzzleError(CrosswordError):
    """Raised when puzzle geometry and clue data disagree."""


class InvalidCellError(CrosswordError, IndexError):
    """Raised when a cell index outside the grid reaches the engine."""


class UnknownClueError(CrosswordError, KeyError):
    """Raised when a clue id is not part of the loaded puzzle."""
