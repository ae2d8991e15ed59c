"""Per-cell entered text."""

from __future__ import annotations

from typing import List, Tuple

from ..core.exceptions import InvalidCellError


class AnswerBuffer:
    """Mutable entries, one string per grid cell, defaulting to empty.

    Length clamping happens in the cursor engine at entry time; the buffer
    stores whatever it is given so that toggling rebus mode never rewrites
    existing content.
    """

    def __init__(self, size: int) -> None:
        self._entries: List[str] = [""] * size

    def __len__(self) -> int:
        return len(self._entries)

    def __getitem__(self, index: int) -> str:
        self._check(index)
        return self._entries[index]

    def write(self, index: int, value: str) -> None:
        self._check(index)
        self._entries[index] = value

    def clear(self, index: int) -> None:
        self.write(index, "")

    def has_content(self, index: int) -> bool:
        return bool(self[index])

    @property
    def filled_count(self) -> int:
        return sum(1 for entry in self._entries if entry)

    def snapshot(self) -> Tuple[str, ...]:
        return tuple(self._entries)

    def _check(self, index: int) -> None:
        if not isinstance(index, int) or isinstance(index, bool) or not 0 <= index < len(self._entries):
            raise InvalidCellError(f"Cell index {index!r} outside buffer of {len(self._entries)} cells")
