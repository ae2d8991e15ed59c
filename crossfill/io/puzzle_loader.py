"""Puzzle document loading from files, URLs or decoded JSON."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, FrozenSet, List, Mapping, Optional, Union

import requests

from ..core.constants import Direction
from ..core.exceptions import MalformedPuzzleError, PuzzleLoadError
from ..core.models import Cell, Clue, ClueGroup, ClueTextPart, Dimensions, PuzzleDocument
from ..utils.logger import get_logger

LOGGER = get_logger(__name__)

PuzzleSource = Union[str, Path, Mapping[str, Any]]


class PuzzleFetcher:
    """Minimal HTTP client for puzzle documents published as JSON."""

    DEFAULT_TIMEOUT_SECONDS = 30.0

    def __init__(
        self,
        base_url: Optional[str] = None,
        base_url_env: str = "CROSSFILL_PUZZLE_BASE_URL",
        timeout_env: str = "CROSSFILL_HTTP_TIMEOUT",
        timeout_seconds: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.base_url = base_url or os.environ.get(base_url_env)
        if timeout_seconds is None:
            raw_timeout = os.environ.get(timeout_env)
            try:
                timeout_seconds = float(raw_timeout) if raw_timeout else self.DEFAULT_TIMEOUT_SECONDS
            except ValueError as exc:
                raise PuzzleLoadError(f"Invalid {timeout_env} value: {raw_timeout!r}") from exc
        self.timeout_seconds = timeout_seconds
        self._session = session

    def resolve(self, name: str) -> str:
        """Turn a puzzle name such as ``2026-01-01`` into a URL."""

        if not self.base_url:
            raise PuzzleLoadError(
                f"Cannot resolve puzzle {name!r}: no base URL configured"
            )
        return f"{self.base_url.rstrip('/')}/{name}.json"

    def fetch(self, url: str) -> Dict[str, Any]:
        LOGGER.info("Fetching puzzle from %s", url)
        getter = self._session.get if self._session is not None else requests.get
        try:
            response = getter(url, timeout=self.timeout_seconds)
            response.raise_for_status()
        except requests.RequestException as exc:
            raise PuzzleLoadError(f"Puzzle request failed: {exc}") from exc
        try:
            return response.json()
        except ValueError as exc:
            raise PuzzleLoadError(f"Puzzle at {url} is not valid JSON") from exc


def load_puzzle(source: PuzzleSource, fetcher: Optional[PuzzleFetcher] = None) -> PuzzleDocument:
    """Load a puzzle from a mapping, a JSON file, an http(s) URL or a name."""

    if isinstance(source, Mapping):
        return parse_puzzle(source)

    text = str(source)
    if text.startswith(("http://", "https://")):
        return parse_puzzle((fetcher or PuzzleFetcher()).fetch(text))

    path = Path(source)
    if path.exists():
        LOGGER.info("Loading puzzle file %s", path)
        try:
            payload = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise PuzzleLoadError(f"Cannot read puzzle file {path}: {exc}") from exc
        return parse_puzzle(payload)

    fetcher = fetcher or PuzzleFetcher()
    return parse_puzzle(fetcher.fetch(fetcher.resolve(text)))


def parse_puzzle(payload: Mapping[str, Any]) -> PuzzleDocument:
    """Convert a decoded puzzle file (or a bare puzzle body) to a document."""

    body = _select_body(payload)
    raw_clues = body.get("clues") or []
    if not isinstance(raw_clues, list):
        raise PuzzleLoadError("Puzzle 'clues' must be a list")
    clues = [_parse_clue(clue_id, raw) for clue_id, raw in enumerate(raw_clues)]
    directions = {clue.id: clue.direction for clue in clues}

    raw_cells = body.get("cells")
    if not isinstance(raw_cells, list) or not raw_cells:
        raise PuzzleLoadError("Puzzle body has no cells")
    cells = [_parse_cell(index, raw, directions) for index, raw in enumerate(raw_cells)]

    groups = [_parse_group(raw) for raw in body.get("clueLists") or []]

    dimensions = None
    raw_dimensions = body.get("dimensions")
    if raw_dimensions:
        try:
            dimensions = Dimensions(
                height=int(raw_dimensions["height"]),
                width=int(raw_dimensions["width"]),
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise PuzzleLoadError(f"Invalid puzzle dimensions: {raw_dimensions!r}") from exc

    document = PuzzleDocument(
        cells=tuple(cells),
        clues=tuple(clues),
        clue_groups=tuple(groups),
        dimensions=dimensions,
        circled_cells=circled_cells(body.get("SVG")),
    )
    LOGGER.debug("Parsed puzzle with %s cells and %s clues", len(cells), len(clues))
    return document


def circled_cells(svg: Any) -> FrozenSet[int]:
    """Indices of cells whose SVG group draws a circle; empty on any mismatch."""

    try:
        groups = svg["children"][1]["children"]
    except (KeyError, IndexError, TypeError):
        return frozenset()
    if not isinstance(groups, list):
        return frozenset()
    found = set()
    for index, group in enumerate(groups):
        children = group.get("children") if isinstance(group, dict) else None
        if isinstance(children, list) and any(
            isinstance(child, dict) and child.get("name") == "circle" for child in children
        ):
            found.add(index)
    return frozenset(found)


def _select_body(payload: Mapping[str, Any]) -> Mapping[str, Any]:
    if not isinstance(payload, Mapping):
        raise PuzzleLoadError("Puzzle document must be a JSON object")
    if "body" not in payload:
        return payload
    bodies = payload.get("body")
    if not isinstance(bodies, list) or not bodies or not isinstance(bodies[0], Mapping):
        raise PuzzleLoadError("Puzzle document has an empty 'body'")
    return bodies[0]


def _parse_clue(clue_id: int, raw: Any) -> Clue:
    if not isinstance(raw, Mapping):
        raise MalformedPuzzleError(f"Clue {clue_id} must be an object, got {raw!r}")
    try:
        direction = Direction.parse(raw.get("direction", ""))
    except ValueError as exc:
        raise MalformedPuzzleError(f"Clue {clue_id}: {exc}") from exc
    cells = raw.get("cells") or []
    if not isinstance(cells, list) or not all(isinstance(cell, int) for cell in cells):
        raise MalformedPuzzleError(f"Clue {clue_id} has non-integer cells: {cells!r}")
    label = raw.get("label")
    raw_parts = raw.get("text") or []
    if not isinstance(raw_parts, list):
        raise MalformedPuzzleError(f"Clue {clue_id} text must be a list, got {raw_parts!r}")
    parts: List[ClueTextPart] = []
    for part in raw_parts:
        if not isinstance(part, Mapping):
            raise MalformedPuzzleError(f"Clue {clue_id} has a text part that is not an object: {part!r}")
        parts.append(ClueTextPart(plain=part.get("plain"), formatted=part.get("formatted")))
    return Clue(
        id=clue_id,
        direction=direction,
        cells=tuple(cells),
        label=str(label) if label is not None else None,
        text_parts=tuple(parts),
    )


def _parse_group(raw: Any) -> ClueGroup:
    if not isinstance(raw, Mapping):
        raise MalformedPuzzleError(f"Clue list must be an object, got {raw!r}")
    clue_ids = raw.get("clues") or []
    if not isinstance(clue_ids, list) or not all(isinstance(clue_id, int) for clue_id in clue_ids):
        raise MalformedPuzzleError(f"Clue list {raw.get('name')!r} has non-integer clue ids")
    return ClueGroup(name=str(raw.get("name", "")), clue_ids=tuple(clue_ids))


def _parse_cell(index: int, raw: Any, directions: Dict[int, Direction]) -> Cell:
    if not raw:
        return Cell()
    if not isinstance(raw, Mapping):
        raise MalformedPuzzleError(f"Cell {index} must be an object, got {raw!r}")
    raw_clue_ids = raw.get("clues") or []
    if not isinstance(raw_clue_ids, list):
        raise MalformedPuzzleError(f"Cell {index} clues must be a list, got {raw_clue_ids!r}")
    declared: Dict[Direction, int] = {}
    for clue_id in raw_clue_ids:
        direction = directions.get(clue_id) if isinstance(clue_id, int) else None
        if direction is None:
            raise MalformedPuzzleError(f"Cell {index} references unknown clue {clue_id}")
        if direction in declared and declared[direction] != clue_id:
            raise MalformedPuzzleError(
                f"Cell {index} lists two {direction.value} clues: {declared[direction]} and {clue_id}"
            )
        declared[direction] = clue_id
    for key, direction in (("acrossClueId", Direction.ACROSS), ("downClueId", Direction.DOWN)):
        value = raw.get(key)
        if value is None:
            continue
        if not isinstance(value, int) or directions.get(value) != direction:
            raise MalformedPuzzleError(
                f"Cell {index} {key} {value!r} is not a known {direction.value} clue"
            )
        declared.setdefault(direction, value)
    label = raw.get("label")
    return Cell(
        answer=raw.get("answer") or None,
        label=str(label) if label is not None else None,
        across_clue_id=declared.get(Direction.ACROSS),
        down_clue_id=declared.get(Direction.DOWN),
    )
