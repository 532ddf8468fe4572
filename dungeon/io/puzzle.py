"""Puzzle definition parsing.

A puzzle file holds one line of column wall targets followed by one line per
row. Each row line starts with its wall target digit and continues with one
token per cell::

    3 1 4 2 4 2 3 2
    5 # # # # # # # M
    1 # C # # # # # #
    ...

Tokens map ``#`` to empty, ``C`` to a chest, ``M`` to a monster and ``W`` to
a wall; anything else leaves the cell unassigned.
"""

from __future__ import annotations

from pathlib import Path
from typing import Dict, List

from ..core.constants import GRID_SIZE, CellState
from ..core.exceptions import GridShapeError, PuzzleFormatError
from ..engine.grid import DungeonGrid
from ..utils.logger import get_logger


LOGGER = get_logger(__name__)

INPUT_TOKENS: Dict[str, CellState] = {
    "#": CellState.EMPTY,
    "C": CellState.CHEST,
    "M": CellState.MONSTER,
    "W": CellState.WALL,
}


def load_puzzle(path: Path | str) -> DungeonGrid:
    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as exc:
        raise PuzzleFormatError(f"Cannot read puzzle file {path}: {exc}") from exc
    return parse_puzzle(text)


def parse_puzzle(text: str) -> DungeonGrid:
    lines = text.splitlines()
    while lines and not lines[-1].strip():
        lines.pop()
    if len(lines) != GRID_SIZE + 1:
        raise PuzzleFormatError(
            f"Expected {GRID_SIZE + 1} lines (column targets + {GRID_SIZE} rows), got {len(lines)}"
        )

    col_targets = _parse_targets(lines[0])
    row_targets: List[int] = []
    cells: List[List[CellState]] = []
    for line_no, line in enumerate(lines[1:], start=2):
        target, row = _parse_row(line, line_no)
        row_targets.append(target)
        cells.append(row)

    try:
        grid = DungeonGrid(cells, row_targets, col_targets)
    except GridShapeError as exc:
        raise PuzzleFormatError(str(exc)) from exc

    LOGGER.debug(
        "Parsed puzzle with %s chests and %s monsters",
        len(grid.positions_of(CellState.CHEST)),
        len(grid.positions_of(CellState.MONSTER)),
    )
    return grid


def _parse_targets(line: str) -> List[int]:
    tokens = line.split()
    if len(tokens) != GRID_SIZE:
        raise PuzzleFormatError(f"Line 1: expected {GRID_SIZE} column targets, got {len(tokens)}")
    try:
        return [int(token) for token in tokens]
    except ValueError as exc:
        raise PuzzleFormatError(f"Line 1: invalid column target ({exc})") from exc


def _parse_row(line: str, line_no: int) -> tuple[int, List[CellState]]:
    stripped = line.strip()
    if not stripped or not stripped[0].isdigit():
        raise PuzzleFormatError(f"Line {line_no}: row must start with its wall target digit")
    tokens = stripped[1:].split()
    if len(tokens) != GRID_SIZE:
        raise PuzzleFormatError(f"Line {line_no}: expected {GRID_SIZE} cells, got {len(tokens)}")
    return int(stripped[0]), [INPUT_TOKENS.get(token, CellState.UNASSIGNED) for token in tokens]
