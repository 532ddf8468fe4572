"""Single-cell perturbations used by the annealer."""

from __future__ import annotations

import random

from ..core.constants import GRID_SIZE, CellState
from ..core.exceptions import FixedCellError
from .grid import DungeonGrid


def flipped(state: CellState) -> CellState:
    return CellState.EMPTY if state is CellState.WALL else CellState.WALL


def step(grid: DungeonGrid, rng: random.Random) -> DungeonGrid:
    """Return a copy of ``grid`` with one random changeable cell flipped.

    Positions are drawn uniformly and redrawn until a changeable one comes
    up, so chests and monsters are never touched. The input is left as is.
    """

    row = rng.randrange(GRID_SIZE)
    col = rng.randrange(GRID_SIZE)
    if not grid.is_changeable(row, col) and not grid.changeable_positions():
        raise FixedCellError("Grid has no changeable cell to flip")
    while not grid.is_changeable(row, col):
        row = rng.randrange(GRID_SIZE)
        col = rng.randrange(GRID_SIZE)

    candidate = grid.copy()
    candidate.cells[row][col] = flipped(grid.cells[row][col])
    return candidate
