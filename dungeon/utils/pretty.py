"""Pretty-print helpers for dungeon grids."""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING

from ..core.constants import GRID_SIZE, CellState

if TYPE_CHECKING:
    from ..engine.annealer import AnnealResult
    from ..engine.grid import DungeonGrid


SYMBOLS = {
    CellState.EMPTY: " ",
    CellState.CHEST: "0",
    CellState.MONSTER: "!",
    CellState.WALL: "#",
    CellState.UNASSIGNED: " ",
}


def cell_symbol(cell: CellState) -> str:
    return SYMBOLS[cell]


def format_grid(grid: DungeonGrid) -> str:
    """Render the grid with column targets on top and row targets on the left."""

    lines = ["  " + "".join(f"{target} " for target in grid.col_targets)]
    for r in range(GRID_SIZE):
        row_render = "".join(f"{cell_symbol(grid.get(r, c))} " for c in range(GRID_SIZE))
        lines.append(f"{grid.row_targets[r]} {row_render}")
    return "\n".join(lines) + "\n"


def format_result(result: AnnealResult) -> str:
    return (
        format_grid(result.grid)
        + f"solved in {result.iterations} iterations and {result.reset_count} resets\n"
    )


def pretty_print_grid(grid: DungeonGrid, *, label: str | None = None, stream=None) -> None:
    """Print the dungeon grid in a human-friendly format."""

    stream = stream or sys.stdout
    if label:
        print(label, file=stream)
    stream.write(format_grid(grid))


def print_result(result: AnnealResult, *, stream=None) -> None:
    stream = stream or sys.stdout
    stream.write(format_result(result))
