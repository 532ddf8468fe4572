"""Grid representation and helper utilities."""

from __future__ import annotations

import random
from typing import Iterable, Iterator, List, Sequence, Tuple

from ..core.constants import (
    BOARD,
    GRID_SIZE,
    ORTHOGONAL_STEPS,
    CellState,
    Position,
)
from ..core.exceptions import FixedCellError, GridShapeError


class DungeonGrid:
    """An 8x8 dungeon board with per-row and per-column wall targets.

    Reads outside the board return a virtual wall, so every spatial query
    behaves as if the board were surrounded by solid rock.
    """

    def __init__(
        self,
        cells: Sequence[Sequence[CellState]],
        row_targets: Sequence[int],
        col_targets: Sequence[int],
    ) -> None:
        if len(cells) != GRID_SIZE or any(len(row) != GRID_SIZE for row in cells):
            raise GridShapeError(f"Grid must be {GRID_SIZE}x{GRID_SIZE}")
        self.row_targets: Tuple[int, ...] = self._check_targets("row", row_targets)
        self.col_targets: Tuple[int, ...] = self._check_targets("column", col_targets)
        self.cells: List[List[CellState]] = [[CellState(cell) for cell in row] for row in cells]
        self.bounds = BOARD

    @classmethod
    def blank(cls, row_targets: Sequence[int], col_targets: Sequence[int]) -> DungeonGrid:
        cells = [[CellState.UNASSIGNED] * GRID_SIZE for _ in range(GRID_SIZE)]
        return cls(cells, row_targets, col_targets)

    @staticmethod
    def _check_targets(axis: str, targets: Sequence[int]) -> Tuple[int, ...]:
        if len(targets) != GRID_SIZE:
            raise GridShapeError(f"Expected {GRID_SIZE} {axis} targets, got {len(targets)}")
        for target in targets:
            if not 0 <= target <= GRID_SIZE:
                raise GridShapeError(f"{axis.capitalize()} target {target} outside 0..{GRID_SIZE}")
        return tuple(int(target) for target in targets)

    # ------------------------------------------------------------------
    # Cell access
    # ------------------------------------------------------------------
    def get(self, row: int, col: int) -> CellState:
        if 0 <= row < GRID_SIZE and 0 <= col < GRID_SIZE:
            return self.cells[row][col]
        return CellState.WALL

    def set(self, row: int, col: int, state: CellState) -> None:
        if not self.bounds.contains(row, col):
            raise FixedCellError(f"Cannot write outside the board: {(row, col)}")
        if not state.is_changeable():
            raise FixedCellError(f"Search may not place {state.value} at {(row, col)}")
        current = self.cells[row][col]
        if not current.is_changeable():
            raise FixedCellError(f"Cell {(row, col)} holds fixed {current.value}")
        self.cells[row][col] = state

    def is_changeable(self, row: int, col: int) -> bool:
        return self.get(row, col).is_changeable()

    def copy(self) -> DungeonGrid:
        clone = DungeonGrid.__new__(DungeonGrid)
        clone.cells = [list(row) for row in self.cells]
        clone.row_targets = self.row_targets
        clone.col_targets = self.col_targets
        clone.bounds = self.bounds
        return clone

    def randomize(self, rng: random.Random) -> None:
        """Redraw every changeable cell as wall or empty with equal odds."""

        for row in self.cells:
            for col, cell in enumerate(row):
                if cell.is_changeable():
                    row[col] = CellState.WALL if rng.random() < 0.5 else CellState.EMPTY

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def positions(self) -> Iterator[Position]:
        for row in range(GRID_SIZE):
            for col in range(GRID_SIZE):
                yield row, col

    def positions_of(self, state: CellState) -> List[Position]:
        return [
            (r, c)
            for r, row in enumerate(self.cells)
            for c, cell in enumerate(row)
            if cell is state
        ]

    def changeable_positions(self) -> List[Position]:
        return [
            (r, c)
            for r, row in enumerate(self.cells)
            for c, cell in enumerate(row)
            if cell.is_changeable()
        ]

    def wall_counts(self) -> Tuple[List[int], List[int]]:
        rows = [row.count(CellState.WALL) for row in self.cells]
        cols = [list(column).count(CellState.WALL) for column in zip(*self.cells)]
        return rows, cols

    def wall_neighbor_count(self, row: int, col: int) -> int:
        return sum(
            1 for dr, dc in ORTHOGONAL_STEPS if self.get(row + dr, col + dc) == CellState.WALL
        )

    def open_neighbors(self, row: int, col: int) -> Iterable[Position]:
        for dr, dc in ORTHOGONAL_STEPS:
            nr, nc = row + dr, col + dc
            if self.get(nr, nc) != CellState.WALL:
                yield nr, nc

    # ------------------------------------------------------------------
    # Serialization helpers
    # ------------------------------------------------------------------
    def to_jsonable(self) -> dict:
        return {
            "row_targets": list(self.row_targets),
            "col_targets": list(self.col_targets),
            "cells": [[cell.value for cell in row] for row in self.cells],
        }
