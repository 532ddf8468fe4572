"""Shared constants and enumerations for the dungeon generator."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Tuple


GRID_SIZE = 8
DEFAULT_MAX_ITERS = 40000

Position = Tuple[int, int]


class CellState(str, Enum):
    """All supported cell states in the grid."""

    EMPTY = "EMPTY"
    WALL = "WALL"
    CHEST = "CHEST"
    MONSTER = "MONSTER"
    UNASSIGNED = "UNASSIGNED"

    def is_changeable(self) -> bool:
        # Chests and monsters are placed by the puzzle and never move.
        return self is not CellState.CHEST and self is not CellState.MONSTER


ORTHOGONAL_STEPS: Tuple[Tuple[int, int], ...] = ((0, 1), (1, 0), (-1, 0), (0, -1))
ROOM_OFFSETS: Tuple[int, ...] = (-1, 0, 1)

# Chest rooms are 3x3, so their centre must keep one cell of margin.
ROOM_CENTRE_MIN = 1
ROOM_CENTRE_MAX = GRID_SIZE - 2
ROOM_AREA = 9

SEALED_ROOM_PENALTY = 10
OPEN_BLOCK_PENALTY = 5
REGION_PENALTY = 20
DEAD_END_PENALTY = 4
DEAD_END_WALLS = 3


@dataclass(frozen=True)
class Bounds:
    """Simple rectangle bounds helper."""

    rows: int
    cols: int

    def contains(self, row: int, col: int) -> bool:
        return 0 <= row < self.rows and 0 <= col < self.cols


BOARD = Bounds(rows=GRID_SIZE, cols=GRID_SIZE)
