"""Heuristic cost of a dungeon layout.

A layout is valid exactly when its cost is zero. The cost is the sum of five
independent terms, each exposed as its own function:

1. ``wall_count_cost``: distance from the row and column wall targets.
2. ``chest_room_cost``: every chest sits in an open 3x3 room with one entrance.
3. ``open_block_cost``: open 2x2 squares only appear inside chest rooms.
4. ``connectivity_cost``: all open cells form a single region.
5. ``dead_end_cost``: dead ends hold monsters and monsters sit in dead ends.

The annealer scores every proposal, so the loops that stay on the board index
``grid.cells`` directly and only probes that can leave it go through
``grid.get``.
"""

from __future__ import annotations

from typing import List, Set, Tuple

from ..core.constants import (
    DEAD_END_PENALTY,
    DEAD_END_WALLS,
    GRID_SIZE,
    OPEN_BLOCK_PENALTY,
    REGION_PENALTY,
    ROOM_CENTRE_MAX,
    ROOM_CENTRE_MIN,
    ROOM_OFFSETS,
    CellState,
    Position,
)
from ..core.models import ChestRoom, CostBreakdown
from .grid import DungeonGrid


RoomMask = Set[Position]

WALL = CellState.WALL
MONSTER = CellState.MONSTER


def wall_count_cost(grid: DungeonGrid) -> int:
    rows, cols = grid.wall_counts()
    cost = sum(abs(actual - target) for actual, target in zip(rows, grid.row_targets))
    cost += sum(abs(actual - target) for actual, target in zip(cols, grid.col_targets))
    return cost


# ----------------------------------------------------------------------
# Chest rooms
# ----------------------------------------------------------------------
def room_openness(grid: DungeonGrid, row: int, col: int) -> int:
    """Count the non-wall cells of the 3x3 block centred on ``(row, col)``.

    The centre must be an interior cell so the block stays on the board.
    """

    cells = grid.cells
    return sum(3 - cells[r][col - 1:col + 2].count(WALL) for r in (row - 1, row, row + 1))


def count_entrances(grid: DungeonGrid, row: int, col: int) -> int:
    """Count open cells on the 12-cell ring two steps out from a room centre."""

    get = grid.get
    entrances = 0
    for offset in ROOM_OFFSETS:
        entrances += get(row - 2, col + offset) is not WALL
        entrances += get(row + 2, col + offset) is not WALL
        entrances += get(row + offset, col - 2) is not WALL
        entrances += get(row + offset, col + 2) is not WALL
    return entrances


def find_chest_room(grid: DungeonGrid, row: int, col: int) -> ChestRoom:
    """Pick the most open 3x3 room that contains the chest at ``(row, col)``.

    Candidate centres lie within one step of the chest and at least one cell
    away from the edge. Ties keep the first centre found, scanning row offsets
    before column offsets.
    """

    best_centre: Position = (row, col)
    best_score = -1
    for dr in ROOM_OFFSETS:
        centre_row = row + dr
        if not ROOM_CENTRE_MIN <= centre_row <= ROOM_CENTRE_MAX:
            continue
        for dc in ROOM_OFFSETS:
            centre_col = col + dc
            if not ROOM_CENTRE_MIN <= centre_col <= ROOM_CENTRE_MAX:
                continue
            score = room_openness(grid, centre_row, centre_col)
            if score > best_score:
                best_centre = (centre_row, centre_col)
                best_score = score

    return ChestRoom(
        chest=(row, col),
        centre=best_centre,
        openness=best_score,
        entrances=count_entrances(grid, *best_centre),
    )


def chest_rooms(grid: DungeonGrid) -> List[ChestRoom]:
    return [find_chest_room(grid, r, c) for r, c in grid.positions_of(CellState.CHEST)]


def chest_room_cost(grid: DungeonGrid) -> Tuple[int, RoomMask]:
    """Score every chest room and return the cost with the union of room cells."""

    cost = 0
    mask: RoomMask = set()
    for room in chest_rooms(grid):
        cost += room.cost
        mask.update(room.cells)
    return cost, mask


# ----------------------------------------------------------------------
# Open areas and regions
# ----------------------------------------------------------------------
def open_block_cost(grid: DungeonGrid, room_mask: RoomMask) -> int:
    cells = grid.cells
    cost = 0
    for row in range(GRID_SIZE - 1):
        top = cells[row]
        bottom = cells[row + 1]
        for col in range(GRID_SIZE - 1):
            if (
                top[col] is WALL
                or top[col + 1] is WALL
                or bottom[col] is WALL
                or bottom[col + 1] is WALL
            ):
                continue
            if room_mask and (
                (row, col) in room_mask
                and (row, col + 1) in room_mask
                and (row + 1, col) in room_mask
                and (row + 1, col + 1) in room_mask
            ):
                continue
            cost += OPEN_BLOCK_PENALTY
    return cost


def count_regions(grid: DungeonGrid) -> int:
    """Count 4-connected regions of non-wall cells."""

    cells = grid.cells
    visited = [[False] * GRID_SIZE for _ in range(GRID_SIZE)]
    regions = 0
    for start_row in range(GRID_SIZE):
        for start_col in range(GRID_SIZE):
            if visited[start_row][start_col] or cells[start_row][start_col] is WALL:
                continue
            regions += 1
            visited[start_row][start_col] = True
            stack = [(start_row, start_col)]
            while stack:
                row, col = stack.pop()
                if row > 0 and not visited[row - 1][col] and cells[row - 1][col] is not WALL:
                    visited[row - 1][col] = True
                    stack.append((row - 1, col))
                if row < GRID_SIZE - 1 and not visited[row + 1][col] and cells[row + 1][col] is not WALL:
                    visited[row + 1][col] = True
                    stack.append((row + 1, col))
                if col > 0 and not visited[row][col - 1] and cells[row][col - 1] is not WALL:
                    visited[row][col - 1] = True
                    stack.append((row, col - 1))
                if col < GRID_SIZE - 1 and not visited[row][col + 1] and cells[row][col + 1] is not WALL:
                    visited[row][col + 1] = True
                    stack.append((row, col + 1))
    return regions


def connectivity_cost(grid: DungeonGrid) -> int:
    # A board with no open cell has no region to split.
    return max(count_regions(grid) - 1, 0) * REGION_PENALTY


def dead_end_cost(grid: DungeonGrid) -> int:
    get = grid.get
    cost = 0
    for row, cells in enumerate(grid.cells):
        for col, cell in enumerate(cells):
            if cell is WALL:
                continue
            walls = (
                (get(row - 1, col) is WALL)
                + (get(row + 1, col) is WALL)
                + (get(row, col - 1) is WALL)
                + (get(row, col + 1) is WALL)
            )
            if (walls == DEAD_END_WALLS) != (cell is MONSTER):
                cost += DEAD_END_PENALTY
    return cost


# ----------------------------------------------------------------------
# Totals
# ----------------------------------------------------------------------
def evaluate(grid: DungeonGrid) -> CostBreakdown:
    rooms, room_mask = chest_room_cost(grid)
    return CostBreakdown(
        wall_counts=wall_count_cost(grid),
        chest_rooms=rooms,
        open_blocks=open_block_cost(grid, room_mask),
        connectivity=connectivity_cost(grid),
        dead_ends=dead_end_cost(grid),
    )


def cost(grid: DungeonGrid) -> int:
    rooms, room_mask = chest_room_cost(grid)
    return (
        wall_count_cost(grid)
        + rooms
        + open_block_cost(grid, room_mask)
        + connectivity_cost(grid)
        + dead_end_cost(grid)
    )
