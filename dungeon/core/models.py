"""Data models supporting the cost evaluator."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

from .constants import ROOM_AREA, ROOM_OFFSETS, SEALED_ROOM_PENALTY, Position


@dataclass(frozen=True)
class ChestRoom:
    """The 3x3 room chosen around a chest, with its openness and entrances."""

    chest: Position
    centre: Position
    openness: int
    entrances: int

    @property
    def cells(self) -> List[Position]:
        row, col = self.centre
        return [(row + dr, col + dc) for dr in ROOM_OFFSETS for dc in ROOM_OFFSETS]

    @property
    def cost(self) -> int:
        cost = ROOM_AREA - self.openness
        if self.entrances == 0:
            cost += SEALED_ROOM_PENALTY
        else:
            cost += self.entrances - 1
        return cost


@dataclass(frozen=True)
class CostBreakdown:
    """Per-term cost of a grid."""

    wall_counts: int = 0
    chest_rooms: int = 0
    open_blocks: int = 0
    connectivity: int = 0
    dead_ends: int = 0

    @property
    def total(self) -> int:
        return (
            self.wall_counts
            + self.chest_rooms
            + self.open_blocks
            + self.connectivity
            + self.dead_ends
        )

    def describe(self) -> str:
        return (
            f"walls={self.wall_counts} rooms={self.chest_rooms} "
            f"blocks={self.open_blocks} regions={self.connectivity} "
            f"dead_ends={self.dead_ends}"
        )
