"""Custom exception hierarchy for dungeon layout generation."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from ..engine.annealer import SearchState


class DungeonError(Exception):
    """Base exception for generator failures."""


class PuzzleFormatError(DungeonError):
    """Raised when a puzzle definition cannot be parsed."""


class GridShapeError(DungeonError):
    """Raised when a grid is built with the wrong dimensions or targets."""


class FixedCellError(DungeonError):
    """Raised when a write would alter a chest or monster cell."""


class SearchExhaustedError(DungeonError):
    """Raised when the search hits an external reset or time cap."""

    def __init__(self, message: str, state: Optional[SearchState] = None) -> None:
        super().__init__(message)
        self.state = state
