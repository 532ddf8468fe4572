"""Dungeon room layout generator driven by simulated annealing.

This package exposes the public API surface via:

- ``dungeon.engine.annealer.DungeonAnnealer``: runs the annealing search.
- ``dungeon.engine.grid.DungeonGrid``: the 8x8 board with wall targets.
- ``dungeon.engine.cost``: the five-term layout cost.
- ``dungeon.io.puzzle`` helpers: puzzle file parsing.
"""

from .core.constants import CellState
from .engine.annealer import AnnealConfig, AnnealResult, DungeonAnnealer
from .engine.cost import cost, evaluate
from .engine.grid import DungeonGrid
from .io.puzzle import load_puzzle, parse_puzzle

__all__ = [
    "AnnealConfig",
    "AnnealResult",
    "CellState",
    "DungeonAnnealer",
    "DungeonGrid",
    "cost",
    "evaluate",
    "load_puzzle",
    "parse_puzzle",
]

__version__ = "0.1.0"
