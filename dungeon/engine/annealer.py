"""Simulated-annealing search over dungeon layouts.

One chain is kept: each iteration flips a single changeable cell, and the
proposal replaces the current grid when it lowers the cost or wins the
temperature-dependent draw. Temperature falls linearly over ``max_iters``
iterations; when the cycle runs out the grid is re-randomized and cooling
starts again. The search ends as soon as the cost reaches zero.
"""

from __future__ import annotations

import logging
import math
import random
import time
from dataclasses import dataclass
from typing import Optional

from ..core.constants import DEFAULT_MAX_ITERS
from ..core.exceptions import SearchExhaustedError
from ..utils.logger import get_logger
from .cost import cost, evaluate
from .grid import DungeonGrid
from .neighbors import step


LOGGER = get_logger(__name__)


@dataclass
class AnnealConfig:
    """Configuration values driving the annealing search."""

    max_iters: int = DEFAULT_MAX_ITERS
    seed: Optional[int] = None
    max_resets: Optional[int] = None
    time_limit_seconds: Optional[float] = None
    randomize_start: bool = True
    log_interval: int = 1000

    def __post_init__(self) -> None:
        if self.max_iters <= 0:
            raise ValueError("max_iters must be positive")
        if self.max_resets is not None and self.max_resets < 0:
            raise ValueError("max_resets cannot be negative")
        if self.time_limit_seconds is not None and self.time_limit_seconds <= 0:
            raise ValueError("time_limit_seconds must be positive")
        if self.log_interval <= 0:
            raise ValueError("log_interval must be positive")


@dataclass
class SearchState:
    grid: DungeonGrid
    cost: int
    iteration: int = 0
    reset_count: int = 0
    total_iterations: int = 0

    @property
    def solved(self) -> bool:
        return self.cost == 0


@dataclass
class AnnealResult:
    grid: DungeonGrid
    iterations: int
    reset_count: int
    total_iterations: int
    elapsed_seconds: float
    seed: Optional[int] = None


class DungeonAnnealer:
    """Drives the annealing search from a puzzle grid to a valid layout."""

    def __init__(self, config: Optional[AnnealConfig] = None, rng: Optional[random.Random] = None) -> None:
        self.config = config or AnnealConfig()
        self.rng = rng or random.Random(self.config.seed)

    # ------------------------------------------------------------------
    # Public entrypoint
    # ------------------------------------------------------------------
    def solve(self, grid: DungeonGrid) -> AnnealResult:
        started = time.monotonic()
        deadline = (
            started + self.config.time_limit_seconds
            if self.config.time_limit_seconds is not None
            else None
        )
        state = self.start(grid)
        LOGGER.info("Starting annealing search at cost %s", state.cost)

        if not state.solved and not grid.changeable_positions():
            raise SearchExhaustedError(
                f"Grid has no changeable cell and scores {state.cost}", state
            )

        while not state.solved:
            if deadline is not None and time.monotonic() >= deadline:
                raise SearchExhaustedError(
                    f"Time limit of {self.config.time_limit_seconds}s reached at cost {state.cost}",
                    state,
                )
            self.advance(state)
            if (
                state.iteration
                and state.iteration % self.config.log_interval == 0
                and LOGGER.isEnabledFor(logging.DEBUG)
            ):
                LOGGER.debug(
                    "Iteration %s: cost %s, temperature %.3f (%s)",
                    state.iteration,
                    state.cost,
                    self.temperature(state.iteration),
                    evaluate(state.grid).describe(),
                )

        elapsed = time.monotonic() - started
        LOGGER.info(
            "Solved in %s iterations and %s resets (%.2fs)",
            state.iteration,
            state.reset_count,
            elapsed,
        )
        return AnnealResult(
            grid=state.grid,
            iterations=state.iteration,
            reset_count=state.reset_count,
            total_iterations=state.total_iterations,
            elapsed_seconds=elapsed,
            seed=self.config.seed,
        )

    # ------------------------------------------------------------------
    # Search steps
    # ------------------------------------------------------------------
    def start(self, grid: DungeonGrid) -> SearchState:
        current = grid.copy()
        if self.config.randomize_start:
            current.randomize(self.rng)
        return SearchState(grid=current, cost=cost(current))

    def advance(self, state: SearchState) -> None:
        """Run one propose/accept iteration, restarting when the cycle ends."""

        candidate = step(state.grid, self.rng)
        candidate_cost = cost(candidate)
        temperature = self.temperature(state.iteration)
        if self.accepts(state.cost, candidate_cost, temperature, self.rng.random()):
            state.grid = candidate
            state.cost = candidate_cost

        state.iteration += 1
        state.total_iterations += 1
        if state.solved:
            return
        if state.iteration >= self.config.max_iters:
            self.restart(state)

    def restart(self, state: SearchState) -> None:
        """Start a new cooling cycle from a freshly randomized copy of the grid.

        Raises ``SearchExhaustedError`` instead when ``max_resets`` restarts
        have already happened; the state then still holds the last cycle.
        """

        max_resets = self.config.max_resets
        if max_resets is not None and state.reset_count >= max_resets:
            raise SearchExhaustedError(f"No valid layout within {max_resets} resets", state)
        LOGGER.info(
            "Restarting search (reset %s) after %s iterations at cost %s",
            state.reset_count + 1,
            state.iteration,
            state.cost,
        )
        fresh = state.grid.copy()
        fresh.randomize(self.rng)
        state.grid = fresh
        state.cost = cost(fresh)
        state.iteration = 0
        state.reset_count += 1

    def temperature(self, iteration: int) -> float:
        return 1.0 - iteration / self.config.max_iters

    @staticmethod
    def accepts(current_cost: int, candidate_cost: int, temperature: float, draw: float) -> bool:
        if candidate_cost < current_cost:
            return True
        return math.exp(-(candidate_cost - current_cost) / temperature) > draw

