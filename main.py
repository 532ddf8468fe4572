"""CLI entrypoint for the dungeon room layout generator."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Any, Dict

from dungeon.core.constants import DEFAULT_MAX_ITERS
from dungeon.core.exceptions import PuzzleFormatError, SearchExhaustedError
from dungeon.engine.annealer import AnnealConfig, DungeonAnnealer
from dungeon.engine.cost import evaluate
from dungeon.io.puzzle import load_puzzle
from dungeon.utils.logger import configure_logging, get_logger
from dungeon.utils.pretty import print_result


LOGGER = get_logger("dungeon.cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Generate a valid dungeon room layout by simulated annealing",
    )
    parser.add_argument(
        "puzzle",
        type=Path,
        nargs="?",
        default=Path("input.txt"),
        help="Puzzle definition file (default: input.txt)",
    )
    parser.add_argument("--seed", type=int, default=None, help="Random seed for reproducibility")
    parser.add_argument(
        "--max-iters",
        type=int,
        default=DEFAULT_MAX_ITERS,
        help="Iterations per cooling cycle before a restart",
    )
    parser.add_argument(
        "--max-resets",
        type=int,
        default=None,
        help="Give up after this many restarts (default: unlimited)",
    )
    parser.add_argument(
        "--time-limit",
        type=float,
        default=None,
        help="Give up after this many seconds (default: unlimited)",
    )
    parser.add_argument("--output", type=Path, help="Optional path to JSON output")
    parser.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        help="Logging level (DEBUG, INFO, WARNING, ERROR)",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    level = getattr(logging, args.log_level.upper(), logging.INFO)
    configure_logging(level)

    try:
        config = AnnealConfig(
            max_iters=args.max_iters,
            seed=args.seed,
            max_resets=args.max_resets,
            time_limit_seconds=args.time_limit,
        )
    except ValueError as exc:
        parser.error(str(exc))

    try:
        grid = load_puzzle(args.puzzle)
    except PuzzleFormatError as exc:
        parser.error(str(exc))

    annealer = DungeonAnnealer(config)
    try:
        result = annealer.solve(grid)
    except SearchExhaustedError as exc:
        LOGGER.error("Search failed: %s", exc)
        if exc.state is not None:
            LOGGER.error("Last cost breakdown: %s", evaluate(exc.state.grid).describe())
        raise SystemExit(1) from exc

    print_result(result)

    if args.output:
        payload: Dict[str, Any] = {
            "grid": result.grid.to_jsonable(),
            "iterations": result.iterations,
            "resets": result.reset_count,
            "total_iterations": result.total_iterations,
            "elapsed_seconds": result.elapsed_seconds,
            "seed": result.seed,
        }
        args.output.write_text(json.dumps(payload, indent=2), encoding="utf-8")


if __name__ == "__main__":  # pragma: no cover
    main()
