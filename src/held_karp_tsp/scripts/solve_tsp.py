#!/usr/bin/env python3
"""
Solve the Traveling Salesman Problem exactly from the command line.

This script reads a distance matrix file (N on the first line, then N rows of
N non-negative numbers), runs the Held-Karp dynamic program and prints the
optimal tour and its cost.

Examples:
  - python solve_tsp.py cities.txt
  - python solve_tsp.py --backend numba --workers 4 --json cities.txt
  - python solve_tsp.py -vv --config my_solver.yaml --cost-only cities.txt

"""

# --- Standard Library Imports ---
from __future__ import annotations
import argparse
import json
import sys
import logging
import time
from pathlib import Path
from typing import Optional

# --- Local Application Imports ---
from held_karp_tsp.utils.logging_utils import get_log_file_path, make_file_handler, setup_logger
from held_karp_tsp.errors import CapacityExceededError, InvalidInputError, HeldKarpError
from held_karp_tsp.config import load_solver_config
from held_karp_tsp.matrices import load_distance_matrix
from held_karp_tsp.solver import solve

# Set up module logger
logger = logging.getLogger(__name__)


# --------------------------
# Logging Configuration
# --------------------------
LOGGERS_TO_CONFIGURE = (
    __name__,
    "held_karp_tsp.solver",
    "held_karp_tsp.config.solver_config",
    "held_karp_tsp.matrices.matrix_loader",
    "held_karp_tsp.held_karp.subset_enumerator",
    "held_karp_tsp.held_karp.hk_recurrences",
    "held_karp_tsp.held_karp.hk_traceback",
)


def setup_cli_logging(verbose_level: int, matrix_file: str, log_file: Optional[str] = None) -> Optional[Path]:
    """
    Configures logging for the solver based on command-line arguments.

    Parameters
    ----------
    verbose_level : int
        The verbosity level: 0 for WARNING, 1 for INFO, 2 for DEBUG.
    matrix_file : str
        The matrix being solved; names the default log file.
    log_file : Optional[str]
        The path to a specific log file. If not provided, one log file per run
        is created in `var/log/` when verbosity is > 0.

    Returns
    -------
    Optional[Path]
        The log file of this run, or None when logging is console-only.
    """
    level_map = {
        0: logging.WARNING,
        1: logging.INFO,
        2: logging.DEBUG,
    }
    log_level = level_map.get(verbose_level, logging.DEBUG)

    log_path = None
    file_handler = None
    if verbose_level > 0 or log_file is not None:
        log_path = Path(log_file) if log_file is not None else get_log_file_path(matrix_file)
        file_handler = make_file_handler(log_path, level=log_level)

    for logger_name in LOGGERS_TO_CONFIGURE:
        setup_logger(logger_name, level=log_level, file_handler=file_handler)

    if log_path is not None:
        logger.info(f"Logs will be saved to: {log_path.resolve()}")
    return log_path


def format_tour(tour: list[int]) -> str:
    """Render a tour as `0 -> 2 -> 1 -> 0`."""
    return " -> ".join(str(city) for city in tour)


# --------------------------
# Command-Line Interface
# --------------------------
def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Exact TSP tour and cost via Held-Karp dynamic programming.")
    parser.add_argument("matrix_file",
                        help="Distance matrix file: N, then N*N non-negative numbers (one row per line or all on one line).")
    parser.add_argument("--config", default=None,
                        help="Path to solver settings YAML (defaults to package data).")
    parser.add_argument("--backend", choices=["python", "numba"], default=None,
                        help="Override the fill backend.")
    parser.add_argument("--workers", type=int, default=None,
                        help="Threads per subset-size level (numba backend).")
    parser.add_argument("--max-cities", type=int, default=None,
                        help="Override the largest accepted city count.")
    parser.add_argument("--cost-only", action="store_true",
                        help="Print only the optimal tour cost.")
    parser.add_argument("--json", action="store_true",
                        help="Emit JSON instead of human-readable text.")

    # Logging arguments
    parser.add_argument("-v", "--verbose", action="count", default=0,
                        help="Increase verbosity (-v=INFO, -vv=DEBUG)")
    parser.add_argument("--log-file", default=None,
                        help="Path to log file (default: var/log/solve_<matrix>_TIMESTAMP.log if verbose)")
    parser.add_argument("--quiet", action="store_true",
                        help="Suppress all output except the final result")
    return parser


def main(argv=None) -> int:
    """
    Parses command-line arguments and runs the solver.

    Returns
    -------
    int
        0 on success, 2 for bad input or configuration (including capacity),
        1 for an internal failure.
    """
    cli_args = build_parser().parse_args(argv)

    # --- Setup ---
    verbose_level = 0 if cli_args.quiet else cli_args.verbose
    setup_cli_logging(verbose_level, cli_args.matrix_file, cli_args.log_file)

    logger.info("=" * 60)
    logger.info("Held-Karp TSP Solver CLI")
    logger.info("=" * 60)

    try:
        config = load_solver_config(
            cli_args.config,
            backend=cli_args.backend,
            workers=cli_args.workers,
            max_cities=cli_args.max_cities,
        )
        distance = load_distance_matrix(cli_args.matrix_file)
    except (InvalidInputError, OSError) as e:
        logger.error(f"Failed to load input: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return 2

    # --- Solve ---
    start_time = time.perf_counter()
    try:
        result = solve(distance, config)
    except (InvalidInputError, CapacityExceededError) as e:
        logger.error(f"Input rejected: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return 2
    except HeldKarpError as e:
        logger.error(f"Solve failed: {e}", exc_info=True)
        print(f"Solve failed: {e}", file=sys.stderr)
        return 1
    elapsed = time.perf_counter() - start_time

    logger.info("=" * 60)
    logger.info(f"Solve successful in {elapsed:.2f}s")
    logger.info("=" * 60)

    # --- Output ---
    if cli_args.json:
        payload = {"cost": result.cost, "num_cities": result.num_cities}
        if not cli_args.cost_only:
            payload["tour"] = result.tour
        print(json.dumps(payload, indent=2))
    elif cli_args.cost_only:
        print(f"{result.cost:g}")
    else:
        print(f"Cities : {result.num_cities}")
        print(f"Tour : {format_tour(result.tour)}")
        print(f"Cost : {result.cost:g}")

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
