from __future__ import annotations
from typing import Any, Optional
import time
import logging

from held_karp_tsp.held_karp import (
    HeldKarpConfig,
    HeldKarpEngine,
    TourResult,
    make_table_state,
    traceback_tour,
)
from held_karp_tsp.held_karp.subset_enumerator import validate_city_count
from held_karp_tsp.matrices import validate_distance_matrix

logger = logging.getLogger(__name__)


def solve(distance: Any, config: Optional[HeldKarpConfig] = None) -> TourResult:
    """
    Computes the exact minimum-cost tour over a dense distance matrix.

    Every call validates its input, allocates its own cost table, fills it,
    extracts the tour and then lets the table go. Nothing is cached between
    calls.

    Parameters
    ----------
    distance : Any
        An `N x N` nested sequence or array of non-negative weights.
        `distance[i][j]` is the cost from city `i` to city `j`.
    config : Optional[HeldKarpConfig]
        Fill settings. Defaults to `HeldKarpConfig()`.

    Returns
    -------
    TourResult
        The optimal cycle cost and the `N + 1` city tour from and to city 0.

    Raises
    ------
    InvalidInputError
        If the matrix is malformed. Raised before any table is allocated.
    CapacityExceededError
        If N exceeds `config.max_cities` or the bitmask width limit.
    InternalInvariantViolation
        If the fill or traceback detects an internal inconsistency.
    """
    if config is None:
        config = HeldKarpConfig()

    # Validation and capacity checks run before the 2^(N-1) x N table exists.
    matrix = validate_distance_matrix(distance)
    n = validate_city_count(matrix.shape[0], config.max_cities)

    start_time = time.perf_counter()
    state = make_table_state(matrix)

    engine = HeldKarpEngine(config=config)
    engine.fill_all_subsets(state)

    result = traceback_tour(state)

    elapsed = time.perf_counter() - start_time
    logger.info(f"Solved N={n} in {elapsed:.2f}s")
    logger.info(f"Optimal tour cost: {result.cost}")
    logger.debug(f"Optimal tour: {result.tour}")

    return result


def solve_cost(distance: Any, config: Optional[HeldKarpConfig] = None) -> float:
    """Return only the optimal tour cost for `distance`."""
    return solve(distance, config).cost
