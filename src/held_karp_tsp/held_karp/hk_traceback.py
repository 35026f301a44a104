from __future__ import annotations
from dataclasses import dataclass
from typing import List, Sequence, Tuple
import math
import logging

import numpy as np

from held_karp_tsp.errors import InternalInvariantViolation
from held_karp_tsp.held_karp.hk_table_state import HeldKarpTableState
from held_karp_tsp.structures import NO_PREDECESSOR
from held_karp_tsp.utils.bitmask_utils import ORIGIN, ORIGIN_MASK, full_mask, has_city, without_city

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class TourResult:
    """
    The optimal closed tour produced by a Held-Karp solve.

    Attributes
    ----------
    cost : float
        Total length of the cycle, including the closing edge back to the origin.
    tour : List[int]
        The `N + 1` visited cities, starting and ending at the origin.
    """
    cost: float
    tour: List[int]

    @property
    def num_cities(self) -> int:
        return len(self.tour) - 1


def tour_cost(distance: np.ndarray, tour: Sequence[int]) -> float:
    """
    Sums `distance[tour[k], tour[k + 1]]` along a tour, left to right.

    The summation order matches the order in which the DP accumulates a
    path, so for a tour returned by `traceback_tour` the result equals the
    reported cost exactly.
    """
    total = 0.0
    for k in range(len(tour) - 1):
        total += float(distance[tour[k], tour[k + 1]])
    return total


def best_closing_city(state: HeldKarpTableState) -> Tuple[int, float]:
    """
    Picks the last city before returning to the origin.

    Returns
    -------
    Tuple[int, float]
        `(j, C(F, j) + d(j, 0))` minimising the closed-cycle cost over every
        `j != 0`, where `F` is the full city set. Ties keep the lowest `j`.
    """
    n = state.num_cities
    mask = full_mask(n)
    best_city = NO_PREDECESSOR
    best_cost = math.inf

    for j, entry in state.table.iter_entries(mask):
        if j == ORIGIN:
            continue
        cand_cost = entry.cost + float(state.distance[j, ORIGIN])
        if cand_cost < best_cost:
            best_city, best_cost = j, cand_cost

    if best_city == NO_PREDECESSOR:
        raise InternalInvariantViolation(f"No finite closing edge found for N={n}; table looks unfilled.")
    return best_city, best_cost


def traceback_tour(state: HeldKarpTableState) -> TourResult:
    """
    Reconstructs the optimal tour from a completely filled table.

    The closing edge is added here, after the fill. The walk then starts at
    `(F, last)` and follows predecessors, removing each terminal city from the
    subset, until only `({0}, 0)` remains.

    Parameters
    ----------
    state : HeldKarpTableState
        A state on which `HeldKarpEngine.fill_all_subsets` has run.

    Returns
    -------
    TourResult
        The optimal cost and the origin-to-origin city order.

    Raises
    ------
    InternalInvariantViolation
        If the table is not complete, a predecessor is missing before the walk
        reaches the origin, or a predecessor is not a member of its subset.
    """
    n = state.num_cities
    table = state.table

    if not table.is_complete():
        raise InternalInvariantViolation(
            f"Traceback requested with subsets finalized only up to size {table.finalized_size} of {n}."
        )

    if n == 1:
        return TourResult(cost=float(state.distance[ORIGIN, ORIGIN]), tour=[ORIGIN, ORIGIN])

    last_city, optimal_cost = best_closing_city(state)

    # Walk backward; `reversed_path` collects terminals from the last city to the first.
    reversed_path: List[int] = []
    mask = full_mask(n)
    city = last_city
    while mask != ORIGIN_MASK:
        entry = table.get(mask, city)
        if not entry.has_predecessor:
            raise InternalInvariantViolation(
                f"Missing predecessor for C({mask:#b}, {city}) before the path reached the origin."
            )
        reversed_path.append(city)
        mask = without_city(mask, city)
        city = entry.predecessor
        if not has_city(mask, city):
            raise InternalInvariantViolation(f"Predecessor {city} is not a member of subset {mask:#b}.")

    if city != ORIGIN:
        raise InternalInvariantViolation(f"Predecessor chain ended at city {city} instead of the origin.")

    tour = [ORIGIN] + reversed_path[::-1] + [ORIGIN]
    logger.debug(f"Reconstructed tour {tour} with cost {optimal_cost}")
    return TourResult(cost=optimal_cost, tour=tour)
