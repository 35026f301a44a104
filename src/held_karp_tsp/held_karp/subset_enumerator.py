from __future__ import annotations
import logging
from typing import Dict, List, Optional

import numpy as np

from held_karp_tsp.errors import CapacityExceededError, InvalidInputError
from held_karp_tsp.utils.bitmask_utils import BITMASK_WIDTH_LIMIT, ORIGIN_MASK, popcount

logger = logging.getLogger(__name__)


def validate_city_count(n: int, max_cities: Optional[int] = None) -> int:
    """
    Checks that `n` is a usable number of cities.

    Parameters
    ----------
    n : int
        The requested number of cities.
    max_cities : Optional[int]
        A configured upper bound. The hard bitmask limit always applies on top.

    Returns
    -------
    int
        `n`, unchanged.

    Raises
    ------
    InvalidInputError
        If `n` is not an integer or is not positive.
    CapacityExceededError
        If `n` exceeds `max_cities` or `BITMASK_WIDTH_LIMIT`.
    """
    # bool is an int subclass but never a city count.
    if isinstance(n, bool) or not isinstance(n, (int, np.integer)):
        raise InvalidInputError(f"Number of cities must be an integer, got {n!r}.")
    n = int(n)
    if n <= 0:
        raise InvalidInputError(f"Number of cities must be positive, got N={n}.")

    limit = BITMASK_WIDTH_LIMIT if max_cities is None else min(max_cities, BITMASK_WIDTH_LIMIT)
    if n > limit:
        raise CapacityExceededError(n, limit)
    return n


def enumerate_origin_subsets(n: int, max_cities: Optional[int] = None) -> List[int]:
    """
    Lists every subset of `{0, ..., n-1}` that contains the origin city.

    The result holds `2^(n-1)` bitmasks ordered by ascending subset size, with
    ties broken by numeric value. This is the dependency order of the
    Held-Karp recurrence: all subsets of size `s` precede any subset of size
    `s + 1`.

    Parameters
    ----------
    n : int
        The number of cities (N >= 1).
    max_cities : Optional[int]
        Optional configured cap on `n`.

    Returns
    -------
    List[int]
        The ordered origin-containing bitmasks. For `n == 1` this is `[1]`.
    """
    n = validate_city_count(n, max_cities)
    # Odd numbers below 2^n are exactly the masks with bit 0 set.
    masks = range(ORIGIN_MASK, 1 << n, 2)
    return sorted(masks, key=lambda mask: (popcount(mask), mask))


def origin_subsets_by_size(n: int, max_cities: Optional[int] = None) -> Dict[int, np.ndarray]:
    """
    Groups the origin-containing subsets by size.

    Parameters
    ----------
    n : int
        The number of cities.
    max_cities : Optional[int]
        Optional configured cap on `n`.

    Returns
    -------
    Dict[int, np.ndarray]
        Maps each size `s` in `1..n` to an ascending `int64` array of the
        `C(n-1, s-1)` masks of that size. Iteration order of the dict is
        ascending `s`.
    """
    levels: Dict[int, List[int]] = {size: [] for size in range(1, validate_city_count(n, max_cities) + 1)}
    for mask in enumerate_origin_subsets(n, max_cities):
        levels[popcount(mask)].append(mask)

    logger.debug(f"Enumerated {sum(len(v) for v in levels.values()):,} origin subsets for N={n}")
    return {size: np.asarray(masks, dtype=np.int64) for size, masks in levels.items()}
