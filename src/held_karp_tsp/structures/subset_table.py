from __future__ import annotations
from dataclasses import dataclass
from typing import Final, Iterator, Tuple

import numpy as np

from held_karp_tsp.errors import InternalInvariantViolation
from held_karp_tsp.utils.bitmask_utils import ORIGIN_MASK, has_city, origin_row, popcount

INF = np.inf

# Predecessor sentinel for cells with no incoming edge: C({0}, 0) and every C(S, 0) with |S| > 1.
NO_PREDECESSOR: Final[int] = -1


@dataclass(frozen=True, slots=True)
class CostEntry:
    """
    A single finalized cell of the Held-Karp cost table.

    Attributes
    ----------
    cost : float
        Minimum length of a path that starts at the origin, visits every city of
        the subset exactly once and ends at the terminal city. `inf` when no
        such path exists.
    predecessor : int
        The city visited immediately before the terminal city on that path, or
        `NO_PREDECESSOR`.
    """
    cost: float
    predecessor: int = NO_PREDECESSOR

    @property
    def has_predecessor(self) -> bool:
        return self.predecessor != NO_PREDECESSOR


class SubsetCostTable:
    """
    Dense `(subset, terminal city)` table holding only origin-containing subsets.

    Rows are addressed by `mask >> 1`, so the table has `2^(n-1)` rows and `n`
    columns rather than `2^n`. Costs live in a `float64` array initialised to
    `inf` and predecessors in an `int64` array initialised to `NO_PREDECESSOR`.

    Subset sizes are finalized in ascending order. Reads are only permitted on
    finalized sizes and writes only on sizes that are still open, which makes
    an out-of-order fill fail loudly instead of silently reading defaults.
    """
    __slots__ = ("_num_cities", "_costs", "_predecessors", "_finalized_size")

    def __init__(self, num_cities: int):
        self._num_cities = num_cities
        num_rows = 1 << (num_cities - 1)
        self._costs = np.full((num_rows, num_cities), INF, dtype=np.float64)
        self._predecessors = np.full((num_rows, num_cities), NO_PREDECESSOR, dtype=np.int64)
        self._finalized_size = 0

    @property
    def num_cities(self) -> int:
        """Returns the number of cities N the table was allocated for."""
        return self._num_cities

    @property
    def shape(self) -> Tuple[int, int]:
        """Returns the storage shape `(2^(N-1), N)`."""
        return self._costs.shape

    @property
    def finalized_size(self) -> int:
        """Returns the largest subset size whose cells are frozen (0 if none)."""
        return self._finalized_size

    @property
    def costs(self) -> np.ndarray:
        """Raw cost array, exposed for the jitted fill kernel."""
        return self._costs

    @property
    def predecessors(self) -> np.ndarray:
        """Raw predecessor array, exposed for the jitted fill kernel."""
        return self._predecessors

    def _row(self, mask: int, city: int) -> int:
        """Validates `(mask, city)` and returns the dense row index."""
        if mask & ORIGIN_MASK == 0:
            raise InternalInvariantViolation(f"Subset {mask:#b} does not contain the origin city.")
        if mask < 0 or mask >= (1 << self._num_cities):
            raise InternalInvariantViolation(f"Subset {mask:#b} is out of range for N={self._num_cities}.")
        if city < 0 or city >= self._num_cities or not has_city(mask, city):
            raise InternalInvariantViolation(f"Terminal city {city} is not a member of subset {mask:#b}.")
        return origin_row(mask)

    def get(self, mask: int, city: int) -> CostEntry:
        """
        Retrieves the finalized entry `C(mask, city)`.

        Parameters
        ----------
        mask : int
            An origin-containing subset bitmask.
        city : int
            The terminal city, which must be a member of `mask`.

        Returns
        -------
        CostEntry
            A fresh immutable snapshot of the cell.

        Raises
        ------
        InternalInvariantViolation
            If the key is invalid or the subset's size has not been finalized.
        """
        row = self._row(mask, city)
        size = popcount(mask)
        if size > self._finalized_size:
            raise InternalInvariantViolation(
                f"Read of C({mask:#b}, {city}) before subsets of size {size} were finalized "
                f"(finalized up to {self._finalized_size})."
            )
        return CostEntry(cost=float(self._costs[row, city]), predecessor=int(self._predecessors[row, city]))

    def set(self, mask: int, city: int, entry: CostEntry) -> None:
        """
        Writes `entry` into the still-open cell `C(mask, city)`.

        Raises
        ------
        InternalInvariantViolation
            If the key is invalid or the subset's size is already finalized.
        """
        row = self._row(mask, city)
        size = popcount(mask)
        if size <= self._finalized_size:
            raise InternalInvariantViolation(
                f"Write to C({mask:#b}, {city}) after subsets of size {size} were finalized."
            )
        self._costs[row, city] = entry.cost
        self._predecessors[row, city] = entry.predecessor

    def finalize_size(self, size: int) -> None:
        """
        Freezes every subset of `size` cities.

        Sizes must be finalized one at a time, in ascending order.
        """
        if size != self._finalized_size + 1:
            raise InternalInvariantViolation(
                f"Cannot finalize size {size}; next expected size is {self._finalized_size + 1}."
            )
        if size > self._num_cities:
            raise InternalInvariantViolation(f"Subset size {size} exceeds N={self._num_cities}.")
        self._finalized_size = size

    def is_complete(self) -> bool:
        """True once every subset size up to N has been finalized."""
        return self._finalized_size == self._num_cities

    def iter_entries(self, mask: int) -> Iterator[Tuple[int, CostEntry]]:
        """Yields `(city, entry)` for every member city of a finalized subset."""
        for city in range(self._num_cities):
            if has_city(mask, city):
                yield city, self.get(mask, city)
