from __future__ import annotations
from dataclasses import dataclass

import numpy as np

from held_karp_tsp.structures import CostEntry, SubsetCostTable, NO_PREDECESSOR
from held_karp_tsp.utils.bitmask_utils import ORIGIN, ORIGIN_MASK


@dataclass(frozen=True, slots=True)
class HeldKarpTableState:
    """
    Holds everything a single Held-Karp solve reads and writes.

    A new state is allocated for every solve and discarded once the tour has
    been extracted, so repeated or concurrent solves never share a table.

    Attributes
    ----------
    distance : np.ndarray
        The read-only `N x N` distance matrix; `distance[i, j]` is the cost of
        travelling from city `i` to city `j`.
    table : SubsetCostTable
        The `(subset, terminal city)` cost and predecessor table.
    """
    distance: np.ndarray
    table: SubsetCostTable

    @property
    def num_cities(self) -> int:
        return self.table.num_cities


def make_table_state(distance: np.ndarray) -> HeldKarpTableState:
    """
    Allocates a fresh cost table for `distance` and seeds `C({0}, 0)`.

    Parameters
    ----------
    distance : np.ndarray
        A validated square `float64` distance matrix with N >= 1.

    Returns
    -------
    HeldKarpTableState
        A state whose size-1 level (the origin alone) is finalized with cost 0
        and no predecessor. All other cells are still open.

    Notes
    -----
    The distance matrix is marked read-only so nothing downstream can alter it
    mid-solve.
    """
    distance = np.array(distance, dtype=np.float64, copy=True)
    distance.setflags(write=False)

    table = SubsetCostTable(distance.shape[0])
    table.set(ORIGIN_MASK, ORIGIN, CostEntry(cost=0.0, predecessor=NO_PREDECESSOR))
    table.finalize_size(1)

    return HeldKarpTableState(distance=distance, table=table)
