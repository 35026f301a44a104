from __future__ import annotations
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Literal
import math
import time
import logging

import numpy as np
from tqdm import tqdm

from held_karp_tsp.errors import InvalidInputError
from held_karp_tsp.held_karp.hk_table_state import HeldKarpTableState
from held_karp_tsp.held_karp.numba_kernels import fill_masks_kernel
from held_karp_tsp.held_karp.subset_enumerator import origin_subsets_by_size
from held_karp_tsp.structures import CostEntry, NO_PREDECESSOR
from held_karp_tsp.utils.bitmask_utils import ORIGIN, ORIGIN_MASK, iter_members, without_city

logger = logging.getLogger(__name__)

Backend = Literal["python", "numba"]
BACKENDS = ("python", "numba")

# Default cap on N; a 20-city table is 2^19 x 20 cells (~160 MB for costs + predecessors).
DEFAULT_MAX_CITIES = 20


@dataclass(slots=True)
class HeldKarpConfig:
    """
    Configuration settings for the Held-Karp fill.

    Attributes
    ----------
    backend : {"python", "numba"}
        Which level filler to run. Both produce identical tables.
    workers : int
        Threads used per subset-size level by the numba backend. Ignored by
        the python backend.
    max_cities : int
        Largest N accepted before failing with `CapacityExceededError`.
    verbose : bool
        If True, shows a progress bar over subset-size levels.
    """
    backend: Backend = "python"
    workers: int = 1
    max_cities: int = DEFAULT_MAX_CITIES
    verbose: bool = False


@dataclass(slots=True)
class HeldKarpEngine:
    """
    Implements the Held-Karp dynamic programming recurrence.

    The engine fills `C(S, j)` for every origin-containing subset `S` and
    terminal `j` in `S`, one subset size at a time. A size level is finalized
    on the table before the next one starts, and every lookup made while
    filling size `s` refers to a subset of size `s - 1`.

    Attributes
    ----------
    config : HeldKarpConfig
        A configuration object containing settings for the fill.
    """
    config: HeldKarpConfig

    def fill_all_subsets(self, state: HeldKarpTableState) -> None:
        """
        Executes the full Held-Karp fill on a freshly made state.

        Parameters
        ----------
        state : HeldKarpTableState
            The state returned by `make_table_state`, with only the `{0}` level
            finalized.
        """
        start_time = time.perf_counter()
        n = state.num_cities

        if self.config.backend not in BACKENDS:
            raise InvalidInputError(f"Unknown backend {self.config.backend!r}; expected one of {BACKENDS}.")

        if n == 1:
            logger.info("Held-Karp DP: single city; nothing to fill.")
            return

        logger.info("=" * 60)
        logger.info(f"Held-Karp DP for N={n} cities ({self.config.backend} backend)")
        logger.info(f"Table cells: {state.table.shape[0] * n:,}")
        logger.info(f"Expected complexity: O(N² 2^N) ≈ {n * n * (1 << n):,} operations")
        logger.info("=" * 60)

        levels = origin_subsets_by_size(n, self.config.max_cities)

        # ---------- 1. Base cases: C({0, j}, j) = d(0, j) ----------
        self._fill_pairs(state, levels[2])

        # ---------- 2. General recurrence, size 3 .. N ----------
        show_progress = self.config.verbose or logger.isEnabledFor(logging.INFO)
        size_iter = tqdm(range(3, n + 1), desc="Held-Karp DP", leave=True, disable=not show_progress)

        for size in size_iter:
            masks = levels[size]
            if self.config.backend == "numba":
                self._fill_level_numba(state, masks)
            else:
                for mask in masks:
                    self._fill_subset(state, int(mask))
            # Barrier: every subset of this size is complete before the next size is read.
            state.table.finalize_size(size)
            logger.debug(f"Finalized {len(masks):,} subsets of size {size}")

        elapsed = time.perf_counter() - start_time
        logger.info(f"Held-Karp DP completed in {elapsed:.2f}s ({elapsed * 1000:.0f}ms)")

    def _fill_pairs(self, state: HeldKarpTableState, masks: np.ndarray) -> None:
        """
        Sets the size-2 level explicitly.

        `C({0, j}, j)` is the direct edge from the origin with predecessor 0,
        and `C({0, j}, 0)` is infinite.
        """
        table = state.table
        distance = state.distance
        for mask in masks:
            mask = int(mask)
            j = (mask ^ ORIGIN_MASK).bit_length() - 1
            table.set(mask, ORIGIN, CostEntry(cost=math.inf, predecessor=NO_PREDECESSOR))
            table.set(mask, j, CostEntry(cost=float(distance[ORIGIN, j]), predecessor=ORIGIN))
        table.finalize_size(2)

    def _fill_subset(self, state: HeldKarpTableState, mask: int) -> None:
        """
        Fills every cell `C(mask, j)` for a subset of size 3 or more.

        Notes
        -----
        `C(mask, j) = min_{i in mask - {0, j}} C(mask - {j}, i) + d(i, j)`.
        Candidates are scanned in ascending `i` and only a strictly smaller
        cost replaces the incumbent, so ties keep the lowest predecessor.
        """
        table = state.table
        distance = state.distance

        table.set(mask, ORIGIN, CostEntry(cost=math.inf, predecessor=NO_PREDECESSOR))

        for j in iter_members(mask):
            if j == ORIGIN:
                continue
            prev_mask = without_city(mask, j)

            best_cost = math.inf
            best_pred = NO_PREDECESSOR
            for i in iter_members(prev_mask):
                if i == ORIGIN:
                    continue
                cand_cost = table.get(prev_mask, i).cost + distance[i, j]
                if cand_cost < best_cost:
                    best_cost, best_pred = float(cand_cost), i

            table.set(mask, j, CostEntry(cost=best_cost, predecessor=best_pred))

    def _fill_level_numba(self, state: HeldKarpTableState, masks: np.ndarray) -> None:
        """
        Fills one subset-size level with the jitted kernel.

        With `workers > 1` the level's masks are split into disjoint chunks,
        one per thread. The method returns only after every chunk finishes.
        """
        costs = state.table.costs
        predecessors = state.table.predecessors
        workers = max(1, self.config.workers)

        if workers == 1 or len(masks) < workers:
            fill_masks_kernel(masks, state.distance, costs, predecessors)
            return

        chunks = [chunk for chunk in np.array_split(masks, workers) if len(chunk)]
        with ThreadPoolExecutor(max_workers=workers) as pool:
            futures = [
                pool.submit(fill_masks_kernel, chunk, state.distance, costs, predecessors)
                for chunk in chunks
            ]
            for future in futures:
                future.result()
