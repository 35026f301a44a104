import numpy as np
import numba as nb

# float64 infinity and predecessor sentinel for use inside jitted code.
INF_FLOAT64 = np.float64(np.inf)
NO_PREDECESSOR_INT64 = np.int64(-1)


# -------------------------
# Held-Karp Level Kernel
# -------------------------
@nb.njit(cache=False, nogil=True)
def fill_masks_kernel(masks: np.ndarray, distance: np.ndarray, costs: np.ndarray, predecessors: np.ndarray):
    """
    Fills every `(mask, j)` cell for a batch of same-size subsets.

    This is the jitted counterpart of `HeldKarpEngine._fill_subset`. All masks
    in `masks` must have the same size `s`, and every subset of size `s - 1`
    must already be final in `costs`/`predecessors`. Each call writes only the
    rows of its own masks, so disjoint batches of one level may run on
    separate threads.

    Parameters
    ----------
    masks : np.ndarray
        `int64` array of origin-containing subset bitmasks, all of one size.
    distance : np.ndarray
        `N x N` float64 distance matrix.
    costs : np.ndarray
        `2^(N-1) x N` float64 cost table, rows addressed by `mask >> 1`.
    predecessors : np.ndarray
        `2^(N-1) x N` int64 predecessor table, same addressing.

    Notes
    -----
    Candidates are scanned in ascending city order and replaced only on a
    strictly smaller cost, so ties resolve to the lowest predecessor index,
    identical to the pure-Python fill.
    """
    n = distance.shape[0]
    for t in range(masks.shape[0]):
        mask = masks[t]
        row = mask >> 1

        # A path of more than one city cannot end back at the origin.
        costs[row, 0] = INF_FLOAT64
        predecessors[row, 0] = NO_PREDECESSOR_INT64

        for j in range(1, n):
            if (mask >> j) & 1 == 0:
                continue

            prev_mask = mask ^ (np.int64(1) << j)
            prev_row = prev_mask >> 1
            best = INF_FLOAT64
            best_i = NO_PREDECESSOR_INT64

            for i in range(n):
                if (prev_mask >> i) & 1 == 0:
                    continue
                # The origin may only precede j when it is the sole remaining city.
                if i == 0 and prev_mask != 1:
                    continue
                cand = costs[prev_row, i] + distance[i, j]
                if cand < best:
                    best = cand
                    best_i = i

            costs[row, j] = best
            predecessors[row, j] = best_i
