"""
Unit tests for the Held-Karp fill engine.

The engine is checked on small asymmetric matrices whose cells can be
computed by hand, and the python and numba backends are checked against
each other cell by cell, including with several worker threads per level.
"""
import math

import numpy as np
import pytest

from held_karp_tsp.errors import InvalidInputError
from held_karp_tsp.held_karp import HeldKarpConfig, HeldKarpEngine, make_table_state
from held_karp_tsp.structures import NO_PREDECESSOR
from held_karp_tsp.utils.bitmask_utils import full_mask


# ---------------------- Fixtures ----------------------
@pytest.fixture
def asymmetric_four():
    """A 4-city asymmetric matrix with a unique optimum."""
    return np.array([
        [0.0, 10.0, 15.0, 20.0],
        [5.0, 0.0, 9.0, 10.0],
        [6.0, 13.0, 0.0, 12.0],
        [8.0, 8.0, 9.0, 0.0],
    ])


def _filled(distance, **config_kwargs):
    state = make_table_state(distance)
    HeldKarpEngine(config=HeldKarpConfig(**config_kwargs)).fill_all_subsets(state)
    return state


def _random_matrix(n, seed):
    rng = np.random.default_rng(seed)
    matrix = rng.integers(0, 50, size=(n, n)).astype(np.float64)
    np.fill_diagonal(matrix, 0.0)
    return matrix


# ----------------------------- Tests ---------------------------------
def test_single_city_needs_no_fill():
    """N = 1 leaves a complete table containing only C({0}, 0) = 0."""
    state = _filled(np.array([[0.0]]))
    assert state.table.is_complete()
    assert state.table.get(0b1, 0).cost == 0.0


def test_pair_level_is_direct_edge_from_origin(asymmetric_four):
    """C({0, j}, j) = d(0, j) with predecessor 0; C({0, j}, 0) = inf."""
    state = _filled(asymmetric_four)
    for j in range(1, 4):
        mask = 1 | (1 << j)
        entry = state.table.get(mask, j)
        assert entry.cost == asymmetric_four[0, j]
        assert entry.predecessor == 0
        origin_entry = state.table.get(mask, 0)
        assert math.isinf(origin_entry.cost)
        assert origin_entry.predecessor == NO_PREDECESSOR


def test_size_three_cells_by_hand(asymmetric_four):
    """C({0,1,2}, 2) = d01 + d12 and C({0,1,2}, 1) = d02 + d21."""
    state = _filled(asymmetric_four)
    assert state.table.get(0b0111, 2).cost == 10.0 + 9.0
    assert state.table.get(0b0111, 2).predecessor == 1
    assert state.table.get(0b0111, 1).cost == 15.0 + 13.0
    assert state.table.get(0b0111, 1).predecessor == 2


def test_origin_column_is_infinite_for_every_larger_subset(asymmetric_four):
    """C(S, 0) is explicitly +inf for |S| > 1 and never overwritten."""
    state = _filled(asymmetric_four)
    for mask in range(3, 1 << 4, 2):
        assert math.isinf(state.table.get(mask, 0).cost)


def test_full_set_costs(asymmetric_four):
    """
    Open-path costs over all four cities match a hand enumeration:
    ending at 1 is 0-2-3-1 (35), at 2 is 0-1-3-2 (29), at 3 is 0-1-2-3 (31).
    """
    state = _filled(asymmetric_four)
    full = full_mask(4)
    assert state.table.get(full, 1).cost == 35.0
    assert state.table.get(full, 1).predecessor == 3
    assert state.table.get(full, 2).cost == 29.0
    assert state.table.get(full, 2).predecessor == 3
    assert state.table.get(full, 3).cost == 31.0
    assert state.table.get(full, 3).predecessor == 2


def test_ties_keep_lowest_predecessor():
    """With all-equal weights every cell records the lowest eligible predecessor."""
    distance = np.ones((4, 4))
    state = _filled(distance)
    entry = state.table.get(0b1111, 3)
    assert entry.cost == 3.0
    assert entry.predecessor == 1


def test_unknown_backend_rejected(asymmetric_four):
    """A backend name outside the supported set is invalid input."""
    state = make_table_state(asymmetric_four)
    engine = HeldKarpEngine(config=HeldKarpConfig(backend="gpu"))  # type: ignore[arg-type]
    with pytest.raises(InvalidInputError):
        engine.fill_all_subsets(state)


def test_every_level_is_finalized(asymmetric_four):
    """After the fill, every size level up to N is frozen."""
    state = _filled(asymmetric_four)
    assert state.table.finalized_size == 4
    assert state.table.is_complete()


@pytest.mark.parametrize("n, workers", [(2, 1), (5, 1), (8, 1), (8, 3), (9, 4)])
def test_numba_backend_matches_python(n, workers):
    """Both backends produce bit-identical cost and predecessor tables."""
    distance = _random_matrix(n, seed=n * 31 + workers)
    python_state = _filled(distance, backend="python")
    numba_state = _filled(distance, backend="numba", workers=workers)

    np.testing.assert_array_equal(python_state.table.costs, numba_state.table.costs)
    np.testing.assert_array_equal(python_state.table.predecessors, numba_state.table.predecessors)
    assert numba_state.table.is_complete()
