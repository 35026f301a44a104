from held_karp_tsp.held_karp.hk_table_state import HeldKarpTableState, make_table_state
from held_karp_tsp.held_karp.hk_recurrences import HeldKarpConfig, HeldKarpEngine
from held_karp_tsp.held_karp.hk_traceback import TourResult, traceback_tour, tour_cost

__all__ = [
    "HeldKarpTableState",
    "make_table_state",
    "HeldKarpConfig",
    "HeldKarpEngine",
    "TourResult",
    "traceback_tour",
    "tour_cost",
]
