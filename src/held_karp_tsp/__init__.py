from held_karp_tsp.errors import (
    HeldKarpError,
    InvalidInputError,
    CapacityExceededError,
    InternalInvariantViolation,
)
from held_karp_tsp.held_karp import HeldKarpConfig, TourResult, tour_cost
from held_karp_tsp.solver import solve, solve_cost

__all__ = [
    "HeldKarpError",
    "InvalidInputError",
    "CapacityExceededError",
    "InternalInvariantViolation",
    "HeldKarpConfig",
    "TourResult",
    "tour_cost",
    "solve",
    "solve_cost",
]
