from held_karp_tsp.utils.bitmask_utils import (
    BITMASK_WIDTH_LIMIT,
    ORIGIN,
    ORIGIN_MASK,
    full_mask,
    has_city,
    iter_members,
    origin_row,
    popcount,
    without_city,
)

__all__ = [
    "BITMASK_WIDTH_LIMIT",
    "ORIGIN",
    "ORIGIN_MASK",
    "full_mask",
    "has_city",
    "iter_members",
    "origin_row",
    "popcount",
    "without_city",
]
