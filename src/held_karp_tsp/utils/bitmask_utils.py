from __future__ import annotations
from typing import Final, Iterator

# Subsets are stored in signed 64-bit integers, so bit 62 is the highest usable city bit.
BITMASK_WIDTH_LIMIT: Final[int] = 62

# The fixed starting city of every tour.
ORIGIN: Final[int] = 0
ORIGIN_MASK: Final[int] = 1 << ORIGIN


def popcount(mask: int) -> int:
    """Return the number of cities (set bits) in `mask`."""
    return bin(mask).count("1")


def has_city(mask: int, city: int) -> bool:
    """Return True if `city` is a member of the subset encoded by `mask`."""
    return (mask >> city) & 1 == 1


def iter_members(mask: int) -> Iterator[int]:
    """
    Yields the cities contained in `mask`, in ascending order.

    Parameters
    ----------
    mask : int
        A non-negative subset bitmask.

    Yields
    ------
    int
        Each city index whose bit is set.
    """
    city = 0
    while mask:
        if mask & 1:
            yield city
        mask >>= 1
        city += 1


def full_mask(n: int) -> int:
    """Return the bitmask `2^n - 1` containing every city in `{0, ..., n-1}`."""
    return (1 << n) - 1


def origin_row(mask: int) -> int:
    """
    Maps an origin-containing subset to its dense table row.

    Because bit 0 is always set, dropping it gives a bijection between the
    `2^(n-1)` origin subsets and the rows `0 .. 2^(n-1) - 1`.
    """
    return mask >> 1


def without_city(mask: int, city: int) -> int:
    """Return `mask` with `city` removed."""
    return mask & ~(1 << city)
