from __future__ import annotations
from typing import Optional

__all__ = [
    "HeldKarpError",
    "InvalidInputError",
    "CapacityExceededError",
    "InternalInvariantViolation",
]


class HeldKarpError(Exception):
    """Base class for every error raised by the Held-Karp solver."""


class InvalidInputError(HeldKarpError, ValueError):
    """
    Raised when the city count or distance matrix is malformed.

    Detected before any DP table is allocated, so no partial work has been done
    when this surfaces.
    """


class CapacityExceededError(HeldKarpError, ValueError):
    """
    Raised when the number of cities is larger than the solver can hold.

    Attributes
    ----------
    n : int
        The offending number of cities.
    limit : int
        The largest city count accepted under the active configuration.
    """

    def __init__(self, n: int, limit: int, message: Optional[str] = None):
        self.n = n
        self.limit = limit
        if message is None:
            message = f"N={n} cities exceeds the supported maximum of {limit}."
        super().__init__(message)


class InternalInvariantViolation(HeldKarpError, AssertionError):
    """
    Raised when the DP table is read or walked in a way that can only come from a bug.

    Examples are a lookup of a subset level that has not been finalized, a
    terminal city that is not a member of its subset, or a predecessor chain
    that breaks before collapsing to the origin.
    """
