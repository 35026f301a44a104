from __future__ import annotations
from pathlib import Path
from typing import Any, List
import math
import logging

import numpy as np

from held_karp_tsp.errors import InvalidInputError

logger = logging.getLogger(__name__)


# ---------- Token helpers ----------

def _parse_city_count(token: str) -> int:
    """Parse the header token as a positive integer city count."""
    try:
        n = int(token)
    except ValueError:
        raise InvalidInputError(f"City count must be an integer, got {token!r}.") from None
    if n <= 0:
        raise InvalidInputError(f"City count must be positive, got N={n}.")
    return n


def _parse_weight(token: str, row: int, col: int) -> float:
    """Parse one matrix entry as a finite, non-negative float."""
    try:
        value = float(token)
    except ValueError:
        raise InvalidInputError(f"Non-numeric distance {token!r} at row {row}, column {col}.") from None
    if not math.isfinite(value) or value < 0:
        raise InvalidInputError(f"Distance at row {row}, column {col} must be finite and non-negative, got {token!r}.")
    return value


# ---------- Public API ----------

def validate_distance_matrix(matrix: Any) -> np.ndarray:
    """
    Validate an in-memory distance matrix and return it as a float64 array.

    Parameters
    ----------
    matrix : Any
        A nested sequence or array with `matrix[i][j]` the cost from city `i`
        to city `j`. Need not be symmetric.

    Returns
    -------
    np.ndarray
        A fresh `N x N` float64 copy.

    Raises
    ------
    InvalidInputError
        If the matrix is empty, ragged, not square, non-numeric, or holds a
        negative or non-finite entry.
    """
    try:
        raw = np.asarray(matrix)
    except (TypeError, ValueError) as e:
        raise InvalidInputError(f"Distance matrix must be a square grid of numbers: {e}") from None

    # Booleans and numeric strings would otherwise be coerced silently.
    if raw.dtype.kind not in "iuf":
        raise InvalidInputError(f"Distance matrix entries must be numbers, got dtype {raw.dtype}.")

    array = np.array(raw, dtype=np.float64)

    if array.ndim != 2 or array.shape[0] != array.shape[1]:
        raise InvalidInputError(f"Distance matrix must be square, got shape {array.shape}.")
    if array.shape[0] == 0:
        raise InvalidInputError("Distance matrix is empty (N=0).")
    if not np.all(np.isfinite(array)):
        raise InvalidInputError("Distance matrix contains non-finite entries.")
    if np.any(array < 0):
        raise InvalidInputError("Distance matrix contains negative entries.")

    return array


def parse_distance_matrix(text: str) -> np.ndarray:
    """
    Parse a plain-text distance matrix payload.

    The payload is `N` followed by `N` rows of `N` whitespace-separated
    non-negative numbers. Three layouts are accepted: everything on one line,
    the header line followed by one line holding all `N * N` values, or the
    header line followed by `N` lines of exactly `N` values each. In the
    multi-line layouts the header line must hold `N` alone.

    Parameters
    ----------
    text : str
        The raw payload.

    Returns
    -------
    np.ndarray
        The `N x N` float64 distance matrix.

    Raises
    ------
    InvalidInputError
        On an empty payload, a bad city count, non-numeric or negative
        entries, or a missing or surplus value.
    """
    lines = [line.split() for line in text.splitlines() if line.strip()]
    if not lines:
        raise InvalidInputError("Distance matrix payload is empty.")

    n = _parse_city_count(lines[0][0])

    if len(lines) == 2 and len(lines[0]) == 1 and len(lines[1]) == n * n:
        # Header line, then every value on a single line.
        tokens: List[str] = lines[1]
    elif len(lines) > 1:
        # Row-structured layout: header line, then one line per row.
        if len(lines[0]) != 1:
            raise InvalidInputError(f"Header line must contain only the city count, got {len(lines[0])} tokens.")
        rows = lines[1:]
        if len(rows) != n:
            raise InvalidInputError(f"Expected {n} matrix rows, got {len(rows)}.")
        for i, row in enumerate(rows):
            if len(row) != n:
                raise InvalidInputError(f"Row {i} has {len(row)} values; expected {n}.")
        tokens = [tok for row in rows for tok in row]
    else:
        tokens = lines[0][1:]
        if len(tokens) != n * n:
            raise InvalidInputError(f"Expected {n * n} matrix values for N={n}, got {len(tokens)}.")

    values = [_parse_weight(tok, k // n, k % n) for k, tok in enumerate(tokens)]
    matrix = np.asarray(values, dtype=np.float64).reshape(n, n)

    logger.debug(f"Parsed {n}x{n} distance matrix")
    return matrix


def load_distance_matrix(path: str | Path) -> np.ndarray:
    """
    Read and parse a distance matrix file.
    """
    path_obj = Path(path)
    logger.info(f"Loading distance matrix from: {path_obj}")
    return parse_distance_matrix(path_obj.read_text(encoding="utf-8"))
