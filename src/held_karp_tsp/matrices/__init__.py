from held_karp_tsp.matrices.matrix_loader import (
    load_distance_matrix,
    parse_distance_matrix,
    validate_distance_matrix,
)

__all__ = [
    "load_distance_matrix",
    "parse_distance_matrix",
    "validate_distance_matrix",
]
