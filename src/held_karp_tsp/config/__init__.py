from held_karp_tsp.config.solver_config import (
    default_config_path,
    load_solver_config,
    parse_solver_config,
    validate_solver_config,
)

__all__ = [
    "default_config_path",
    "load_solver_config",
    "parse_solver_config",
    "validate_solver_config",
]
