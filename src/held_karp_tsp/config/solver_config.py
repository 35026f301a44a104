from __future__ import annotations
from dataclasses import fields, replace
from importlib.resources import files as importlib_files
from pathlib import Path
from typing import Any, Dict, Mapping, Optional
import logging

import yaml

from held_karp_tsp.errors import InvalidInputError
from held_karp_tsp.held_karp.hk_recurrences import BACKENDS, HeldKarpConfig
from held_karp_tsp.utils.bitmask_utils import BITMASK_WIDTH_LIMIT

logger = logging.getLogger(__name__)

_CONFIG_KEYS = frozenset(f.name for f in fields(HeldKarpConfig))


def default_config_path() -> Path:
    """Location of the solver settings bundled with the package."""
    return Path(str(importlib_files("held_karp_tsp") / "data" / "default_solver.yaml"))


def read_yaml(path: str | Path) -> Dict[str, Any]:
    """
    Read a YAML file into a mapping.

    Raises
    ------
    InvalidInputError
        If the file is not `.yml`/`.yaml` or its top level is not a mapping.
    """
    path_obj = Path(path)
    if path_obj.suffix.lower() not in {".yml", ".yaml"}:
        raise InvalidInputError(f"Only YAML config files are supported, got {path_obj.name!r}.")

    data = yaml.safe_load(path_obj.read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise InvalidInputError(f"Config file {path_obj} must contain a mapping at the top level.")
    return data


def parse_solver_config(data: Mapping[str, Any]) -> HeldKarpConfig:
    """
    Build a `HeldKarpConfig` from a parsed YAML tree.

    Settings are read from the `solver` section when present, otherwise from
    the top level. Missing keys keep their dataclass defaults.

    Parameters
    ----------
    data : Mapping[str, Any]
        Parsed YAML tree.

    Returns
    -------
    HeldKarpConfig
        The validated configuration.

    Raises
    ------
    InvalidInputError
        On unknown keys, an unknown backend, a non-positive `workers` or
        `max_cities`, or `max_cities` above the bitmask limit.
    """
    section = data.get("solver", data)
    if not isinstance(section, Mapping):
        raise InvalidInputError("The 'solver' config section must be a mapping.")

    unknown = set(section) - _CONFIG_KEYS
    if unknown:
        raise InvalidInputError(f"Unknown solver config keys: {sorted(unknown)}")

    return validate_solver_config(replace(HeldKarpConfig(), **section))


def validate_solver_config(config: HeldKarpConfig) -> HeldKarpConfig:
    """Check the value ranges of a `HeldKarpConfig` and return it unchanged."""
    if config.backend not in BACKENDS:
        raise InvalidInputError(f"Unknown backend {config.backend!r}; expected one of {BACKENDS}.")

    for name in ("workers", "max_cities"):
        value = getattr(config, name)
        if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
            raise InvalidInputError(f"'{name}' must be a positive integer, got {value!r}.")

    if config.max_cities > BITMASK_WIDTH_LIMIT:
        raise InvalidInputError(
            f"'max_cities' may not exceed the bitmask width limit of {BITMASK_WIDTH_LIMIT}, got {config.max_cities}."
        )
    if not isinstance(config.verbose, bool):
        raise InvalidInputError(f"'verbose' must be a boolean, got {config.verbose!r}.")
    return config


def load_solver_config(yaml_path: Optional[str | Path] = None, **overrides: Any) -> HeldKarpConfig:
    """
    Load solver settings from YAML, applying keyword overrides on top.

    Parameters
    ----------
    yaml_path : Optional[str | Path]
        Path to a settings file. Defaults to the bundled `default_solver.yaml`.
    **overrides
        Individual settings (e.g. from CLI flags). `None` values are ignored.

    Returns
    -------
    HeldKarpConfig
        The merged, validated configuration.
    """
    if yaml_path is None:
        yaml_path = default_config_path()

    logger.info(f"Loading solver config from: {yaml_path}")
    config = parse_solver_config(read_yaml(yaml_path))

    cli_overrides = {key: value for key, value in overrides.items() if value is not None}
    if not cli_overrides:
        return config

    unknown = set(cli_overrides) - _CONFIG_KEYS
    if unknown:
        raise InvalidInputError(f"Unknown solver config keys: {sorted(unknown)}")

    logger.debug(f"Applying config overrides: {cli_overrides}")
    return validate_solver_config(replace(config, **cli_overrides))
