"""
Unit tests for loading solver settings from YAML.
"""
import pytest

from held_karp_tsp.config import (
    default_config_path,
    load_solver_config,
    parse_solver_config,
    validate_solver_config,
)
from held_karp_tsp.errors import InvalidInputError
from held_karp_tsp.held_karp import HeldKarpConfig


def test_bundled_defaults_load():
    """The packaged YAML exists and yields the dataclass defaults."""
    assert default_config_path().is_file()
    assert load_solver_config() == HeldKarpConfig()


def test_yaml_file_values_are_used(tmp_path):
    """Settings under the `solver` section override the defaults."""
    path = tmp_path / "solver.yaml"
    path.write_text("solver:\n  backend: numba\n  workers: 4\n  max_cities: 16\n", encoding="utf-8")

    config = load_solver_config(path)
    assert config.backend == "numba"
    assert config.workers == 4
    assert config.max_cities == 16
    assert config.verbose is False


def test_top_level_keys_are_accepted():
    """A file without a `solver` section is read from the top level."""
    assert parse_solver_config({"max_cities": 12}).max_cities == 12


def test_overrides_win_and_none_is_ignored(tmp_path):
    """Keyword overrides replace file values; `None` leaves them alone."""
    path = tmp_path / "solver.yml"
    path.write_text("solver:\n  workers: 2\n", encoding="utf-8")

    config = load_solver_config(path, workers=None, max_cities=9, backend="numba")
    assert config.workers == 2
    assert config.max_cities == 9
    assert config.backend == "numba"


def test_empty_yaml_gives_defaults(tmp_path):
    """An empty file is treated as an empty mapping."""
    path = tmp_path / "empty.yaml"
    path.write_text("", encoding="utf-8")
    assert load_solver_config(path) == HeldKarpConfig()


@pytest.mark.parametrize(
    "data",
    [
        {"solver": {"backend": "cuda"}},
        {"solver": {"workers": 0}},
        {"solver": {"workers": "two"}},
        {"solver": {"max_cities": -1}},
        {"solver": {"max_cities": 63}},
        {"solver": {"max_cities": True}},
        {"solver": {"verbose": "yes"}},
        {"solver": {"threads": 2}},
        {"solver": [1, 2]},
    ],
)
def test_invalid_settings_rejected(data):
    """Out-of-range values, wrong types and unknown keys are invalid input."""
    with pytest.raises(InvalidInputError):
        parse_solver_config(data)


def test_non_yaml_suffix_rejected(tmp_path):
    """Only .yml and .yaml files are read."""
    path = tmp_path / "solver.json"
    path.write_text("{}", encoding="utf-8")
    with pytest.raises(InvalidInputError):
        load_solver_config(path)


def test_non_mapping_yaml_rejected(tmp_path):
    """A YAML document that is not a mapping is invalid."""
    path = tmp_path / "list.yaml"
    path.write_text("- 1\n- 2\n", encoding="utf-8")
    with pytest.raises(InvalidInputError):
        load_solver_config(path)


def test_unknown_override_rejected():
    """Overrides must name real settings."""
    with pytest.raises(InvalidInputError):
        load_solver_config(None, threads=4)


def test_validate_passes_good_config_through():
    """A valid config is returned unchanged."""
    config = HeldKarpConfig(backend="numba", workers=3, max_cities=62)
    assert validate_solver_config(config) is config
