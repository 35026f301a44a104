"""
Tests for the `solve_tsp` command-line interface.

The CLI is driven through `main(argv)` so exit codes and printed output can
be checked directly.
"""
import json
import logging

import pytest

from held_karp_tsp.scripts.solve_tsp import LOGGERS_TO_CONFIGURE, format_tour, main


@pytest.fixture(autouse=True)
def reset_cli_loggers():
    """Detaches the handlers each CLI run installs so they never outlive a test."""
    yield
    for name in LOGGERS_TO_CONFIGURE:
        cli_logger = logging.getLogger(name)
        for handler in list(cli_logger.handlers):
            handler.close()
            cli_logger.removeHandler(handler)
        cli_logger.setLevel(logging.NOTSET)


@pytest.fixture
def matrix_file(tmp_path):
    """Writes the 4-city asymmetric example to a file and returns its path."""
    path = tmp_path / "cities.txt"
    path.write_text("4\n0 10 15 20\n5 0 9 10\n6 13 0 12\n8 8 9 0\n", encoding="utf-8")
    return path


def test_text_output(matrix_file, capsys):
    """Default output lists the city count, the tour and its cost."""
    assert main([str(matrix_file)]) == 0
    out = capsys.readouterr().out
    assert "Cities : 4" in out
    assert "Tour : 0 -> 1 -> 3 -> 2 -> 0" in out
    assert "Cost : 35" in out


def test_json_output(matrix_file, capsys):
    """`--json` emits a machine-readable document."""
    assert main([str(matrix_file), "--json", "--backend", "numba", "--workers", "2"]) == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload == {"cost": 35.0, "num_cities": 4, "tour": [0, 1, 3, 2, 0]}


def test_cost_only_output(matrix_file, capsys):
    """`--cost-only` prints just the optimal cost."""
    assert main([str(matrix_file), "--cost-only"]) == 0
    assert capsys.readouterr().out.strip() == "35"


def test_cost_only_json_omits_tour(matrix_file, capsys):
    """With `--json --cost-only` the tour key is left out."""
    assert main([str(matrix_file), "--json", "--cost-only"]) == 0
    assert "tour" not in json.loads(capsys.readouterr().out)


def test_malformed_matrix_exit_code(tmp_path, capsys):
    """Invalid input exits with status 2 and an error on stderr."""
    path = tmp_path / "bad.txt"
    path.write_text("3\n0 1\n1 0\n", encoding="utf-8")
    assert main([str(path), "--quiet"]) == 2
    assert "Error" in capsys.readouterr().err


def test_missing_file_exit_code(tmp_path, capsys):
    """An unreadable file exits with status 2."""
    assert main([str(tmp_path / "absent.txt")]) == 2
    assert "Error" in capsys.readouterr().err


def test_capacity_exit_code(matrix_file, capsys):
    """A matrix larger than `--max-cities` exits with status 2."""
    assert main([str(matrix_file), "--max-cities", "3"]) == 2
    assert "exceeds" in capsys.readouterr().err


def test_bad_config_exit_code(matrix_file, tmp_path, capsys):
    """An invalid settings file exits with status 2."""
    config = tmp_path / "solver.yaml"
    config.write_text("solver:\n  backend: quantum\n", encoding="utf-8")
    assert main([str(matrix_file), "--config", str(config)]) == 2


def test_verbose_logging_to_explicit_file(matrix_file, tmp_path, capsys):
    """`-v --log-file` writes solver progress to the given file."""
    log_file = tmp_path / "run.log"
    assert main([str(matrix_file), "-v", "--log-file", str(log_file)]) == 0
    assert "Optimal tour cost" in log_file.read_text(encoding="utf-8")


def test_format_tour():
    assert format_tour([0, 2, 1, 0]) == "0 -> 2 -> 1 -> 0"


def test_header_then_flat_line_file(tmp_path, capsys):
    """A header line followed by all values on one line is solvable."""
    path = tmp_path / "flat.txt"
    path.write_text("2\n0 5 5 0\n", encoding="utf-8")
    assert main([str(path), "--cost-only"]) == 0
    assert capsys.readouterr().out.strip() == "10"


def test_verbose_json_keeps_stdout_clean(matrix_file, tmp_path, capsys):
    """Log records go to stderr, so `-v --json` output still parses."""
    log_file = tmp_path / "run.log"
    assert main([str(matrix_file), "-v", "--json", "--log-file", str(log_file)]) == 0
    captured = capsys.readouterr()
    assert json.loads(captured.out)["cost"] == 35.0
    assert "Optimal tour cost" in captured.err


def test_debug_logging_includes_subset_enumeration(matrix_file, tmp_path):
    """`-vv` surfaces the enumerator's debug record in the run's log file."""
    log_file = tmp_path / "run.log"
    assert main([str(matrix_file), "-vv", "--log-file", str(log_file)]) == 0
    text = log_file.read_text(encoding="utf-8")
    assert "held_karp_tsp.held_karp.subset_enumerator" in text
    assert "Enumerated 8 origin subsets for N=4" in text


def test_default_log_file_is_one_per_run(matrix_file, tmp_path, monkeypatch):
    """Without `--log-file`, `-v` writes a single file named after the matrix."""
    monkeypatch.chdir(tmp_path)
    assert main([str(matrix_file), "-v"]) == 0

    log_files = list((tmp_path / "var" / "log").glob("*.log"))
    assert len(log_files) == 1
    assert log_files[0].name.startswith("solve_cities_")
    assert "Optimal tour cost" in log_files[0].read_text(encoding="utf-8")
