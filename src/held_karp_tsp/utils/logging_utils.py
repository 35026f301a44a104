import logging
import re
import sys
from pathlib import Path
from typing import Optional
from datetime import datetime

# Default log directory
DEFAULT_LOG_DIR = Path("var/log")

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
LOG_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def get_log_file_path(
        matrix_file: str | Path,
        log_dir: Optional[Path] = None,
        include_timestamp: bool = True
) -> Path:
    """
    Generates the log file path for one solver run.

    Every logger of a run writes into the same file, named after the input
    matrix, e.g. `var/log/solve_cities_20261018_101500.log` for `cities.txt`.
    The target directory is created if needed.

    Parameters
    ----------
    matrix_file : str | Path
        The distance matrix file being solved.
    log_dir : Optional[Path], optional
        The directory where the log file will be saved. Defaults to `DEFAULT_LOG_DIR`.
    include_timestamp : bool, optional
        If True, the run's start time is added to the filename, by default True.

    Returns
    -------
    Path
        The full path of the log file.
    """
    if log_dir is None:
        log_dir = DEFAULT_LOG_DIR

    log_dir.mkdir(parents=True, exist_ok=True)

    stem = re.sub(r"[^A-Za-z0-9_-]+", "_", Path(matrix_file).stem).strip("_") or "matrix"

    if include_timestamp:
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        filename = f"solve_{stem}_{timestamp}.log"
    else:
        filename = f"solve_{stem}.log"

    return log_dir / filename


def make_file_handler(log_path: str | Path, level: int = logging.INFO) -> logging.FileHandler:
    """Opens an append-mode handler on `log_path`, creating parent directories."""
    log_path = Path(log_path)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    file_handler = logging.FileHandler(log_path, mode='a', encoding='utf-8')
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
    file_handler.setLevel(level)
    return file_handler


def setup_logger(
    name: str,
    level: int = logging.INFO,
    file_handler: Optional[logging.Handler] = None,
    console_level: Optional[int] = None,
) -> logging.Logger:
    """
    Configures and returns a logger with a console handler and an optional file handler.

    The console handler writes to stderr so that results printed on stdout
    (including `--json` documents) are never interleaved with log records.
    Handlers from an earlier call are closed and replaced, so repeated CLI
    invocations in one process do not duplicate messages or leak files.

    Parameters
    ----------
    name : str
        The name of the logger, typically `__name__`.
    level : int, optional
        The base logging level for the logger and its console handler, by default `logging.INFO`.
    file_handler : Optional[logging.Handler], optional
        A handler shared by every logger of the run, usually from `make_file_handler`.
    console_level : Optional[int], optional
        Override for the console handler level.

    Returns
    -------
    logging.Logger
        The configured logger instance.
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)
    for old_handler in list(logger.handlers):
        logger.removeHandler(old_handler)
        if old_handler is not file_handler:
            old_handler.close()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
    console_handler.setLevel(console_level if console_level is not None else level)
    logger.addHandler(console_handler)

    if file_handler is not None:
        logger.addHandler(file_handler)

    return logger
