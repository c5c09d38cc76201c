# src/config/logging_config.py

"""Per-run logging configuration for price_spotlight.

Every launch writes to its own ``logs/run_<timestamp>.log`` file.  All
``price_spotlight.*`` loggers propagate to the project root logger, so
rotation, fetch and rendering records end up interleaved in one file in
the order they happened, which is what you want when chasing a stale
spotlight.

The console handler is optional: while the Textual TUI owns the terminal,
anything written to stderr would corrupt the screen, so the TUI entry
point turns it off.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path

from src.config.settings import Settings

ROOT_LOGGER_NAME = "price_spotlight"

_FILE_FORMAT = (
    "%(asctime)s | %(levelname)-8s | %(name)s | "
    "%(module)s:%(funcName)s:%(lineno)d | %(message)s"
)

_CONSOLE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"

_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _file_handler(log_file: Path) -> logging.Handler:
    handler = logging.FileHandler(log_file, encoding="utf-8")
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter(_FILE_FORMAT, datefmt=_DATE_FORMAT))
    return handler


def _console_handler(level: int) -> logging.Handler:
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(
        logging.Formatter(_CONSOLE_FORMAT, datefmt=_DATE_FORMAT)
    )
    return handler


def setup_logging(
    console: bool = True,
    console_level: int = logging.WARNING,
) -> Path:
    """Attach the per-run file handler (and optionally a stderr handler).

    Args:
        console: Whether to also log to stderr.  Disable for the TUI.
        console_level: Minimum level for the stderr handler.

    Returns:
        The :class:`~pathlib.Path` of this run's log file.  Repeated calls
        keep the handlers installed by the first call and do not create a
        second file.
    """
    logs_dir: Path = Settings.LOGS_DIR
    logs_dir.mkdir(parents=True, exist_ok=True)

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(logging.DEBUG)

    existing = [
        h for h in root_logger.handlers
        if isinstance(h, logging.FileHandler)
    ]
    if existing:
        return Path(existing[0].baseFilename)

    stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_file = logs_dir / f"run_{stamp}.log"

    root_logger.addHandler(_file_handler(log_file))
    if console:
        root_logger.addHandler(_console_handler(console_level))

    root_logger.info("Logging initialised, writing to %s", log_file)
    return log_file
