# shopdash/config/logging_config.py

"""Per-run logging for shopdash.

Every launch writes ``logs/run_<YYYYMMDD>_<HHMMSS>.log``. Loggers under the
``shopdash`` namespace (api, cache, products, cart, forms, ui, cli, health)
all land in that one file at DEBUG. The terminal only sees WARNING and up,
so request chatter never paints over the dashboard.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path

from shopdash.config.settings import Settings

_LOGGER_NAME = "shopdash"

_FILE_FORMAT = (
    "%(asctime)s | %(levelname)-8s | %(name)s | "
    "%(module)s:%(funcName)s:%(lineno)d | %(message)s"
)
_STDERR_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _file_handler(path: Path) -> logging.Handler:
    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter(_FILE_FORMAT, datefmt=_DATE_FORMAT))
    return handler


def _stderr_handler() -> logging.Handler:
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(logging.WARNING)
    handler.setFormatter(
        logging.Formatter(_STDERR_FORMAT, datefmt=_DATE_FORMAT)
    )
    return handler


def setup_logging() -> Path:
    """Attach the run's file and stderr handlers to the ``shopdash`` logger.

    Safe to call more than once: later calls leave the handlers alone and
    return the file the first call opened.

    Returns:
        Path of this run's log file.
    """
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(logging.DEBUG)

    for handler in logger.handlers:
        if isinstance(handler, logging.FileHandler):
            return Path(handler.baseFilename)

    Settings.LOGS_DIR.mkdir(parents=True, exist_ok=True)
    stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_file = Settings.LOGS_DIR / f"run_{stamp}.log"

    logger.addHandler(_file_handler(log_file))
    logger.addHandler(_stderr_handler())
    logger.info("Logging initialised, log file: %s", log_file)
    return log_file
