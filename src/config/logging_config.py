# src/config/logging_config.py

"""Logging for price-check passes and the alerts they trigger.

``setup_logging`` runs once per process, whether that process is a
single ``--once`` tick or a daemon running tick after tick. It opens
one file under ``logs/`` named after the start time, for example
``logs/run_20261016_091500.log``. Everything the ``price_monitor.*``
loggers emit goes there at DEBUG, including the numbered pass steps,
every change record the notifier handles, and the traceback of any
cycle that failed. Stderr only sees WARNING and above, so an operator
watching the daemon is shown skipped batches and failed cycles, not
per-item chatter.

Fetches and writes run in worker threads, so file records carry the
thread name.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path

from src.config.settings import Settings

ROOT_LOGGER_NAME = "price_monitor"

_FILE_FORMAT = (
    "%(asctime)s | %(levelname)-8s | %(threadName)s | %(name)s | "
    "%(funcName)s:%(lineno)d | %(message)s"
)
_STDERR_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _configured(
    handler: logging.Handler, level: int, fmt: str,
) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt, datefmt=_DATE_FORMAT))
    return handler


def setup_logging(logs_dir: Path | None = None) -> Path:
    """Route ``price_monitor`` records to this run's file and stderr.

    Args:
        logs_dir: Where to create the run file. Defaults to
            ``Settings.LOGS_DIR``.

    Returns:
        Path of the run file. When handlers are already attached the
        logger is left as it is and the path is only computed.
    """
    directory = logs_dir or Settings.LOGS_DIR
    directory.mkdir(parents=True, exist_ok=True)
    log_file = directory / f"run_{datetime.now():%Y%m%d_%H%M%S}.log"

    monitor_logger = logging.getLogger(ROOT_LOGGER_NAME)
    monitor_logger.setLevel(logging.DEBUG)
    if monitor_logger.handlers:
        return log_file

    monitor_logger.addHandler(_configured(
        logging.FileHandler(log_file, encoding="utf-8"),
        logging.DEBUG,
        _FILE_FORMAT,
    ))
    monitor_logger.addHandler(_configured(
        logging.StreamHandler(sys.stderr),
        logging.WARNING,
        _STDERR_FORMAT,
    ))
    monitor_logger.info("Run log opened at %s", log_file)
    return log_file
