"""Logging for the status engine.

Everything is logged under the `pyCertStatus` logger. A daily rotating file in the output folder receives all records,
tagged with the worker thread that produced them, and the console only shows warnings unless asked for more.
"""

import logging
import os
import sys
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path

APP_NAME = "pyCertStatus"
OUTPUT_DIR = Path(os.environ.get("PYCERTSTATUS_HOME", Path.home() / ("." + APP_NAME)))

FILE_FORMAT = "%(asctime)s - %(name)s - %(threadName)s - %(levelname)s: %(message)s"
CONSOLE_FORMAT = "%(levelname)s: %(message)s"


def log_file(output_dir: Path = OUTPUT_DIR) -> Path:
    """Return the path of the current log file."""
    return output_dir / "logs.txt"


def setup_logging(output_dir: Path = OUTPUT_DIR, console_level: int = logging.WARNING) -> None:
    """Attach the file and console handlers to the package logger.

    Args:
        output_dir (Path, optional): The folder for the log file. Created if missing.
        console_level (int, optional): The lowest level shown on the console. Defaults to WARNING.

    """
    logger = get_root_logger()
    logger.setLevel(logging.DEBUG)

    output_dir.mkdir(parents=True, exist_ok=True)
    file_handler = TimedRotatingFileHandler(
        filename=log_file(output_dir).resolve(), when="D", backupCount=5, delay=True
    )
    file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
    file_handler.setLevel(logging.DEBUG)
    logger.addHandler(file_handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level=console_level)
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    logger.addHandler(console_handler)


def is_console_handler(handler: logging.Handler) -> bool:
    """Check if a logging handler writes to stdout or stderr."""
    return isinstance(handler, logging.StreamHandler) and handler.stream in {sys.stdout, sys.stderr}


def console_level_for(verbosity: int) -> int:
    """Map a `-v` count to a console level: none is WARNING, one is INFO, more is DEBUG."""
    if verbosity <= 0:
        return logging.WARNING
    if verbosity == 1:
        return logging.INFO
    return logging.DEBUG


def set_logger_level(level: int) -> None:
    """Set the level of the console handlers. The log file keeps receiving everything.

    Args:
        level (int): The new console level.

    """
    for handler in get_root_logger().handlers:
        if is_console_handler(handler):
            handler.setLevel(level)


def get_logger(name: str) -> logging.Logger:
    """Return a logger under the package logger.

    Module names are used as is, so `pyCertStatus.checks._crl` logs as `pyCertStatus.checks._crl` rather than
    repeating the package name.
    """
    root = get_root_logger()
    if name == APP_NAME:
        return root
    return root.getChild(name.removeprefix(APP_NAME + "."))


def get_root_logger() -> logging.Logger:
    """Return the package's top-level logger.

    Validation runs log each step at DEBUG, network queries and final statuses at INFO, and chain breaks and
    revocation transport problems at WARNING.
    """
    return logging.getLogger(APP_NAME)


if not get_root_logger().handlers:
    setup_logging()
