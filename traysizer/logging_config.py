"""
Logging Configuration
Handlers for the 'traysizer' logger when the engine runs from the command line.
Library use leaves handler setup to the host application.
"""
import logging
import sys
from typing import Optional

PACKAGE_LOGGER = "traysizer"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%H:%M:%S"


def _handler(handler: logging.Handler, level: int) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    return handler


def setup_logging(level: int = logging.INFO, log_file: Optional[str] = None) -> logging.Logger:
    """
    Route sizing logs to stderr and, optionally, to a file.

    Calling it again replaces the previous handlers. stdout is left to the
    CLI summary.

    Args:
        level: Logging level for the package logger and its handlers
        log_file: Optional path; the file is overwritten on each run

    Returns:
        The configured package logger
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)
    for existing in list(logger.handlers):
        logger.removeHandler(existing)
        existing.close()

    logger.addHandler(_handler(logging.StreamHandler(sys.stderr), level))
    if log_file:
        logger.addHandler(_handler(logging.FileHandler(log_file, mode="w", encoding="utf-8"), level))

    logger.debug("Logging to stderr%s", f" and {log_file}" if log_file else "")
    return logger
