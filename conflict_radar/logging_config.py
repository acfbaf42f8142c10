"""Logging setup for applications that embed the analyzer."""

import logging
import sys
from typing import Optional

from .config import LOG_LEVEL

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
ROOT_LOGGER = "conflict-radar"


def setup_logging(level: Optional[str] = None, log_file: Optional[str] = None) -> logging.Logger:
    """Configure the "conflict-radar" logger to write to stdout and optionally a file.

    Level defaults to CONFLICT_RADAR_LOG_LEVEL (INFO if unset). Calling this
    again replaces the handlers instead of stacking them.
    """
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel((level or LOG_LEVEL).upper())

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT)
    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))
    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.propagate = False
    return logger
