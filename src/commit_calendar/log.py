from __future__ import annotations

import logging
import sys
from typing import TextIO

LOGGER_NAME = "commit_calendar"


def level_for(verbosity: int) -> int:
    if verbosity >= 2:
        return logging.DEBUG
    if verbosity == 1:
        return logging.INFO
    return logging.WARNING


def get_logger(verbosity: int = 0, stream: TextIO | None = None) -> logging.Logger:
    """
    Return the package logger writing to `stream` (stderr by default).

    Calling it again replaces the previous handler, so repeated CLI runs in one
    process don't duplicate output.
    """
    logger = logging.getLogger(LOGGER_NAME)
    for h in list(logger.handlers):
        logger.removeHandler(h)
    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setFormatter(logging.Formatter("%(levelname)s %(message)s"))
    logger.addHandler(handler)
    logger.setLevel(level_for(verbosity))
    return logger
