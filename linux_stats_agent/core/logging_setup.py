"""Console logging for the agent process."""

from __future__ import annotations

import logging


_LOGGER_NAME = "linux_stats_agent"
_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
_DEBUG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(filename)s:%(lineno)d: %(message)s"


def configure_logging(level: str = "info") -> logging.Logger:
    logger = logging.getLogger(_LOGGER_NAME)
    if logger.handlers:
        return logger

    debug = level == "debug"
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(_DEBUG_FORMAT if debug else _FORMAT))
    logger.addHandler(handler)
    logger.propagate = False
    return logger
