"""Logging configuration for the task board."""

import logging
import sys

from ..config import get_config

LOGGER_NAME = "taskboard"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


def setup_logging() -> logging.Logger:
    """Attach a stdout handler to the ``taskboard`` logger at the configured level.

    Safe to call more than once: the handler is only added the first time.
    Other libraries' loggers are left alone; SQL statement echo is driven
    by the engine (see ``init_db``).
    """
    name = get_config().logging.level.lower()
    level = LEVELS.get(name, logging.INFO)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    handler = next(
        (h for h in logger.handlers if getattr(h, "name", None) == LOGGER_NAME), None
    )
    if handler is None:
        handler = logging.StreamHandler(sys.stdout)
        handler.set_name(LOGGER_NAME)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    handler.setLevel(level)

    if name not in LEVELS:
        logger.warning(f"Unknown log level '{name}', using info")
    logger.info(f"Logging configured at level: {logging.getLevelName(level)}")
    return logger
