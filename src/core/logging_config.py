"""Logging setup for the whole `src` logger tree."""

import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"

# Package logger: every module logs through logging.getLogger(__name__), which nests below this one.
logger = logging.getLogger("src")


def configure_logging(level: str | int = "INFO") -> logging.Logger:
    """Attach a single stream handler to the package logger.

    Calling it again only changes the level, so tests and app factories can call it freely.
    """
    logger.setLevel(level)
    if not any(getattr(h, "_diamonds_handler", False) for h in logger.handlers):
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._diamonds_handler = True  # type: ignore[attr-defined]
        logger.addHandler(handler)
    return logger
