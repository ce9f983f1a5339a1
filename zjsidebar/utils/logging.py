"""Logging setup for the zjsidebar CLI and preview host."""

import logging
import sys

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
PACKAGE_LOGGER = "zjsidebar"


def setup_logging(verbose: bool = False) -> logging.Logger:
    """Attach a stderr handler to the package logger and set its level.

    Plugin hosts capture stderr, so that is where everything goes. Calling
    this again only adjusts the level; modules keep using
    ``logging.getLogger(__name__)`` and propagate up to this logger.
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    level = logging.DEBUG if verbose else logging.INFO

    handler = next((h for h in logger.handlers if getattr(h, "_zjsidebar", False)), None)
    if handler is None:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        handler._zjsidebar = True  # type: ignore[attr-defined]
        logger.addHandler(handler)

    handler.setLevel(level)
    logger.setLevel(level)
    return logger
