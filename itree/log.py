"""Logging setup for the command-line entry point.

Library modules only create ``logging.getLogger(__name__)`` loggers; the CLI
attaches a single stderr handler to the package logger.
"""

from __future__ import annotations

import logging
import sys

PACKAGE_LOGGER = "itree"
LOG_FORMAT = "itree: %(levelname)s: %(message)s"
_HANDLER_TAG_ATTR = "_itree_handler"


def _is_our_handler(handler: logging.Handler) -> bool:
    return bool(getattr(handler, _HANDLER_TAG_ATTR, False))


def configure_logging(verbose: bool = False) -> logging.Logger:
    """Install (or replace) the stderr handler on the package logger.

    Safe to call repeatedly; WARNING by default, DEBUG when ``verbose``.
    """
    level = logging.DEBUG if verbose else logging.WARNING
    logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(logger.handlers):
        if _is_our_handler(handler):
            logger.removeHandler(handler)
            handler.close()

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    setattr(handler, _HANDLER_TAG_ATTR, True)
    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False
    return logger
