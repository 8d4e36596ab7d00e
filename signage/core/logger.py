"""
Logging setup for the signage service.

Every module logs through a named logger under the "signage" tree
(e.g. "signage.widgets.codec"). This module attaches a single console
handler to the tree root so all of them share one format.
"""

import logging
import sys


LOG_FORMAT = "[%(asctime)s] %(levelname)s [%(name)s] %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logging(level: str = "INFO") -> logging.Logger:
    """
    Configure the "signage" logger tree.

    Safe to call more than once: the handler is only attached the first time.

    Args:
        level: Logging level name (DEBUG, INFO, WARNING, ...)

    Returns:
        The root "signage" logger
    """
    logger = logging.getLogger("signage")
    logger.setLevel(level.upper())

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        logger.addHandler(handler)

    return logger
