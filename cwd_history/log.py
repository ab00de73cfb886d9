"""Package-wide logger."""

from __future__ import annotations

import logging

logger = logging.getLogger("cwd_history")
logger.addHandler(logging.NullHandler())


def enable_debug_logging() -> None:
    """Send debug output to stderr (used by ``--debug``)."""
    handler = logging.StreamHandler()
    handler.setFormatter(
        logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
    )
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)
