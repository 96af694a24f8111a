# ./src/expiringmap/utils/logger.py
"""Logger builder for ExpiringMap.

Run path: imported by ``expiringmap.expiring`` (``build_map``) and the CLI.
Inputs: logger name and level.
Outputs: configured ``logging.Logger`` instance.
Side effects: attaches a stream handler when one is not already present.
Operational notes: repeated builds reuse the existing handler and only reset the level.
"""

from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s :: %(message)s"


def build_logger(name: str, level: int) -> logging.Logger:
    """Create or reuse a configured logger instance."""
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)

    logger.setLevel(level)
    logger.propagate = False
    return logger
