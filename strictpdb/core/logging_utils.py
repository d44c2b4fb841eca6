from __future__ import annotations

import logging
import os


def get_logger(name: str) -> logging.Logger:
    """Return a module logger, configuring the root logger on first use.

    The level comes from STRICTPDB_LOG_LEVEL (default INFO).
    """
    logger = logging.getLogger(name)
    if not logging.getLogger().handlers:
        level = os.environ.get("STRICTPDB_LOG_LEVEL", "INFO").upper()
        logging.basicConfig(
            level=getattr(logging, level, logging.INFO),
            format="%(asctime)s %(levelname)s %(name)s - %(message)s",
        )
    return logger
