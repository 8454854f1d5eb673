"""
Logging configuration for the league API and scripts.

Engine modules log under the ``league`` namespace: DEBUG for per-call
totals, INFO for season and snapshot events, WARNING for degenerate
fallbacks such as late joiners or a non-positive chart base.
"""

import logging
import sys
from typing import Optional

from league.core.config import settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"

# Serving stack loggers and the level they are held at
QUIET_LOGGERS = {
    "uvicorn": logging.INFO,
    "uvicorn.access": logging.WARNING,
    "fastapi": logging.WARNING,
}


def resolve_level(level: Optional[str] = None) -> int:
    """Numeric level for a level name; unknown names mean INFO."""
    name = (level or settings.LOG_LEVEL).upper()
    value = logging.getLevelName(name)
    return value if isinstance(value, int) else logging.INFO


def setup_logging(level: Optional[str] = None) -> None:
    """
    Configure application logging.

    DEBUG mode opens up the engine's per-call computation logs without
    making the serving stack any louder.
    """
    root_level = resolve_level(level)

    logging.basicConfig(
        level=root_level,
        format=LOG_FORMAT,
        datefmt=LOG_DATEFMT,
        handlers=[
            logging.StreamHandler(sys.stdout),
        ],
    )

    for name, quiet_level in QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(quiet_level)

    logging.getLogger("league").setLevel(logging.DEBUG if settings.DEBUG else root_level)


def get_logger(name: str) -> logging.Logger:
    """Get a logger with the given name."""
    return logging.getLogger(name)
