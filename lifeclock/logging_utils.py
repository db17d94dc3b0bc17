from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

LOG_LEVEL_ENV = "LIFECLOCK_LOG_LEVEL"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def resolve_level(name: Optional[str]) -> int:
    """Map a level name (or the environment override) to a logging level."""
    name = name or os.environ.get(LOG_LEVEL_ENV) or "WARNING"
    level = logging.getLevelName(str(name).upper())
    if isinstance(level, int):
        return level
    return logging.WARNING


def build_rotating_handler(
    log_dir: Path,
    filename: str = "lifeclock.log",
    *,
    retention: int = 3,
    max_bytes: int = 256 * 1024,
) -> logging.Handler:
    """Construct the rotating file handler the terminal front end logs to."""
    retention = max(1, retention)
    log_dir.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        log_dir / filename,
        maxBytes=max_bytes,
        backupCount=retention - 1,
        encoding="utf-8",
    )
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    return handler


def configure_logging(log_dir: Path, level: Optional[str] = None) -> logging.Logger:
    logger = logging.getLogger("lifeclock")
    logger.setLevel(resolve_level(level))
    for existing in list(logger.handlers):
        if isinstance(existing, RotatingFileHandler):
            logger.removeHandler(existing)
            existing.close()
    try:
        logger.addHandler(build_rotating_handler(log_dir))
    except OSError:
        logger.addHandler(logging.NullHandler())
    return logger
