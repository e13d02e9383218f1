"""Mini README: Application-wide logging helpers for Ledger Desk.

Structure:
    * get_logger - factory returning module loggers with baseline configuration.
    * configure_root_logger - one-shot setup of the root handler and level.

Usage:
    Modules call ``get_logger(__name__)`` at import time. Configuration happens
    once per process so reloading modules under uvicorn's reloader does not
    stack duplicate handlers.
"""

from __future__ import annotations

import logging
from typing import Optional

_LOGGER_INITIALISED = False


def configure_root_logger(level: int = logging.INFO) -> None:
    """Attach a single stream handler to the root logger."""

    global _LOGGER_INITIALISED
    root_logger = logging.getLogger()
    if _LOGGER_INITIALISED:
        root_logger.setLevel(level)
        return

    handler = logging.StreamHandler()
    handler.setFormatter(
        logging.Formatter(
            "[%(asctime)s] [%(levelname)s] %(name)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )

    root_logger.setLevel(level)
    root_logger.addHandler(handler)
    _LOGGER_INITIALISED = True


def level_for_environment(environment: str) -> int:
    """Map the configured environment label onto a logging level."""

    return logging.DEBUG if environment.strip().lower() == "development" else logging.INFO


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a module-specific logger ensuring baseline configuration."""

    if not _LOGGER_INITIALISED:
        configure_root_logger()
    return logging.getLogger(name)
