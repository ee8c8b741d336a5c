"""Logging setup shared by the server and the headless runner.

The root level comes from ``--log-level`` or ``BUGFIGHTS_LOG_LEVEL``.  Fight
diagnostics are chatty (one line per attack), so they get their own level via
``BUGFIGHTS_FIGHT_LOG_LEVEL`` and can be silenced without hiding server logs.
"""

from __future__ import annotations

import logging
import os
from typing import Iterable

LOG_FORMAT = "%(asctime)s %(levelname)-7s [%(name)s] %(message)s"
LOG_DATEFMT = "%H:%M:%S"

APP_LOGGER = "bugfights"
FIGHT_LOGGER = "core.diagnostics"
UVICORN_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")


def _resolve_level(value: str | None, default: str) -> int:
    name = (value or default).upper()
    level = logging.getLevelName(name)
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {value!r}")
    return level


def configure_logging(
    *,
    level: str | None = None,
    fight_level: str | None = None,
    extra_loggers: Iterable[str] = (),
) -> logging.Logger:
    """Configure the root handler and the project loggers.

    Args:
        level: Explicit level; defaults to ``BUGFIGHTS_LOG_LEVEL`` then INFO
        fight_level: Level for fight diagnostics; defaults to
            ``BUGFIGHTS_FIGHT_LOG_LEVEL`` then the main level
        extra_loggers: More logger names to pin to the main level

    Returns:
        The ``bugfights`` application logger.

    Raises:
        ValueError: a level name is not recognised
    """
    main_level = _resolve_level(level if level is not None else os.getenv("BUGFIGHTS_LOG_LEVEL"), "INFO")
    diag_level = _resolve_level(
        fight_level if fight_level is not None else os.getenv("BUGFIGHTS_FIGHT_LOG_LEVEL"),
        logging.getLevelName(main_level),
    )

    logging.basicConfig(level=main_level, format=LOG_FORMAT, datefmt=LOG_DATEFMT)
    logging.getLogger().setLevel(main_level)

    for name in (APP_LOGGER, *UVICORN_LOGGERS, *extra_loggers):
        logging.getLogger(name).setLevel(main_level)
    logging.getLogger(FIGHT_LOGGER).setLevel(diag_level)

    app_logger = logging.getLogger(APP_LOGGER)
    app_logger.debug("Logging configured (main=%s, fights=%s)", logging.getLevelName(main_level), logging.getLevelName(diag_level))
    return app_logger
