"""Logging setup for the package.

Usage:
    from outlet_attendance.common.log_config import setup_logging

    setup_logging("INFO")
    logger = logging.getLogger(__name__)
"""

from __future__ import annotations

import logging
import sys
from typing import Union

PACKAGE_LOGGER = "outlet_attendance"
LOG_FORMAT = "%(asctime)s %(levelname)-8s [%(name)s] %(message)s"


def setup_logging(level: Union[str, int] = "INFO") -> logging.Logger:
    """Attach a single console handler to the package logger.

    Safe to call more than once (e.g. one app per test); the handler is not duplicated.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)

    if not any(getattr(h, "_outlet_attendance", False) for h in logger.handlers):
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._outlet_attendance = True  # type: ignore[attr-defined]
        logger.addHandler(handler)

    return logger
