"""
ExactSolver — logging setup for the entry points.

The ``algebra`` and ``linalg`` packages only create module loggers; the
CLI and the HTTP app call :func:`configure_logging` once at start-up.
"""

import logging
from typing import Union

LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"
DATE_FORMAT = "%H:%M:%S"


def configure_logging(level: Union[int, str] = logging.WARNING) -> None:
    """Route every ``algebra``/``linalg``/``workspace`` record to stderr at *level*."""
    if isinstance(level, str):
        name = level.strip().upper()
        if name not in logging.getLevelNamesMapping():
            raise ValueError(f"Unknown log level '{level}'.")
        level = logging.getLevelNamesMapping()[name]
    logging.basicConfig(level=level, format=LOG_FORMAT, datefmt=DATE_FORMAT, force=True)
