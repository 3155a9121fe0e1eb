"""Root logger setup for applications embedding the session engine."""

from __future__ import annotations

import logging

from seshlock.core.config import Settings

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
# Loggers that emit one line per statement or request at INFO.
NOISY_LOGGERS = ("sqlalchemy.engine", "uvicorn.access")


def setup_logging(settings: Settings) -> None:
    """Configure the root logger once, at ``settings.LOG_LEVEL``.

    Does nothing if the host application already installed handlers.
    """
    root = logging.getLogger()
    if root.handlers:
        return

    level = settings.LOG_LEVEL.upper()
    logging.basicConfig(level=level, format=LOG_FORMAT)
    if level != "DEBUG":
        for name in NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)
