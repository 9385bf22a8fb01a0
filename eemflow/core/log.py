"""Logging setup shared by the API entry point and scripts."""

from __future__ import annotations

import logging

from eemflow.core.config import Settings

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(settings: Settings) -> None:
    """Configure root logging from settings.

    Only installs a handler when none is configured yet, so hosts like
    uvicorn keep their own handlers.
    """
    level = getattr(logging, settings.log_level)
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(level=level, format=LOG_FORMAT)
    root.setLevel(level)
    logging.getLogger("eemflow").debug("Logging configured at %s", settings.log_level)
