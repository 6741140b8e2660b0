"""Logging bootstrap shared by the app and the scripts."""

from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """
    Configure the root logger once.
    Calling it again only adjusts the level, so handlers are never duplicated.
    """
    root = logging.getLogger()
    resolved = logging.getLevelName(level.upper()) if isinstance(level, str) else level
    if not isinstance(resolved, int):
        resolved = logging.INFO
    if root.handlers:
        root.setLevel(resolved)
        return
    logging.basicConfig(level=resolved, format=LOG_FORMAT)
