"""Pick the storage backend once, at process start."""
from __future__ import annotations

import logging

from potluck.core.config import Settings
from potluck.repositories.base import RsvpStorage

logger = logging.getLogger(__name__)


def build_storage(settings: Settings) -> RsvpStorage:
    """A configured connection string selects SQL; otherwise the JSON file is used."""
    if settings.database_url:
        from potluck.repositories.sql_repository import SQLStorage

        logger.info("Using SQL storage")
        return SQLStorage(settings.database_url)

    from potluck.repositories.json_storage import JsonFileStorage

    logger.info("Using JSON file storage at %s", settings.data_file)
    return JsonFileStorage(settings.data_file)
