"""Utility script to create the rsvps schema on the configured backend."""
from __future__ import annotations

from potluck.core.config import get_settings
from potluck.core.log_setup import configure_logging
from potluck.repositories import StorageError, build_storage


def create_all() -> None:
    settings = get_settings()
    storage = build_storage(settings)
    try:
        storage.ensure_schema()
    finally:
        storage.close()


if __name__ == "__main__":
    configure_logging(get_settings().log_level)
    try:
        create_all()
        print("RSVP storage ready.")
    except StorageError as exc:
        raise SystemExit(f"Failed to create tables: {exc}") from exc
