"""
Persistence adapters.

Two interchangeable backends implement RsvpStorage: an embedded JSON file and
a SQLAlchemy database. Services depend on the interface, never on a backend.
"""

from .base import DuplicateNameError, RsvpStorage, StorageError
from .factory import build_storage

__all__ = ["DuplicateNameError", "RsvpStorage", "StorageError", "build_storage"]
