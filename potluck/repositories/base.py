"""Storage adapter contract shared by the JSON file and SQL backends."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from potluck.domain.rsvps import RsvpRecord


class StorageError(Exception):
    """Raised when a backend fails (I/O, connectivity, constraint)."""


class DuplicateNameError(StorageError):
    """Raised when an insert collides with an existing case-insensitive name."""


class RsvpStorage(ABC):
    """Parameterized access to the rsvps table, one implementation per backend."""

    backend_name: str = "abstract"

    @abstractmethod
    def ensure_schema(self) -> None:
        """Create the rsvps table if absent. Safe to call on every start."""

    @abstractmethod
    def query_all(self) -> list[RsvpRecord]:
        """All records, newest first."""

    @abstractmethod
    def find_by_name_case_insensitive(self, name: str) -> Optional[RsvpRecord]:
        ...

    @abstractmethod
    def insert(self, name: str, attending: bool, dish: Optional[str]) -> RsvpRecord:
        ...

    @abstractmethod
    def update(self, rsvp_id: int, attending: bool, dish: Optional[str]) -> None:
        ...

    @abstractmethod
    def delete_all(self) -> int:
        """Remove every record and return how many were removed."""

    def close(self) -> None:
        pass
