"""RSVP use cases: list, upsert by guest name, password-gated wipe."""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Optional

from potluck.core.security import secrets_match
from potluck.domain.rsvps import RsvpRecord, RsvpSummary, normalize_dish, normalize_name, summarize
from potluck.repositories.base import DuplicateNameError, RsvpStorage

logger = logging.getLogger(__name__)


class RsvpError(Exception):
    """Base exception for RSVP workflow."""


class NameRequiredError(RsvpError):
    """Raised when the submitted name is blank."""


class UnauthorizedError(RsvpError):
    """Raised when the wipe secret does not match."""


@dataclass(frozen=True)
class UpsertResult:
    record: RsvpRecord
    created: bool

    @property
    def updated(self) -> bool:
        return not self.created


class RsvpService:
    """Keeps one record per guest on top of whichever storage it is given."""

    def __init__(self, storage: RsvpStorage) -> None:
        self.storage = storage

    def list_all(self) -> list[RsvpRecord]:
        return self.storage.query_all()

    def summary(self) -> RsvpSummary:
        return summarize(self.list_all())

    def upsert(self, raw_name, attending: bool, dish: Optional[str] = None) -> UpsertResult:
        name = normalize_name(raw_name)
        if not name:
            raise NameRequiredError("Name is required")
        dish_value = normalize_dish(dish)
        attending = bool(attending)

        existing = self.storage.find_by_name_case_insensitive(name)
        if existing is None:
            try:
                record = self.storage.insert(name, attending, dish_value)
            except DuplicateNameError:
                # a concurrent submission created the guest after our lookup
                existing = self.storage.find_by_name_case_insensitive(name)
                if existing is None:
                    raise
            else:
                logger.info("RSVP created for %s (id=%s)", record.name, record.id)
                return UpsertResult(record=record, created=True)

        self.storage.update(existing.id, attending, dish_value)
        logger.info("RSVP updated for %s (id=%s)", existing.name, existing.id)
        record = RsvpRecord(
            id=existing.id,
            name=existing.name,
            attending=attending,
            dish=dish_value,
            created_at=existing.created_at,
        )
        return UpsertResult(record=record, created=False)

    def wipe_all(self, supplied_secret: Optional[str], expected_secret: str) -> int:
        if not secrets_match(supplied_secret, expected_secret):
            logger.warning("Rejected wipe attempt with an invalid admin password")
            raise UnauthorizedError("Unauthorized")
        removed = self.storage.delete_all()
        logger.warning("All RSVPs wiped (%d removed)", removed)
        return removed
