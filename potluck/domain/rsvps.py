"""Pure RSVP rules: record shape, name/dish normalization and stats."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Iterable, Optional


@dataclass(frozen=True)
class RsvpRecord:
    id: int
    name: str
    attending: bool
    dish: Optional[str]
    created_at: datetime

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "attending": self.attending,
            "dish": self.dish,
            "created_at": ensure_utc(self.created_at).isoformat(),
        }


@dataclass(frozen=True)
class RsvpSummary:
    total: int
    attending: int
    not_attending: int
    dishes: int

    def to_dict(self) -> dict:
        return {
            "total": self.total,
            "attending": self.attending,
            "not_attending": self.not_attending,
            "dishes": self.dishes,
        }


def normalize_name(value) -> str:
    """Trimmed guest name, or "" when missing or not text."""
    if not isinstance(value, str):
        return ""
    return value.strip()


def name_key(name: str) -> str:
    # Guests are the same when their trimmed names match ignoring case.
    return normalize_name(name).lower()


def normalize_dish(value) -> Optional[str]:
    if not isinstance(value, str):
        return None
    return value.strip() or None


def ensure_utc(value: datetime) -> datetime:
    """SQLite hands back naive datetimes; they were written as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def newest_first(records: Iterable[RsvpRecord]) -> list[RsvpRecord]:
    return sorted(records, key=lambda r: (ensure_utc(r.created_at), r.id), reverse=True)


def summarize(records: Iterable[RsvpRecord]) -> RsvpSummary:
    total = attending = dishes = 0
    for record in records:
        total += 1
        if record.attending:
            attending += 1
            if record.dish:
                dishes += 1
    return RsvpSummary(total=total, attending=attending, not_attending=total - attending, dishes=dishes)
