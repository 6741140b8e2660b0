"""Per-process application context handed to routers through app.state."""

from __future__ import annotations

from dataclasses import dataclass, field

from potluck.core.config import Settings
from potluck.repositories.base import RsvpStorage
from potluck.services.rsvp_service import RsvpService


@dataclass
class AppContext:
    settings: Settings
    storage: RsvpStorage
    rsvp_service: RsvpService = field(init=False)

    def __post_init__(self) -> None:
        self.rsvp_service = RsvpService(self.storage)
