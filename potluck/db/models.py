"""SQLAlchemy model for the rsvps table."""
from __future__ import annotations

from sqlalchemy import Boolean, Column, DateTime, Index, Integer, Text, func

from .session import Base

NAME_INDEX = "uq_rsvps_name_lower"


class Rsvp(Base):
    __tablename__ = "rsvps"
    # SQLite would otherwise hand out the ids of wiped rows again
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True)
    name = Column(Text, nullable=False)
    attending = Column(Boolean, nullable=False, default=False)
    dish = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)


Index(NAME_INDEX, func.lower(Rsvp.__table__.c.name), unique=True)
