"""RSVP data access backed by SQLAlchemy (hosted Postgres, or SQLite in tests)."""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from potluck.db.models import NAME_INDEX, Rsvp
from potluck.db.session import Base, build_engine, build_sessionmaker, session_scope
from potluck.domain.rsvps import RsvpRecord, ensure_utc
from potluck.repositories.base import DuplicateNameError, RsvpStorage, StorageError


def _entity_to_record(entity: Rsvp) -> RsvpRecord:
    return RsvpRecord(
        id=entity.id,
        name=entity.name,
        attending=bool(entity.attending),
        dish=entity.dish or None,
        created_at=ensure_utc(entity.created_at),
    )


class SQLStorage(RsvpStorage):
    """CRUD helpers wrapping one engine and its session factory."""

    backend_name = "sql"

    def __init__(self, url: str) -> None:
        self.engine = build_engine(url)
        self.session_factory = build_sessionmaker(self.engine)

    def ensure_schema(self) -> None:
        try:
            Base.metadata.create_all(bind=self.engine)
        except SQLAlchemyError as exc:
            raise StorageError("Failed to create the rsvps table") from exc

    def query_all(self) -> list[RsvpRecord]:
        stmt = select(Rsvp).order_by(Rsvp.created_at.desc(), Rsvp.id.desc())
        try:
            with session_scope(self.session_factory) as session:
                return [_entity_to_record(e) for e in session.execute(stmt).scalars().all()]
        except SQLAlchemyError as exc:
            raise StorageError("Failed to list RSVPs") from exc

    def find_by_name_case_insensitive(self, name: str) -> Optional[RsvpRecord]:
        stmt = (
            select(Rsvp)
            .where(func.lower(Rsvp.name) == func.lower(name))
            .order_by(Rsvp.id)
            .limit(1)
        )
        try:
            with session_scope(self.session_factory) as session:
                entity = session.execute(stmt).scalar_one_or_none()
                return _entity_to_record(entity) if entity else None
        except SQLAlchemyError as exc:
            raise StorageError("Failed to look up RSVP") from exc

    def insert(self, name: str, attending: bool, dish: Optional[str]) -> RsvpRecord:
        entity = Rsvp(
            name=name,
            attending=bool(attending),
            dish=dish,
            created_at=datetime.now(timezone.utc),
        )
        try:
            with session_scope(self.session_factory) as session:
                session.add(entity)
                try:
                    session.commit()
                except IntegrityError as exc:
                    session.rollback()
                    if NAME_INDEX not in str(exc.orig):
                        raise
                    raise DuplicateNameError(f"RSVP for {name!r} already exists") from exc
                session.refresh(entity)
                return _entity_to_record(entity)
        except SQLAlchemyError as exc:
            raise StorageError("Failed to insert RSVP") from exc

    def update(self, rsvp_id: int, attending: bool, dish: Optional[str]) -> None:
        stmt = update(Rsvp).where(Rsvp.id == rsvp_id).values(attending=bool(attending), dish=dish)
        try:
            with session_scope(self.session_factory) as session:
                session.execute(stmt)
                session.commit()
        except SQLAlchemyError as exc:
            raise StorageError("Failed to update RSVP") from exc

    def delete_all(self) -> int:
        try:
            with session_scope(self.session_factory) as session:
                result = session.execute(delete(Rsvp))
                session.commit()
                return int(result.rowcount or 0)
        except SQLAlchemyError as exc:
            raise StorageError("Failed to wipe RSVPs") from exc

    def close(self) -> None:
        self.engine.dispose()
