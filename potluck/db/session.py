"""Engine/session helpers for the SQL backend."""
from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker, Session

Base = declarative_base()


def build_engine(url: str) -> Engine:
    url = (url or "").strip()
    if not url:
        raise RuntimeError("POSTGRES_URL or DATABASE_URL must be configured to use the SQL backend.")
    return create_engine(url, future=True, pool_pre_ping=True)


def build_sessionmaker(engine: Engine) -> sessionmaker:
    return sessionmaker(bind=engine, autoflush=False, autocommit=False, expire_on_commit=False, future=True)


@contextmanager
def session_scope(factory: sessionmaker) -> Iterator[Session]:
    session: Session = factory()
    try:
        yield session
    finally:
        session.close()
