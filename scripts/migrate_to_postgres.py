"""One-off migration script: JSON store (potluck.json) -> SQL database."""
from __future__ import annotations

import argparse
import json
from pathlib import Path
import sys
from datetime import datetime, timezone

# Garantir que o pacote potluck seja importável quando rodado diretamente
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from sqlalchemy import func, select

from potluck.core.config import get_settings
from potluck.core.log_setup import configure_logging
from potluck.db.models import Rsvp
from potluck.db.session import session_scope
from potluck.domain.rsvps import normalize_dish, normalize_name
from potluck.repositories.sql_repository import SQLStorage


def _to_datetime(value) -> datetime:
    if not value:
        return datetime.now(timezone.utc)
    try:
        parsed = datetime.fromisoformat(str(value))
    except ValueError:
        return datetime.now(timezone.utc)
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def _load_json(path: Path) -> list[dict]:
    if not path.exists():
        raise SystemExit(f"File not found: {path}")
    with path.open("r", encoding="utf-8") as f:
        data = json.load(f)
    return list(data.get("rsvps") or [])


def migrate(json_path: Path, database_url: str) -> tuple[int, int]:
    """Copy every JSON record into SQL; names already present there are skipped."""
    storage = SQLStorage(database_url)
    storage.ensure_schema()
    copied = skipped = 0
    try:
        with session_scope(storage.session_factory) as session:
            for row in sorted(_load_json(json_path), key=lambda r: r.get("id") or 0):
                name = normalize_name(row.get("name"))
                if not name:
                    skipped += 1
                    continue
                stmt = select(Rsvp.id).where(func.lower(Rsvp.name) == func.lower(name)).limit(1)
                if session.execute(stmt).first() is not None:
                    skipped += 1
                    continue
                session.add(
                    Rsvp(
                        name=name,
                        attending=bool(row.get("attending")),
                        dish=normalize_dish(row.get("dish")),
                        created_at=_to_datetime(row.get("created_at")),
                    )
                )
                session.flush()
                copied += 1
            session.commit()
    finally:
        storage.close()
    return copied, skipped


def main() -> None:
    settings = get_settings()
    ap = argparse.ArgumentParser(description="Copy RSVPs from the JSON store into the SQL database")
    ap.add_argument("--json", default=settings.data_file, help="JSON store path (default: POTLUCK_DATA_FILE)")
    ap.add_argument("--database-url", default=settings.database_url, help="Target URL (default: POSTGRES_URL/DATABASE_URL)")
    args = ap.parse_args()
    if not args.database_url:
        raise SystemExit("POSTGRES_URL or DATABASE_URL must be set (or pass --database-url)")

    configure_logging(settings.log_level)
    copied, skipped = migrate(Path(args.json), args.database_url)
    print(f"OK: {copied} RSVPs copied, {skipped} skipped")


if __name__ == "__main__":
    main()
