"""
Embedded JSON file persistence adapter.

The whole table lives in one JSON document. Every operation goes through a
single lock, so within a process the file has one reader or writer at a time.
"""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
import json
import os
import threading
from typing import Optional

from potluck.domain.rsvps import RsvpRecord, name_key, newest_first
from potluck.repositories.base import DuplicateNameError, RsvpStorage, StorageError


def _empty() -> dict:
    return {"next_id": 1, "rsvps": []}


def _db_defaults(db) -> dict:
    if not isinstance(db, dict):
        raise ValueError("top level must be an object")
    db.setdefault("next_id", 1)
    db.setdefault("rsvps", [])
    if not isinstance(db["rsvps"], list) or not all(isinstance(row, dict) for row in db["rsvps"]):
        raise ValueError("rsvps must be a list of objects")
    return db


def _to_record(row: dict) -> RsvpRecord:
    return RsvpRecord(
        id=int(row["id"]),
        name=row["name"],
        attending=bool(row["attending"]),
        dish=row.get("dish") or None,
        created_at=datetime.fromisoformat(row["created_at"]),
    )


class JsonFileStorage(RsvpStorage):
    backend_name = "json"

    def __init__(self, path: str | os.PathLike) -> None:
        self.path = Path(path)
        self._lock = threading.Lock()

    # -------------------------- file access --------------------------
    def _load(self) -> dict:
        try:
            if not self.path.exists():
                return _empty()
            with self.path.open("r", encoding="utf-8") as f:
                return _db_defaults(json.load(f))
        except (OSError, ValueError) as exc:
            raise StorageError(f"Failed to read {self.path}") from exc

    def _save(self, db: dict) -> None:
        tmp = self.path.with_name(self.path.name + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_text(json.dumps(db, ensure_ascii=False, indent=2), encoding="utf-8")
            os.replace(tmp, self.path)
        except OSError as exc:
            raise StorageError(f"Failed to write {self.path}") from exc

    def _find_row(self, db: dict, name: str) -> Optional[dict]:
        key = name_key(name)
        try:
            for row in db["rsvps"]:
                if name_key(row["name"]) == key:
                    return row
        except (KeyError, TypeError) as exc:
            raise StorageError(f"Corrupt record in {self.path}") from exc
        return None

    # -------------------------- adapter --------------------------
    def ensure_schema(self) -> None:
        with self._lock:
            db = self._load()
            if not self.path.exists():
                self._save(db)

    def query_all(self) -> list[RsvpRecord]:
        with self._lock:
            db = self._load()
        try:
            return newest_first(_to_record(row) for row in db["rsvps"])
        except (KeyError, TypeError, ValueError) as exc:
            raise StorageError(f"Corrupt record in {self.path}") from exc

    def find_by_name_case_insensitive(self, name: str) -> Optional[RsvpRecord]:
        with self._lock:
            row = self._find_row(self._load(), name)
        if row is None:
            return None
        try:
            return _to_record(row)
        except (KeyError, TypeError, ValueError) as exc:
            raise StorageError(f"Corrupt record in {self.path}") from exc

    def insert(self, name: str, attending: bool, dish: Optional[str]) -> RsvpRecord:
        with self._lock:
            db = self._load()
            if self._find_row(db, name):
                raise DuplicateNameError(f"RSVP for {name!r} already exists")
            try:
                next_id = int(db["next_id"])
            except (TypeError, ValueError) as exc:
                raise StorageError(f"Corrupt next_id in {self.path}") from exc
            row = {
                "id": next_id,
                "name": name,
                "attending": bool(attending),
                "dish": dish,
                "created_at": datetime.now(timezone.utc).isoformat(),
            }
            db["rsvps"].append(row)
            db["next_id"] = row["id"] + 1
            self._save(db)
        return _to_record(row)

    def update(self, rsvp_id: int, attending: bool, dish: Optional[str]) -> None:
        with self._lock:
            db = self._load()
            try:
                for row in db["rsvps"]:
                    if row["id"] == rsvp_id:
                        row["attending"] = bool(attending)
                        row["dish"] = dish
                        break
            except KeyError as exc:
                raise StorageError(f"Corrupt record in {self.path}") from exc
            self._save(db)

    def delete_all(self) -> int:
        with self._lock:
            db = self._load()
            removed = len(db["rsvps"])
            # next_id survives so ids are never reused after a wipe
            db["rsvps"] = []
            self._save(db)
        return removed
