#!/usr/bin/env python3
"""
Wipe every RSVP from the configured backend (JSON or SQL).

Usage:
  python scripts/wipe_rsvps.py --yes
"""
from __future__ import annotations

import argparse
from pathlib import Path
import sys

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from potluck.core.config import get_settings
from potluck.core.log_setup import configure_logging
from potluck.repositories import build_storage


def main() -> None:
    ap = argparse.ArgumentParser(description="Wipe every RSVP from the configured backend")
    ap.add_argument("--yes", action="store_true", help="Confirm the irreversible wipe")
    args = ap.parse_args()
    if not args.yes:
        raise SystemExit("Refusing to wipe without --yes")

    settings = get_settings()
    configure_logging(settings.log_level)
    storage = build_storage(settings)
    try:
        storage.ensure_schema()
        removed = storage.delete_all()
    finally:
        storage.close()
    print(f"OK: {removed} RSVPs removed ({storage.backend_name} backend)")


if __name__ == "__main__":
    try:
        main()
    except Exception as exc:  # pragma: no cover
        sys.stderr.write(f"Error: {exc}\n")
        raise SystemExit(1)
