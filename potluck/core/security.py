"""Security helpers (shared secret verification)."""

from __future__ import annotations

import secrets


def secrets_match(supplied: str | None, expected: str | None) -> bool:
    """Compare the supplied admin secret with the expected one in constant time."""
    if not supplied or not expected:
        return False
    return secrets.compare_digest(supplied.encode("utf-8"), expected.encode("utf-8"))
