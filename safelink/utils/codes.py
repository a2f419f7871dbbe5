"""Pairing code helpers: generation, normalization, expiry."""

import random
import re
import string
from datetime import datetime, timezone

CODE_ALPHABET = string.ascii_uppercase + string.digits
CODE_PATTERN = re.compile(r"^[A-Z0-9]{6}$")


def generate_code(length: int = 6) -> str:
    """Generate a random pairing code, e.g. ``"K7Q2ZD"``.

    Not cryptographically strong: codes are short-lived and one-time, and
    collisions are caught by the unique constraint on ``pairing_codes.code``.
    """
    return "".join(random.choices(CODE_ALPHABET, k=length))


def normalize_code(raw: str) -> str:
    """Canonical form of user input: ``"ab-12cd"`` -> ``"AB12CD"``."""
    return raw.strip().replace("-", "", 1).upper()


def ensure_utc(value: datetime) -> datetime:
    """SQLite drops tzinfo; stored values are always UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def is_expired(expires_at: datetime, now: datetime | None = None) -> bool:
    now = now or datetime.now(timezone.utc)
    return ensure_utc(now) > ensure_utc(expires_at)
