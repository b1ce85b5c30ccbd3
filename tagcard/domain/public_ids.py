"""Domain helpers for public profile identifiers."""
from __future__ import annotations

import re
import secrets

PUBLIC_ID_PATTERN = re.compile(r"[A-Za-z0-9_-]{1,64}")
PUBLIC_ID_BYTES = 12


def generate_public_id() -> str:
    """Random, URL-safe and unguessable (16 chars for 12 bytes)."""
    return secrets.token_urlsafe(PUBLIC_ID_BYTES)


def is_valid_public_id(value: str | None) -> bool:
    """Return True when value has the shape of an identifier we could have issued."""
    if not value:
        return False
    return bool(PUBLIC_ID_PATTERN.fullmatch(value))
