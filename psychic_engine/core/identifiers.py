"""Identifier helpers for store keys and log-safe user tokens."""

from __future__ import annotations

import base64
import hashlib
import hmac
from functools import lru_cache
from typing import Optional

from psychic_engine.core.config import settings

USERS_PATH = "users"
PSEUDONYM_LENGTH = 16

# Order matters: "%" must be escaped before any escape sequence is introduced.
_KEY_ESCAPES = (
    ("%", "%25"),
    (".", "%2E"),
    ("#", "%23"),
    ("$", "%24"),
    ("/", "%2F"),
    ("[", "%5B"),
    ("]", "%5D"),
)


def encode_store_key(value: str) -> str:
    """Escape characters that are not allowed inside a store key segment."""
    for char, escaped in _KEY_ESCAPES:
        value = value.replace(char, escaped)
    return value


def user_record_path(user_id: str) -> str:
    """Return the store path for ``user_id``, e.g. ``users/abc%2Edef``."""
    return f"{USERS_PATH}/{encode_store_key(user_id)}"


@lru_cache(maxsize=4096)
def _pseudonym(user_id: str, secret: str) -> str:
    digest = hmac.digest(secret.encode("utf-8"), user_id.encode("utf-8"), hashlib.sha256)
    return base64.urlsafe_b64encode(digest).decode("ascii").rstrip("=")[:PSEUDONYM_LENGTH]


def get_log_safe_user_id(user_id: str, *, secret: Optional[str] = None) -> str:
    """Return the HMAC pseudonym logged in place of ``user_id``.

    ``secret`` defaults to ``LOG_PSEUDONYM_SECRET`` from settings.
    """
    key = secret or settings.LOG_PSEUDONYM_SECRET
    if not key:
        raise RuntimeError("LOG_PSEUDONYM_SECRET must be configured.")
    return _pseudonym(user_id, key)


def clear_log_safe_user_cache() -> None:
    """Forget cached pseudonyms after a secret rotation."""
    _pseudonym.cache_clear()


__all__ = [
    "PSEUDONYM_LENGTH",
    "USERS_PATH",
    "encode_store_key",
    "user_record_path",
    "get_log_safe_user_id",
    "clear_log_safe_user_cache",
]
