# gigmarket/core/security.py
from __future__ import annotations

import hashlib
import secrets
from typing import Tuple

from passlib.context import CryptContext


class PasswordHasher:
    """bcrypt via passlib; cost factor is fixed at construction."""

    def __init__(self, rounds: int = 12):
        self._ctx = CryptContext(
            schemes=["bcrypt"],
            deprecated="auto",
            bcrypt__rounds=rounds,
        )

    def hash(self, raw: str) -> str:
        return self._ctx.hash(raw)

    def verify(self, raw: str, hashed: str | None) -> bool:
        if not hashed:
            return False
        return self._ctx.verify(raw, hashed)


def sha256_hex(s: str) -> str:
    return hashlib.sha256(s.encode("utf-8")).hexdigest()


def generate_reset_token() -> Tuple[str, str]:
    """
    Returns (plain, hashed). Only the hash is ever persisted.
    """
    plain = secrets.token_hex(32)
    return plain, sha256_hex(plain)
