from __future__ import annotations

import os
import hashlib
import hmac
import logging

from ..config import Settings

logger = logging.getLogger(__name__)

DEFAULT_ITERATIONS = 390000


def hash_password(password: str, salt: bytes | None = None, iterations: int = DEFAULT_ITERATIONS) -> str:
    if salt is None:
        salt = os.urandom(16)
    derived = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, iterations)
    return f"pbkdf2_sha256${iterations}${salt.hex()}${derived.hex()}"


def verify_password(stored: str, password: str) -> bool:
    try:
        _, iter_str, salt_hex, _hash_hex = stored.split("$", 3)
        iterations = int(iter_str)
        salt = bytes.fromhex(salt_hex)
    except (AttributeError, ValueError):
        return False
    candidate = hash_password(password, salt=salt, iterations=iterations)
    return hmac.compare_digest(candidate, stored)


class AuthService:
    """Checks credentials against the single configured admin account."""

    def __init__(self, config: Settings) -> None:
        self.config = config
        self._password_hash: str | None = None

    def admin_password_hash(self) -> str:
        if self.config.ADMIN_PASSWORD_HASH:
            return self.config.ADMIN_PASSWORD_HASH
        # plaintext fallback is hashed at most once per service
        if self._password_hash is None:
            self._password_hash = hash_password(self.config.ADMIN_PASSWORD)
        return self._password_hash

    def authenticate(self, username: str, password: str) -> bool:
        username_ok = hmac.compare_digest(
            (username or "").encode("utf-8"), self.config.ADMIN_USERNAME.encode("utf-8")
        )
        password_ok = verify_password(self.admin_password_hash(), password or "")
        return username_ok and password_ok
