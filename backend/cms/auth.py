from __future__ import annotations

import logging
from typing import Any, MutableMapping

from .config import Settings
from .services.auth_service import AuthService

logger = logging.getLogger(__name__)

SESSION_FLAG = "logged_in"
INVALID_CREDENTIALS = "Invalid username or password"


class LoginRequired(Exception):
    """Raised to abort a request that needs an admin session."""


class AuthGate:
    def __init__(self, session: MutableMapping[str, Any], config: Settings) -> None:
        self.session = session
        self.config = config

    def is_logged_in(self) -> bool:
        # absent and anything other than True both mean "not logged in"
        return self.session.get(SESSION_FLAG) is True

    def require_login(self) -> None:
        if not self.is_logged_in():
            raise LoginRequired()

    def login(self, username: str, password: str) -> str | None:
        """Return None on success, otherwise the user-facing error text."""
        if not AuthService(self.config).authenticate(username, password):
            logger.info("admin login rejected")
            return INVALID_CREDENTIALS
        self.session[SESSION_FLAG] = True
        logger.info("admin logged in")
        return None

    def logout(self) -> None:
        self.session.clear()
        logger.info("admin logged out")
