"""Login and registration screens."""

import logging
from typing import List, Optional

from .store import AppState

logger = logging.getLogger(__name__)

GENERIC_ERROR = "An unexpected error occurred. Please try again."


class LoginView:
    def __init__(self, state: AppState) -> None:
        self.state = state
        self.error: Optional[str] = None
        self.logged_in = False

    def login(self, username: str, password: str) -> bool:
        """Log in and store the identity in the user store.

        On failure ``error`` shows the server's message when it sent
        one, otherwise a generic message.
        """
        self.error = None
        data, error = self.state.api.login(username, password)
        if error:
            body = error.get("body")
            server_message = body.get("error") if isinstance(body, dict) else None
            self.error = server_message or GENERIC_ERROR
            return False
        user = (data or {}).get("user") or {}
        self.state.users.login(user.get("username", username), (data or {}).get("token"))
        self.logged_in = True
        return True


class RegisterView:
    """Sign-up screen.

    ``failed_rules`` lists the password rules the server reported as
    broken (``minLength``, ``digit``, ``uppercase``).
    """

    def __init__(self, state: AppState) -> None:
        self.state = state
        self.error: Optional[str] = None
        self.failed_rules: List[str] = []
        self.registered = False

    def register(self, username: str, email: str, password: str) -> bool:
        self.error = None
        self.failed_rules = []
        data, error = self.state.api.register(username, email, password)
        if error:
            body = error.get("body")
            if isinstance(body, dict):
                self.failed_rules = list(body.get("failedRules") or [])
            self.error = error["message"] or GENERIC_ERROR
            logger.error("Registration failed: %s", self.error)
            return False
        logger.info("User registered successfully: %s", data)
        self.registered = True
        return True
