"""Invite dialog for sharing a pin with another user."""

import logging
from typing import Callable, Optional

from .store import AppState

logger = logging.getLogger(__name__)

INVITE_OK = "Collaborator invited successfully"
INVITE_FAILED = "Failed to invite collaborator"


class CollaboratorInvite:
    def __init__(self, state: AppState, pin_id: str, on_close: Optional[Callable[[], None]] = None) -> None:
        self.state = state
        self.pin_id = pin_id
        self.on_close = on_close
        self.message: Optional[str] = None

    def invite(self, username: str) -> bool:
        """Invite ``username``; the dialog closes itself on success."""
        _, error = self.state.api.invite_collaborator(self.pin_id, username.strip())
        if error:
            logger.error("Inviting %s to pin %s failed: %s", username, self.pin_id, error["message"])
            self.message = INVITE_FAILED
            return False
        self.message = INVITE_OK
        if self.on_close:
            self.on_close()
        return True

    def cancel(self) -> None:
        if self.on_close:
            self.on_close()
