"""
Read-only view of a pin with its like button.

Edit, delete and invite are offered only to the pin's owner.
"""

import logging
from typing import Any, Callable, Dict, List, Optional

from .collaborators import CollaboratorInvite
from .pin_form import PinForm
from .store import AppState

logger = logging.getLogger(__name__)


class PinDetailView:
    """``on_delete`` performs the deletion; ``on_removed`` is told when the
    edit form deleted the pin itself.
    """

    def __init__(
        self,
        state: AppState,
        pin: Dict[str, Any],
        *,
        on_delete: Optional[Callable[[str], Any]] = None,
        on_saved: Optional[Callable[[Dict[str, Any]], None]] = None,
        on_removed: Optional[Callable[[str], None]] = None,
    ) -> None:
        self.state = state
        self.pin = pin
        self.likes: List[str] = list(pin.get("likes") or [])
        self.on_delete = on_delete
        self.on_saved = on_saved
        self.on_removed = on_removed
        self.error: Optional[str] = None

    @property
    def pin_id(self) -> str:
        return self.pin["_id"]

    @property
    def name(self) -> str:
        return self.pin.get("name", "")

    @property
    def notes(self) -> str:
        return self.pin.get("notes", "")

    @property
    def media_files(self) -> List[Dict[str, Any]]:
        return list(self.pin.get("mediaFiles") or [])

    @property
    def song(self) -> Optional[Dict[str, str]]:
        return self.pin.get("songDetails")

    @property
    def has_song(self) -> bool:
        return bool(self.song and self.song.get("previewUrl"))

    @property
    def can_edit(self) -> bool:
        username = self.state.username
        return username is not None and username == self.pin.get("username")

    can_invite = can_edit

    @property
    def like_count(self) -> int:
        return len(self.likes)

    @property
    def liked(self) -> bool:
        return self.state.username in self.likes

    def toggle_like(self) -> bool:
        likes, error = self.state.api.toggle_like(self.pin_id)
        if error:
            logger.error("Toggling like on pin %s failed: %s", self.pin_id, error["message"])
            self.error = error["message"]
            return False
        self.error = None
        self.likes = likes
        self.pin["likes"] = likes
        return True

    def edit(self) -> Optional[PinForm]:
        if not self.can_edit:
            return None
        return PinForm(
            self.state,
            pin=self.pin,
            on_saved=self._saved,
            on_deleted=self.on_removed,
        )

    def _saved(self, pin: Dict[str, Any]) -> None:
        self.pin = pin
        self.likes = list(pin.get("likes") or [])
        if self.on_saved:
            self.on_saved(pin)

    def invite(self, on_close: Optional[Callable[[], None]] = None) -> Optional[CollaboratorInvite]:
        if not self.can_invite:
            return None
        return CollaboratorInvite(self.state, self.pin_id, on_close=on_close)

    def delete(self) -> bool:
        if not self.can_edit or self.on_delete is None:
            return False
        return bool(self.on_delete(self.pin_id))
