"""
Another user's profile card and the profile picture upload dialog.
"""

import logging
from typing import Any, Callable, Dict, List, Optional

from .pin_form import MediaAttachment
from .store import AppState

logger = logging.getLogger(__name__)

DEFAULT_PROFILE_PIC = "default-profile-pic.jpg"
FOLLOW_FAILED = "Failed to update follow status"
NO_FILE = "Please select a file before submitting."
UPLOAD_FAILED = "Error uploading profile picture."


class UserProfileView:
    """Profile of ``user_data["username"]`` as seen by the logged-in user.

    Following is optimistic: the count and label change immediately
    and are rolled back if the server refuses.
    """

    def __init__(
        self,
        state: AppState,
        user_data: Dict[str, Any],
        on_close: Optional[Callable[[], None]] = None,
    ) -> None:
        self.state = state
        self.username: str = user_data["username"]
        self.followers: List[str] = list(user_data.get("followers") or [])
        self.profile_pic: str = user_data.get("profilePic") or DEFAULT_PROFILE_PIC
        self.on_close = on_close
        self.error: Optional[str] = None

    @property
    def followers_text(self) -> str:
        return f"{len(self.followers)} followers"

    @property
    def is_following(self) -> bool:
        return self.state.username in self.followers

    @property
    def follow_label(self) -> str:
        return "Unfollow" if self.is_following else "Follow"

    @property
    def can_follow(self) -> bool:
        viewer = self.state.username
        return viewer is not None and viewer != self.username

    def toggle_follow(self) -> bool:
        if not self.can_follow:
            return False
        viewer = self.state.username
        previous = list(self.followers)
        if self.is_following:
            self.followers.remove(viewer)
            _, error = self.state.api.unfollow(self.username, viewer)
        else:
            self.followers.append(viewer)
            _, error = self.state.api.follow(self.username, viewer)
        if error:
            self.followers = previous
            self.error = FOLLOW_FAILED
            return False
        self.error = None
        return True

    def load_profile_pic(self) -> str:
        users, error = self.state.api.search_users(self.username)
        if error:
            logger.error("Could not load profile picture of %s: %s", self.username, error["message"])
            return self.profile_pic
        match = next((u for u in users if u.get("username") == self.username), None)
        self.profile_pic = (match or {}).get("profilePic") or DEFAULT_PROFILE_PIC
        return self.profile_pic

    def close(self) -> None:
        if self.on_close:
            self.on_close()


class ProfilePictureUpload:
    def __init__(
        self,
        state: AppState,
        current_pic: Optional[str] = None,
        on_update: Optional[Callable[[str], None]] = None,
        on_close: Optional[Callable[[], None]] = None,
    ) -> None:
        self.state = state
        self.current_pic = current_pic
        self.on_update = on_update
        self.on_close = on_close
        self.selected: Optional[MediaAttachment] = None
        self.error: Optional[str] = None

    def select(self, attachment: MediaAttachment) -> None:
        self.selected = attachment
        self.error = None

    def submit(self) -> bool:
        if self.selected is None:
            self.error = NO_FILE
            return False
        username = self.state.username
        data, error = self.state.api.upload_profile_pic(
            username, self.selected.filename, self.selected.content, self.selected.content_type
        )
        if error:
            logger.error("Profile picture upload failed: %s", error["message"])
            self.error = UPLOAD_FAILED
            return False
        url = (data or {}).get("profilePic")
        self.current_pic = url
        self.selected = None
        if self.on_update:
            self.on_update(url)
        if self.on_close:
            self.on_close()
        return True
