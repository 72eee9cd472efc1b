"""
Pin editor used both for new pins and for editing an existing one.

Attachments are held locally until ``submit``: new images are uploaded
through ``/api/media`` first, then the pin is created or updated with
their URLs.
"""

import logging
import mimetypes
from dataclasses import dataclass
from concurrent.futures import Future
from typing import Any, Callable, Dict, Iterable, List, Optional

from .store import AppState

logger = logging.getLogger(__name__)

NAME_MIN_LENGTH = 3
NAME_MAX_LENGTH = 21
MAX_MEDIA_FILES = 9

NAME_LENGTH_ERROR = f"Name must be between {NAME_MIN_LENGTH} and {NAME_MAX_LENGTH} characters"
NOT_AN_IMAGE = "Only image files are allowed"
TOO_MANY_IMAGES = "Maximum images reached"


@dataclass
class MediaAttachment:
    """An image attached to a pin.

    Either already stored on the server (``url`` set) or a local file
    waiting to be uploaded (``content`` set).
    """

    filename: str
    content_type: str
    content: Optional[bytes] = None
    url: Optional[str] = None

    @property
    def uploaded(self) -> bool:
        return self.url is not None

    @property
    def is_image(self) -> bool:
        return (self.content_type or "").lower().startswith("image/")

    @classmethod
    def from_media_file(cls, media: Dict[str, Any]) -> "MediaAttachment":
        url = media["url"]
        title = media.get("title") or url.rsplit("/", 1)[-1]
        content_type = mimetypes.guess_type(title)[0] or "image/*"
        return cls(filename=title, content_type=content_type, url=url)


def song_from_track(track: Dict[str, Any]) -> Dict[str, str]:
    """Convert a Spotify track item into the pin's ``songDetails``."""
    images = (track.get("album") or {}).get("images") or []
    return {
        "title": track.get("name", ""),
        "artists": ", ".join(a.get("name", "") for a in track.get("artists") or []),
        "albumArtUrl": images[0].get("url", "") if images else "",
        "previewUrl": track.get("preview_url") or "",
    }


class PinForm:
    def __init__(
        self,
        state: AppState,
        *,
        position: Optional[Dict[str, float]] = None,
        pin: Optional[Dict[str, Any]] = None,
        on_saved: Optional[Callable[[Dict[str, Any]], None]] = None,
        on_deleted: Optional[Callable[[str], None]] = None,
    ) -> None:
        if pin is None and position is None:
            raise ValueError("A new pin needs a position")
        self.state = state
        self.pin_id: Optional[str] = pin.get("_id") if pin else None
        self.position = dict(position or pin["position"])
        self.name: str = pin.get("name", "") if pin else ""
        self.notes: str = pin.get("notes", "") if pin else ""
        self.media: List[MediaAttachment] = [
            MediaAttachment.from_media_file(m) for m in (pin or {}).get("mediaFiles") or []
        ]
        self.song: Optional[Dict[str, str]] = (pin or {}).get("songDetails")
        self.music_results: List[Dict[str, Any]] = []
        self.music_error: Optional[str] = None
        self.error: Optional[str] = None
        self.on_saved = on_saved
        self.on_deleted = on_deleted

    @property
    def is_new(self) -> bool:
        return self.pin_id is None

    def validate(self) -> bool:
        if not NAME_MIN_LENGTH <= len(self.name.strip()) <= NAME_MAX_LENGTH:
            self.error = NAME_LENGTH_ERROR
            return False
        self.error = None
        return True

    # ------------------------------------------------------------------
    # Attachments
    # ------------------------------------------------------------------
    def add_media(self, files: Iterable[MediaAttachment]) -> int:
        """Attach files, skipping non-images and anything past the limit.

        Returns the number of files attached.
        """
        added = 0
        self.error = None
        for attachment in files:
            if len(self.media) >= MAX_MEDIA_FILES:
                self.error = TOO_MANY_IMAGES
                break
            if not attachment.is_image:
                logger.info("Rejected non-image attachment %s", attachment.filename)
                self.error = NOT_AN_IMAGE
                continue
            self.media.append(attachment)
            added += 1
        return added

    def remove_media(self, index: int) -> None:
        del self.media[index]
        if self.error == TOO_MANY_IMAGES:
            self.error = None

    # ------------------------------------------------------------------
    # Music
    # ------------------------------------------------------------------
    def search_music(self, query: str) -> Optional[Future]:
        """Search tracks in the background; results land in ``music_results``.

        Only the answer to the latest query is kept.
        """
        query = query.strip()
        if not query:
            self.state.inflight.cancel((id(self), "music"))
            self.music_results = []
            return None
        return self.state.inflight.submit(
            (id(self), "music"),
            self.state.api.search_music,
            query,
            on_result=self._music_loaded,
        )

    def _music_loaded(self, result: Any) -> None:
        items, error = result
        if error:
            self.music_error = error["message"]
            return
        self.music_error = None
        self.music_results = items

    def select_song(self, track: Dict[str, Any]) -> None:
        self.song = song_from_track(track)
        self.music_results = []

    def clear_song(self) -> None:
        self.song = None

    # ------------------------------------------------------------------
    # Save / delete
    # ------------------------------------------------------------------
    def submit(self) -> Optional[Dict[str, Any]]:
        """Upload new images, then create or update the pin.

        Returns the saved pin, or ``None`` with ``error`` set.
        """
        if not self.validate():
            return None
        media_files = []
        for attachment in self.media:
            if not attachment.uploaded:
                data, error = self.state.api.upload_media(
                    attachment.filename, attachment.content, attachment.content_type
                )
                if error:
                    self.error = f"Failed to submit form: {error['message']}"
                    return None
                attachment.url = data["url"]
                attachment.content = None
            media_files.append({"url": attachment.url, "title": attachment.filename})

        payload = {
            "position": self.position,
            "name": self.name.strip(),
            "notes": self.notes,
            "mediaFiles": media_files,
            "songDetails": self.song,
        }
        if self.is_new:
            saved, error = self.state.api.create_pin(payload)
        else:
            saved, error = self.state.api.update_pin(self.pin_id, payload)
        if error:
            self.error = f"Failed to submit form: {error['message']}"
            return None

        self.error = None
        self.pin_id = saved.get("_id", self.pin_id)
        logger.info("Saved pin %s", self.pin_id)
        self.state.pins.fetch_recent_pins()
        if self.on_saved:
            self.on_saved(saved)
        return saved

    def delete(self) -> bool:
        if self.is_new:
            return False
        ok, error = self.state.api.delete_pin(self.pin_id)
        if not ok:
            self.error = f"Failed to delete pin: {error['message']}"
            return False
        self.state.pins.fetch_recent_pins()
        if self.on_deleted:
            self.on_deleted(self.pin_id)
        return True
