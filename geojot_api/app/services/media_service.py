"""
Storage for uploaded images.

Pin attachments and profile pictures are stored as blobs in the
``media`` table and served back through ``GET /api/media/{id}``.  Only
``image/*`` content types are accepted.
"""

import logging
from typing import Tuple

from geojot_api.app.core.config import settings
from geojot_api.app.core.db import get_connection

from .errors import NotFound, ValidationFailed

logger = logging.getLogger(__name__)


def is_image(content_type: str) -> bool:
    return (content_type or "").lower().startswith("image/")


class MediaService:
    """Store and fetch uploaded images."""

    @classmethod
    async def store_image(
        cls, owner_id: int, filename: str, content_type: str, content: bytes
    ) -> int:
        """Validate and persist an image, returning its media id."""
        if not is_image(content_type):
            raise ValidationFailed("Only image files are allowed")
        if not content:
            raise ValidationFailed("Uploaded file is empty")
        if len(content) > settings.max_upload_bytes:
            raise ValidationFailed(
                f"Image exceeds the {settings.max_upload_bytes // (1024 * 1024)} MB limit"
            )
        conn = get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                "INSERT INTO media (owner_id, filename, content_type, content) VALUES (?, ?, ?, ?)",
                (owner_id, filename or "upload", content_type, content),
            )
            media_id = cursor.lastrowid
            conn.commit()
        finally:
            conn.close()
        logger.info("Stored media %s (%s, %d bytes)", media_id, content_type, len(content))
        return media_id

    @classmethod
    async def get_image(cls, media_id: int) -> Tuple[str, bytes]:
        """Return ``(content_type, content)`` for a stored image."""
        conn = get_connection()
        try:
            row = conn.execute(
                "SELECT content_type, content FROM media WHERE id = ?", (media_id,)
            ).fetchone()
        finally:
            conn.close()
        if not row:
            raise NotFound(f"Media {media_id} not found")
        return row["content_type"], bytes(row["content"])
