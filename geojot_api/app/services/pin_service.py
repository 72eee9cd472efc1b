"""
Business logic for pins.

Only the owner of a pin may edit it, delete it or invite collaborators;
every mutating method takes the acting username and raises
``Forbidden`` for anyone else.  Likes are open to every authenticated
user.
"""

import json
import logging
import sqlite3
from typing import Any, Dict, List, Optional

from geojot_api.app.core.config import settings
from geojot_api.app.core.db import NOW_SQL, get_connection
from geojot_api.app.schemas.pin import MediaFile, PinCreate, PinRead, PinUpdate, SongDetails

from .errors import Forbidden, NotFound, ValidationFailed

logger = logging.getLogger(__name__)

NAME_MIN_LENGTH = 3
NAME_MAX_LENGTH = 21

_PIN_COLUMNS = """
    p.id, p.lat, p.lng, p.name, p.notes, p.song, p.created_at, p.updated_at,
    u.username AS owner
"""


def validate_pin_name(name: str) -> None:
    if not NAME_MIN_LENGTH <= len(name.strip()) <= NAME_MAX_LENGTH:
        raise ValidationFailed(
            f"Name must be between {NAME_MIN_LENGTH} and {NAME_MAX_LENGTH} characters"
        )


def _user_id(cursor: sqlite3.Cursor, username: str) -> int:
    row = cursor.execute("SELECT id FROM users WHERE username = ?", (username,)).fetchone()
    if not row:
        raise NotFound(f"User {username} not found")
    return row["id"]


def _song_json(song: Optional[SongDetails]) -> Optional[str]:
    if song is None:
        return None
    return json.dumps(song.model_dump(by_alias=True))


class PinService:
    """CRUD, likes and collaborator management for pins."""

    @classmethod
    async def list_pins(cls, username: str) -> List[PinRead]:
        """Pins owned by ``username`` plus pins shared with them, oldest first."""
        conn = get_connection()
        try:
            cursor = conn.cursor()
            user_id = _user_id(cursor, username)
            rows = cursor.execute(
                f"""
                SELECT {_PIN_COLUMNS} FROM pins p JOIN users u ON u.id = p.owner_id
                WHERE p.owner_id = ?
                   OR p.id IN (SELECT pin_id FROM pin_collaborators WHERE user_id = ?)
                ORDER BY p.created_at ASC, p.id ASC
                """,
                (user_id, user_id),
            ).fetchall()
            return [cls._to_read(cursor, row) for row in rows]
        finally:
            conn.close()

    @classmethod
    async def recent_pins(cls, username: str, limit: Optional[int] = None) -> List[PinRead]:
        """The most recently created or edited pins owned by ``username``."""
        limit = limit or settings.recent_pins_limit
        conn = get_connection()
        try:
            cursor = conn.cursor()
            user_id = _user_id(cursor, username)
            rows = cursor.execute(
                f"""
                SELECT {_PIN_COLUMNS} FROM pins p JOIN users u ON u.id = p.owner_id
                WHERE p.owner_id = ?
                ORDER BY p.updated_at DESC, p.id DESC
                LIMIT ?
                """,
                (user_id, limit),
            ).fetchall()
            return [cls._to_read(cursor, row) for row in rows]
        finally:
            conn.close()

    @classmethod
    async def get_pin(cls, pin_id: int) -> PinRead:
        conn = get_connection()
        try:
            cursor = conn.cursor()
            return cls._load(cursor, pin_id)
        finally:
            conn.close()

    @classmethod
    async def create_pin(cls, data: PinCreate, owner: str) -> PinRead:
        validate_pin_name(data.name)
        conn = get_connection()
        try:
            cursor = conn.cursor()
            owner_id = _user_id(cursor, owner)
            cursor.execute(
                "INSERT INTO pins (owner_id, lat, lng, name, notes, song) VALUES (?, ?, ?, ?, ?, ?)",
                (
                    owner_id,
                    data.position.lat,
                    data.position.lng,
                    data.name.strip(),
                    data.notes,
                    _song_json(data.song_details),
                ),
            )
            pin_id = cursor.lastrowid
            cls._replace_media(cursor, pin_id, data.media_files)
            conn.commit()
            logger.info("User %s created pin %s '%s'", owner, pin_id, data.name)
            return cls._load(cursor, pin_id)
        finally:
            conn.close()

    @classmethod
    async def update_pin(cls, pin_id: int, updates: PinUpdate, actor: str) -> PinRead:
        """Apply a partial update.  Only fields present in the request change."""
        fields = updates.model_dump(exclude_unset=True)
        if "name" in fields and fields["name"] is not None:
            validate_pin_name(fields["name"])
        conn = get_connection()
        try:
            cursor = conn.cursor()
            cls._require_owner(cursor, pin_id, actor)
            assignments: List[str] = []
            values: List[Any] = []
            if updates.position is not None:
                assignments += ["lat = ?", "lng = ?"]
                values += [updates.position.lat, updates.position.lng]
            if updates.name is not None:
                assignments.append("name = ?")
                values.append(updates.name.strip())
            if updates.notes is not None:
                assignments.append("notes = ?")
                values.append(updates.notes)
            if "song_details" in fields:
                assignments.append("song = ?")
                values.append(_song_json(updates.song_details))
            if updates.media_files is not None:
                cls._replace_media(cursor, pin_id, updates.media_files)
            assignments.append(f"updated_at = {NOW_SQL}")
            values.append(pin_id)
            cursor.execute(f"UPDATE pins SET {', '.join(assignments)} WHERE id = ?", tuple(values))
            conn.commit()
            logger.info("User %s updated pin %s", actor, pin_id)
            return cls._load(cursor, pin_id)
        finally:
            conn.close()

    @classmethod
    async def delete_pin(cls, pin_id: int, actor: str) -> None:
        """Delete a pin; media rows, likes and collaborators cascade."""
        conn = get_connection()
        try:
            cursor = conn.cursor()
            cls._require_owner(cursor, pin_id, actor)
            cursor.execute("DELETE FROM pins WHERE id = ?", (pin_id,))
            conn.commit()
            logger.info("User %s deleted pin %s", actor, pin_id)
        finally:
            conn.close()

    @classmethod
    async def toggle_like(cls, pin_id: int, username: str) -> List[str]:
        """Like the pin, or remove the like if ``username`` already liked it.

        Returns the usernames that like the pin afterwards.
        """
        conn = get_connection()
        try:
            cursor = conn.cursor()
            cls._load_row(cursor, pin_id)
            user_id = _user_id(cursor, username)
            removed = cursor.execute(
                "DELETE FROM pin_likes WHERE pin_id = ? AND user_id = ?", (pin_id, user_id)
            ).rowcount
            if not removed:
                cursor.execute(
                    "INSERT INTO pin_likes (pin_id, user_id) VALUES (?, ?)", (pin_id, user_id)
                )
            conn.commit()
            return cls._likes(cursor, pin_id)
        finally:
            conn.close()

    @classmethod
    async def add_collaborator(cls, pin_id: int, username: str, actor: str) -> PinRead:
        """Invite ``username`` to collaborate on the pin owned by ``actor``."""
        conn = get_connection()
        try:
            cursor = conn.cursor()
            row = cls._require_owner(cursor, pin_id, actor)
            if username == row["owner"]:
                raise ValidationFailed("The owner is already a collaborator")
            user_id = _user_id(cursor, username)
            cursor.execute(
                "INSERT OR IGNORE INTO pin_collaborators (pin_id, user_id) VALUES (?, ?)",
                (pin_id, user_id),
            )
            conn.commit()
            logger.info("User %s invited %s to pin %s", actor, username, pin_id)
            return cls._load(cursor, pin_id)
        finally:
            conn.close()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    @classmethod
    def _require_owner(cls, cursor: sqlite3.Cursor, pin_id: int, actor: str) -> sqlite3.Row:
        row = cls._load_row(cursor, pin_id)
        if row["owner"] != actor:
            raise Forbidden("Only the owner of a pin can change it")
        return row

    @staticmethod
    def _load_row(cursor: sqlite3.Cursor, pin_id: int) -> sqlite3.Row:
        row = cursor.execute(
            f"SELECT {_PIN_COLUMNS} FROM pins p JOIN users u ON u.id = p.owner_id WHERE p.id = ?",
            (pin_id,),
        ).fetchone()
        if not row:
            raise NotFound(f"Pin {pin_id} not found")
        return row

    @classmethod
    def _load(cls, cursor: sqlite3.Cursor, pin_id: int) -> PinRead:
        return cls._to_read(cursor, cls._load_row(cursor, pin_id))

    @staticmethod
    def _replace_media(cursor: sqlite3.Cursor, pin_id: int, media: List[MediaFile]) -> None:
        cursor.execute("DELETE FROM pin_media WHERE pin_id = ?", (pin_id,))
        cursor.executemany(
            "INSERT INTO pin_media (pin_id, position, url, title) VALUES (?, ?, ?, ?)",
            [(pin_id, index, item.url, item.title) for index, item in enumerate(media)],
        )

    @staticmethod
    def _likes(cursor: sqlite3.Cursor, pin_id: int) -> List[str]:
        rows = cursor.execute(
            """
            SELECT u.username FROM pin_likes l JOIN users u ON u.id = l.user_id
            WHERE l.pin_id = ? ORDER BY l.created_at, u.username
            """,
            (pin_id,),
        ).fetchall()
        return [r["username"] for r in rows]

    @classmethod
    def _to_read(cls, cursor: sqlite3.Cursor, row: sqlite3.Row) -> PinRead:
        media = cursor.execute(
            "SELECT url, title FROM pin_media WHERE pin_id = ? ORDER BY position",
            (row["id"],),
        ).fetchall()
        collaborators = cursor.execute(
            """
            SELECT u.username FROM pin_collaborators c JOIN users u ON u.id = c.user_id
            WHERE c.pin_id = ? ORDER BY c.created_at, u.username
            """,
            (row["id"],),
        ).fetchall()
        song: Optional[Dict[str, Any]] = json.loads(row["song"]) if row["song"] else None
        return PinRead(
            id=str(row["id"]),
            username=row["owner"],
            position={"lat": row["lat"], "lng": row["lng"]},
            name=row["name"],
            notes=row["notes"],
            media_files=[MediaFile(url=m["url"], title=m["title"]) for m in media],
            song_details=SongDetails(**song) if song else None,
            likes=cls._likes(cursor, row["id"]),
            collaborators=[c["username"] for c in collaborators],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )
