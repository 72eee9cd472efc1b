"""
Business logic for users and the follow graph.

Registration enforces the username, email and password rules the web
client surfaces verbatim, so the error texts here are part of the API
contract.
"""

import logging
import re
import sqlite3
from typing import List, Optional

from geojot_api.app.core.db import NOW_SQL, get_connection
from geojot_api.app.core.security import hash_password, verify_password
from geojot_api.app.schemas.user import UserProfile, UserRead, UserRegister

from .errors import NotFound, ValidationFailed

logger = logging.getLogger(__name__)

USERNAME_MIN_LENGTH = 4
USERNAME_MAX_LENGTH = 20
PASSWORD_MIN_LENGTH = 8

# Path segments under /api/users that a username would be shadowed by.
RESERVED_USERNAMES = frozenset({"search"})

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def password_failed_rules(password: str) -> List[str]:
    """Return the names of the password rules ``password`` breaks."""
    failed = []
    if len(password) < PASSWORD_MIN_LENGTH:
        failed.append("minLength")
    if not any(ch.isdigit() for ch in password):
        failed.append("digit")
    if not any(ch.isupper() for ch in password):
        failed.append("uppercase")
    return failed


def _user_id(cursor: sqlite3.Cursor, username: str) -> int:
    row = cursor.execute("SELECT id FROM users WHERE username = ?", (username,)).fetchone()
    if not row:
        raise NotFound(f"User {username} not found")
    return row["id"]


class UserService:
    """Registration, authentication, search and follow operations."""

    @classmethod
    def validate_registration(cls, data: UserRegister) -> None:
        """Check the stateless registration rules.

        Raises ``ValidationFailed`` on the first rule that fails, in the
        order username, email, password.
        """
        if not USERNAME_MIN_LENGTH <= len(data.username) <= USERNAME_MAX_LENGTH:
            raise ValidationFailed(
                f"Username must be between {USERNAME_MIN_LENGTH} and {USERNAME_MAX_LENGTH} characters"
            )
        if data.username.lower() in RESERVED_USERNAMES:
            raise ValidationFailed("Username is not available.")
        if not _EMAIL_RE.match(data.email):
            raise ValidationFailed("Invalid email address.")
        failed = password_failed_rules(data.password)
        if failed:
            raise ValidationFailed("Password does not meet criteria.", failed_rules=failed)

    @classmethod
    async def create_user(cls, data: UserRegister) -> UserRead:
        """Validate and store a new user.

        Email uniqueness is checked before username uniqueness so a
        returning user who forgot their username gets the more useful
        message.
        """
        cls.validate_registration(data)
        logger.info("Registering user %s", data.username)
        conn = get_connection()
        try:
            cursor = conn.cursor()
            if cursor.execute("SELECT 1 FROM users WHERE email = ?", (data.email,)).fetchone():
                raise ValidationFailed("Email already exists.")
            if cursor.execute("SELECT 1 FROM users WHERE username = ?", (data.username,)).fetchone():
                raise ValidationFailed("Username already exists.")
            cursor.execute(
                "INSERT INTO users (username, email, password) VALUES (?, ?, ?)",
                (data.username, data.email, hash_password(data.password)),
            )
            conn.commit()
            return UserRead(username=data.username, profile_pic=None)
        except sqlite3.IntegrityError as exc:
            # Lost a race with a concurrent registration.
            conn.rollback()
            raise ValidationFailed("Username already exists.") from exc
        finally:
            conn.close()

    @classmethod
    async def authenticate(cls, username: str, password: str) -> Optional[UserRead]:
        """Return the user when the credentials match, otherwise ``None``."""
        conn = get_connection()
        try:
            row = conn.execute(
                "SELECT username, password, profile_pic FROM users WHERE username = ?",
                (username,),
            ).fetchone()
        finally:
            conn.close()
        if not row or not verify_password(password, row["password"]):
            logger.info("Failed login for %s", username)
            return None
        return UserRead(username=row["username"], profile_pic=row["profile_pic"])

    @classmethod
    async def search_users(cls, query: str, limit: int = 20) -> List[UserRead]:
        """Case‑insensitive substring search; exact matches come first."""
        query = query.strip()
        if not query:
            return []
        escaped = query.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
        conn = get_connection()
        try:
            rows = conn.execute(
                """
                SELECT username, profile_pic FROM users
                WHERE username LIKE ? ESCAPE '\\'
                ORDER BY (lower(username) = lower(?)) DESC, username ASC
                LIMIT ?
                """,
                (f"%{escaped}%", query, limit),
            ).fetchall()
        finally:
            conn.close()
        return [UserRead(username=row["username"], profile_pic=row["profile_pic"]) for row in rows]

    @classmethod
    async def get_profile(cls, username: str) -> UserProfile:
        """Return a user's profile with followers and followed users."""
        conn = get_connection()
        try:
            return cls._load_profile(conn.cursor(), username)
        finally:
            conn.close()

    @classmethod
    async def follow(cls, username: str, follower: str) -> UserProfile:
        """Make ``follower`` follow ``username``; following twice is a no‑op."""
        if username == follower:
            raise ValidationFailed("You cannot follow yourself")
        conn = get_connection()
        try:
            cursor = conn.cursor()
            user_id = _user_id(cursor, username)
            follower_id = _user_id(cursor, follower)
            cursor.execute(
                "INSERT OR IGNORE INTO follows (user_id, follower_id) VALUES (?, ?)",
                (user_id, follower_id),
            )
            conn.commit()
            logger.info("%s now follows %s", follower, username)
            return cls._load_profile(cursor, username)
        finally:
            conn.close()

    @classmethod
    async def unfollow(cls, username: str, follower: str) -> UserProfile:
        """Remove ``follower`` from ``username``'s followers, if present."""
        conn = get_connection()
        try:
            cursor = conn.cursor()
            user_id = _user_id(cursor, username)
            follower_id = _user_id(cursor, follower)
            cursor.execute(
                "DELETE FROM follows WHERE user_id = ? AND follower_id = ?",
                (user_id, follower_id),
            )
            conn.commit()
            logger.info("%s unfollowed %s", follower, username)
            return cls._load_profile(cursor, username)
        finally:
            conn.close()

    @classmethod
    async def set_profile_pic(cls, username: str, url: str) -> str:
        conn = get_connection()
        try:
            cursor = conn.cursor()
            user_id = _user_id(cursor, username)
            cursor.execute(
                f"UPDATE users SET profile_pic = ?, updated_at = {NOW_SQL} WHERE id = ?",
                (url, user_id),
            )
            conn.commit()
            return url
        finally:
            conn.close()

    @staticmethod
    def _load_profile(cursor: sqlite3.Cursor, username: str) -> UserProfile:
        row = cursor.execute(
            "SELECT id, username, profile_pic FROM users WHERE username = ?",
            (username,),
        ).fetchone()
        if not row:
            raise NotFound(f"User {username} not found")
        followers = cursor.execute(
            """
            SELECT u.username FROM follows f JOIN users u ON u.id = f.follower_id
            WHERE f.user_id = ? ORDER BY f.created_at, u.username
            """,
            (row["id"],),
        ).fetchall()
        following = cursor.execute(
            """
            SELECT u.username FROM follows f JOIN users u ON u.id = f.user_id
            WHERE f.follower_id = ? ORDER BY f.created_at, u.username
            """,
            (row["id"],),
        ).fetchall()
        return UserProfile(
            username=row["username"],
            profile_pic=row["profile_pic"],
            followers=[r["username"] for r in followers],
            following=[r["username"] for r in following],
        )
