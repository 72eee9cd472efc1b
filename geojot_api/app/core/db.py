"""
SQLite database integration and simple migration system.

This module provides functions for obtaining a database connection
(``get_connection``) and for applying migrations on application start
(``init_db``).  Applied migration versions are stored in the
``migrations`` table and new migrations are executed in order.
"""

import os
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from .config import settings

# Millisecond timestamps so that "recent" ordering is stable for pins
# created within the same second.
NOW_SQL = "strftime('%Y-%m-%dT%H:%M:%fZ', 'now')"

MIGRATIONS: list[tuple[int, str]] = [
    # Migration 1: users and the follow graph
    (
        1,
        f"""
        CREATE TABLE IF NOT EXISTS users (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            username TEXT NOT NULL UNIQUE,
            email TEXT NOT NULL UNIQUE,
            password TEXT NOT NULL,
            profile_pic TEXT,
            created_at TEXT DEFAULT ({NOW_SQL}),
            updated_at TEXT DEFAULT ({NOW_SQL})
        );

        -- One row per (followed user, follower) pair.
        CREATE TABLE IF NOT EXISTS follows (
            user_id INTEGER NOT NULL,
            follower_id INTEGER NOT NULL,
            created_at TEXT DEFAULT ({NOW_SQL}),
            PRIMARY KEY (user_id, follower_id),
            FOREIGN KEY(user_id) REFERENCES users(id) ON DELETE CASCADE,
            FOREIGN KEY(follower_id) REFERENCES users(id) ON DELETE CASCADE
        );
        """,
    ),
    # Migration 2: pins with their media, likes and collaborators
    (
        2,
        f"""
        CREATE TABLE IF NOT EXISTS pins (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            owner_id INTEGER NOT NULL,
            lat REAL NOT NULL,
            lng REAL NOT NULL,
            name TEXT NOT NULL,
            notes TEXT NOT NULL DEFAULT '',
            song TEXT,
            created_at TEXT DEFAULT ({NOW_SQL}),
            updated_at TEXT DEFAULT ({NOW_SQL}),
            FOREIGN KEY(owner_id) REFERENCES users(id) ON DELETE CASCADE
        );

        CREATE TABLE IF NOT EXISTS pin_media (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            pin_id INTEGER NOT NULL,
            position INTEGER NOT NULL,
            url TEXT NOT NULL,
            title TEXT,
            FOREIGN KEY(pin_id) REFERENCES pins(id) ON DELETE CASCADE
        );

        CREATE TABLE IF NOT EXISTS pin_likes (
            pin_id INTEGER NOT NULL,
            user_id INTEGER NOT NULL,
            created_at TEXT DEFAULT ({NOW_SQL}),
            PRIMARY KEY (pin_id, user_id),
            FOREIGN KEY(pin_id) REFERENCES pins(id) ON DELETE CASCADE,
            FOREIGN KEY(user_id) REFERENCES users(id) ON DELETE CASCADE
        );

        CREATE TABLE IF NOT EXISTS pin_collaborators (
            pin_id INTEGER NOT NULL,
            user_id INTEGER NOT NULL,
            created_at TEXT DEFAULT ({NOW_SQL}),
            PRIMARY KEY (pin_id, user_id),
            FOREIGN KEY(pin_id) REFERENCES pins(id) ON DELETE CASCADE,
            FOREIGN KEY(user_id) REFERENCES users(id) ON DELETE CASCADE
        );

        CREATE INDEX IF NOT EXISTS idx_pins_owner_id ON pins(owner_id);
        CREATE INDEX IF NOT EXISTS idx_pin_media_pin_id ON pin_media(pin_id);
        """,
    ),
    # Migration 3: uploaded images (pin media and profile pictures)
    (
        3,
        f"""
        CREATE TABLE IF NOT EXISTS media (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            owner_id INTEGER NOT NULL,
            filename TEXT NOT NULL,
            content_type TEXT NOT NULL,
            content BLOB NOT NULL,
            created_at TEXT DEFAULT ({NOW_SQL}),
            FOREIGN KEY(owner_id) REFERENCES users(id) ON DELETE CASCADE
        );
        """,
    ),
]


def get_database_path() -> str:
    """Compute the path to the SQLite database file.

    If ``settings.database_url`` is an absolute path, use it directly.
    Otherwise resolve it relative to the project root.
    """
    db_url = settings.database_url
    if os.path.isabs(db_url):
        return db_url
    base_dir = Path(__file__).resolve().parent.parent.parent  # geojot_api/
    return str((base_dir / db_url).resolve())


def get_connection() -> sqlite3.Connection:
    """Create and return a new SQLite connection.

    Rows are returned as ``sqlite3.Row`` so columns can be accessed by
    name, and foreign keys are enforced for the lifetime of the
    connection (SQLite leaves them off by default).
    """
    conn = sqlite3.connect(get_database_path())
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


@contextmanager
def get_cursor() -> Iterator[sqlite3.Cursor]:
    """Context manager that yields a cursor and closes the connection on exit.

    The transaction is committed when the block exits normally and
    rolled back when it raises.
    """
    conn = get_connection()
    try:
        yield conn.cursor()
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def init_db() -> None:
    """Initialise the database and apply pending migrations.

    Creates the ``migrations`` table if it does not exist, checks the
    current schema version and applies any newer entry of
    ``MIGRATIONS``.  New migrations must be appended with an
    incremented version number.
    """
    with get_cursor() as cursor:
        cursor.execute(
            "CREATE TABLE IF NOT EXISTS migrations (version INTEGER PRIMARY KEY)"
        )
        row = cursor.execute("SELECT MAX(version) AS version FROM migrations").fetchone()
        current_version = row["version"] if row and row["version"] is not None else 0
        for version, sql in MIGRATIONS:
            if version > current_version:
                cursor.executescript(sql)
                cursor.execute(
                    "INSERT INTO migrations (version) VALUES (?)", (version,)
                )
                current_version = version
