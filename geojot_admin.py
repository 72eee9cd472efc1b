#!/usr/bin/env python3
"""
Administrative commands for a GeoJot backend.

Usage:
    python geojot_admin.py issue-token alice --days 365
    python geojot_admin.py reset-password --db ./geojot_api/geojot.db --username alice --password "NewStr0ngPass"

``issue-token`` prints a bearer token signed with the ``SECRET_KEY`` of
the current environment, so run it with the same settings as the
server.  ``reset-password`` never reads or reveals existing passwords;
it only writes a new hash.  If ``--password`` is omitted you will be
prompted for it.
"""

import argparse
import getpass
import logging
import os
import sqlite3
import sys
from typing import List, Optional

from geojot_api.app.core.logging_config import setup_logging
from geojot_api.app.core.security import create_access_token, hash_password
from geojot_api.app.services.user_service import password_failed_rules

logger = logging.getLogger("geojot_admin")


def issue_token(args: argparse.Namespace) -> int:
    token = create_access_token({"sub": args.username}, expires_delta=args.days * 24 * 60 * 60)
    print(token)
    return 0


def reset_password(args: argparse.Namespace) -> int:
    if not os.path.exists(args.db):
        print(f"[!] DB not found: {args.db}", file=sys.stderr)
        return 1

    new_password = args.password or getpass.getpass("Enter NEW password: ")
    if not new_password:
        print("[!] Empty password is not allowed.", file=sys.stderr)
        return 1
    failed = password_failed_rules(new_password)
    if failed:
        print(f"[!] Password does not meet criteria: {', '.join(failed)}", file=sys.stderr)
        return 1

    conn = sqlite3.connect(args.db)
    try:
        cur = conn.cursor()
        cur.execute("SELECT id FROM users WHERE username = ?", (args.username,))
        if not cur.fetchone():
            print(f"[!] No user found with username: {args.username}", file=sys.stderr)
            return 2
        cur.execute(
            "UPDATE users SET password = ?, updated_at = strftime('%Y-%m-%dT%H:%M:%fZ', 'now') "
            "WHERE username = ?",
            (hash_password(new_password), args.username),
        )
        conn.commit()
    finally:
        conn.close()
    logger.info("Password reset for %s", args.username)
    print(f"[+] Password updated for user: {args.username}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="GeoJot administration.")
    sub = ap.add_subparsers(dest="command", required=True)

    tok = sub.add_parser("issue-token", help="Print a bearer token for a user.")
    tok.add_argument("username")
    tok.add_argument("--days", type=int, default=365, help="Token lifetime in days (default 365).")
    tok.set_defaults(func=issue_token)

    rp = sub.add_parser("reset-password", help="Set a new password for a user.")
    rp.add_argument("--db", required=True, help="Path to the SQLite database file.")
    rp.add_argument("--username", required=True)
    rp.add_argument("--password", help="New password. If omitted, you'll be prompted securely.")
    rp.set_defaults(func=reset_password)
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    setup_logging(os.getenv("LOG_LEVEL", "WARNING"))
    args = build_parser().parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
