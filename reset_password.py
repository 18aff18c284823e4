#!/usr/bin/env python3
"""
Reset an account's password in the Group Book SQLite database.

This script DOES NOT read or reveal any existing password.  It simply
stores a new hash (PBKDF2-HMAC-SHA256, ``iterations$salthex$hashhex``)
for the specified account email.

Usage:
    python reset_password.py --db ./groupbook.db --email owner@goodfork.com --password "NewStrongPass!234"

If --password is omitted, you will be prompted to enter it securely.
"""

import argparse
import getpass
import os
import sqlite3
import sys

from groupbook_api.app.core.security import hash_password
from groupbook_api.app.services.account_service import MIN_PASSWORD_LENGTH, normalize_email


def main(argv=None) -> int:
    ap = argparse.ArgumentParser(description="Reset a Group Book account password (SQLite).")
    ap.add_argument("--db", required=True, help="Path to SQLite DB file (e.g., ./groupbook.db)")
    ap.add_argument("--email", required=True, help="Account email to update")
    ap.add_argument("--password", help="New password. If omitted, you'll be prompted securely.")
    ap.add_argument("--iterations", type=int, default=100_000, help="PBKDF2 iterations")
    args = ap.parse_args(argv)

    if not os.path.exists(args.db):
        print(f"[!] DB not found: {args.db}", file=sys.stderr)
        return 1

    new_password = args.password or getpass.getpass("Enter NEW password: ")
    if len(new_password) < MIN_PASSWORD_LENGTH:
        print(f"[!] Password must be at least {MIN_PASSWORD_LENGTH} characters.", file=sys.stderr)
        return 1

    email = normalize_email(args.email)
    conn = sqlite3.connect(args.db)
    try:
        row = conn.execute("SELECT id FROM accounts WHERE email = ?", (email,)).fetchone()
        if not row:
            print(f"[!] No account found with email: {email}", file=sys.stderr)
            return 2
        conn.execute(
            "UPDATE accounts SET password_hash = ? WHERE id = ?",
            (hash_password(new_password, args.iterations), row[0]),
        )
        conn.commit()
        print(f"[+] Password updated for account: {email}")
    finally:
        conn.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
