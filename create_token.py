"""Print a long-lived access token for an existing account.

Useful for integrations and manual testing against a running API.  The
token is signed with SECRET_KEY from the environment, so it must match
the key the server runs with.

Usage:
    python create_token.py --email owner@goodfork.com --days 365
"""

import argparse
import sqlite3
import sys

from groupbook_api.app.core.config import Settings
from groupbook_api.app.core.db import resolve_database_path
from groupbook_api.app.core.security import TokenService
from groupbook_api.app.services.account_service import normalize_email


def main(argv=None) -> int:
    ap = argparse.ArgumentParser(description="Issue an access token for a Group Book account.")
    ap.add_argument("--email", required=True, help="Account email")
    ap.add_argument("--days", type=int, default=365, help="Token lifetime in days")
    args = ap.parse_args(argv)

    settings = Settings.from_env()
    conn = sqlite3.connect(resolve_database_path(settings.database_url))
    try:
        row = conn.execute(
            "SELECT id FROM accounts WHERE email = ?",
            (normalize_email(args.email),),
        ).fetchone()
    finally:
        conn.close()
    if not row:
        print(f"[!] No account found with email: {args.email}", file=sys.stderr)
        return 2

    tokens = TokenService(settings.secret_key, settings.access_token_expire_minutes)
    print(tokens.issue(row[0], expires_in=args.days * 24 * 60 * 60))
    return 0


if __name__ == "__main__":
    sys.exit(main())
