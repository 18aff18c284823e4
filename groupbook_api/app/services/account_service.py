"""
Business logic for accounts.

``AccountService`` registers restaurant accounts, authenticates them
and manages their profile and branding.  Emails are stored normalized
(trimmed, lower case).  The ``UNIQUE`` constraint on ``accounts.email``
is what actually prevents duplicates; the lookup before the insert
only produces a friendlier path for the common case.
"""

import logging
import re
import sqlite3
from typing import Optional, Tuple

from ..core.db import Database
from ..core.errors import (
    EmailExists,
    InvalidCredentials,
    InvalidEmail,
    InvalidPassword,
    MissingFields,
    Unauthorized,
)
from ..core.security import TokenService, hash_password, verify_password
from ..schemas.account import AccountRead, Branding

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
MIN_PASSWORD_LENGTH = 6


def normalize_email(email: str) -> str:
    return email.strip().lower()


def _clean(value: Optional[str]) -> Optional[str]:
    """Trim a free-text value, mapping blank to ``None``."""
    if value is None:
        return None
    value = value.strip()
    return value or None


def _account_from_row(row: sqlite3.Row) -> AccountRead:
    return AccountRead(id=row["id"], email=row["email"], display_name=row["display_name"])


class AccountService:
    """Registration, login, profile and branding for restaurant accounts."""

    @classmethod
    def register(
        cls,
        db: Database,
        tokens: TokenService,
        email: Optional[str],
        password: Optional[str],
        display_name: Optional[str],
        password_iterations: int = 100_000,
    ) -> Tuple[AccountRead, str]:
        """Create an account and return it with a freshly issued token.

        Raises ``MissingFields``, ``InvalidEmail``, ``InvalidPassword`` or
        ``EmailExists``.  The plain password is hashed before storage and
        is never logged or returned.
        """
        if not email or not email.strip() or not password or not display_name or not display_name.strip():
            raise MissingFields("Email, password, and display name are required")
        normalized = normalize_email(email)
        if not EMAIL_PATTERN.match(normalized):
            raise InvalidEmail()
        if len(password) < MIN_PASSWORD_LENGTH:
            raise InvalidPassword()

        with db.connection() as conn:
            existing = conn.execute("SELECT id FROM accounts WHERE email = ?", (normalized,)).fetchone()
        if existing:
            raise EmailExists()

        password_hash = hash_password(password, password_iterations)
        with db.connection() as conn:
            try:
                cursor = conn.execute(
                    "INSERT INTO accounts (email, password_hash, display_name) VALUES (?, ?, ?)",
                    (normalized, password_hash, display_name.strip()),
                )
            except sqlite3.IntegrityError as exc:
                # Lost a race with a concurrent registration of the same email.
                raise EmailExists() from exc
            account_id = cursor.lastrowid
        logger.info("Registered account %s", account_id)
        account = AccountRead(id=account_id, email=normalized, display_name=display_name.strip())
        return account, tokens.issue(account_id)

    @classmethod
    def login(
        cls,
        db: Database,
        tokens: TokenService,
        email: Optional[str],
        password: Optional[str],
    ) -> Tuple[AccountRead, str]:
        """Check credentials and return the account with a new token.

        An unknown email and a wrong password both raise
        ``InvalidCredentials``.
        """
        if not email or not email.strip() or not password:
            raise MissingFields("Email and password are required")
        with db.connection() as conn:
            row = conn.execute(
                "SELECT id, email, display_name, password_hash FROM accounts WHERE email = ?",
                (normalize_email(email),),
            ).fetchone()
        if not row or not verify_password(password, row["password_hash"]):
            raise InvalidCredentials()
        return _account_from_row(row), tokens.issue(row["id"])

    @classmethod
    def get_account(cls, db: Database, account_id: int) -> AccountRead:
        """Re-read an account.  A token for a vanished account is unauthorized."""
        with db.connection() as conn:
            row = conn.execute(
                "SELECT id, email, display_name FROM accounts WHERE id = ?",
                (account_id,),
            ).fetchone()
        if not row:
            raise Unauthorized("Account not found")
        return _account_from_row(row)

    @classmethod
    def update_profile(cls, db: Database, account_id: int, display_name: Optional[str]) -> AccountRead:
        name = _clean(display_name)
        if not name:
            raise MissingFields("Display name is required")
        with db.connection() as conn:
            cursor = conn.execute(
                "UPDATE accounts SET display_name = ? WHERE id = ?",
                (name, account_id),
            )
            if cursor.rowcount == 0:
                raise Unauthorized("Account not found")
            row = conn.execute(
                "SELECT id, email, display_name FROM accounts WHERE id = ?",
                (account_id,),
            ).fetchone()
        return _account_from_row(row)

    @classmethod
    def get_branding(cls, db: Database, account_id: int) -> Branding:
        with db.connection() as conn:
            row = conn.execute(
                "SELECT logo_url, hero_image_url, terms_link FROM accounts WHERE id = ?",
                (account_id,),
            ).fetchone()
        if not row:
            raise Unauthorized("Account not found")
        return Branding(
            logo_url=row["logo_url"],
            hero_image_url=row["hero_image_url"],
            terms_link=row["terms_link"],
        )

    @classmethod
    def update_branding(cls, db: Database, account_id: int, branding: Branding) -> Branding:
        """Replace all branding values; ``None`` or blank clears one."""
        values = (
            _clean(branding.logo_url),
            _clean(branding.hero_image_url),
            _clean(branding.terms_link),
        )
        with db.connection() as conn:
            cursor = conn.execute(
                "UPDATE accounts SET logo_url = ?, hero_image_url = ?, terms_link = ? WHERE id = ?",
                (*values, account_id),
            )
            if cursor.rowcount == 0:
                raise Unauthorized("Account not found")
        return Branding(logo_url=values[0], hero_image_url=values[1], terms_link=values[2])
