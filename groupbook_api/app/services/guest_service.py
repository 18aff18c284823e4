"""
Business logic for guest entries.

Guests sign themselves up through the event's link token; no identity
is involved.  Reading and removing guests is restricted to the account
that owns the event.
"""

import logging
import sqlite3
from datetime import datetime
from typing import List, Optional

from ..core.db import Database
from ..core.errors import MissingFields, NotFound, RegistrationClosed, RegistrationLocked
from ..schemas.guest import GuestCreate, GuestRead
from .event_service import fetch_owned_event, utc_now

logger = logging.getLogger(__name__)

_GUEST_COLUMNS = "id, event_id, name, food_order, dietary_notes, created_at"


def _optional_text(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def _guest_from_row(row: sqlite3.Row) -> GuestRead:
    return GuestRead(**{key: row[key] for key in row.keys()})


class GuestService:
    """Public guest sign-up and owner-scoped guest list management."""

    @classmethod
    def add_guest(
        cls,
        db: Database,
        link_token: str,
        data: GuestCreate,
        now: Optional[datetime] = None,
    ) -> GuestRead:
        """Add a guest to the event identified by ``link_token``.

        The token is resolved before anything else, so an unknown token is
        ``NotFound`` even when the guest fields are also invalid.  Locked
        events raise ``RegistrationLocked`` and events past their cutoff
        raise ``RegistrationClosed``.
        """
        with db.connection() as conn:
            event = conn.execute(
                "SELECT id, cutoff_datetime, is_locked FROM events WHERE link_token = ?",
                (link_token,),
            ).fetchone()
            if not event:
                raise NotFound("Event not found")

            name = (data.name or "").strip()
            if not name:
                raise MissingFields("Guest name is required")
            if event["is_locked"]:
                raise RegistrationLocked()
            if event["cutoff_datetime"]:
                cutoff = datetime.fromisoformat(event["cutoff_datetime"])
                if (now or utc_now()) > cutoff:
                    raise RegistrationClosed()

            cursor = conn.execute(
                "INSERT INTO guests (event_id, name, food_order, dietary_notes) VALUES (?, ?, ?, ?)",
                (event["id"], name, _optional_text(data.food_order), _optional_text(data.dietary_notes)),
            )
            row = conn.execute(
                f"SELECT {_GUEST_COLUMNS} FROM guests WHERE id = ?",
                (cursor.lastrowid,),
            ).fetchone()
        logger.info("Guest %s added to event %s", row["id"], event["id"])
        return _guest_from_row(row)

    @classmethod
    def list_guests_by_event(cls, db: Database, account_id: int, event_id: int) -> List[GuestRead]:
        """Return the guest list of an owned event in sign-up order."""
        with db.connection() as conn:
            fetch_owned_event(conn, account_id, event_id)
            rows = conn.execute(
                f"SELECT {_GUEST_COLUMNS} FROM guests WHERE event_id = ? ORDER BY created_at ASC, id ASC",
                (event_id,),
            ).fetchall()
        return [_guest_from_row(row) for row in rows]

    @classmethod
    def remove_guest(cls, db: Database, account_id: int, event_id: int, guest_id: int) -> None:
        """Remove a guest from an owned event."""
        with db.connection() as conn:
            fetch_owned_event(conn, account_id, event_id)
            cursor = conn.execute(
                "DELETE FROM guests WHERE id = ? AND event_id = ?",
                (guest_id, event_id),
            )
            if cursor.rowcount == 0:
                raise NotFound("Guest not found")
        logger.info("Account %s removed guest %s from event %s", account_id, guest_id, event_id)
