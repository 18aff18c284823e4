"""
Business logic for events.

Every owner operation fetches the event row first and then compares
``owner_account_id`` with the caller's account id: an id that does not
exist is ``NotFound``, an event owned by someone else is ``Forbidden``.
The public projection, reached through the event's link token, never
includes the owner's id, the party lead's contact details or staff
notes.

Date/times are stored as naive UTC ISO-8601 strings.
"""

import logging
import secrets
import sqlite3
from datetime import datetime, timezone
from typing import List, Optional

from ..core.db import Database
from ..core.errors import MissingFields, NotFound, Forbidden, Unauthorized
from ..schemas.account import Branding
from ..schemas.event import (
    EventCreate,
    EventFields,
    EventRead,
    EventSummary,
    PublicEventRead,
)

logger = logging.getLogger(__name__)

# 32 random bytes, hex encoded.
LINK_TOKEN_BYTES = 32

_EVENT_COLUMNS = (
    "id, owner_account_id, link_token, restaurant_name, event_name, event_date_time, "
    "cutoff_datetime, party_lead_name, party_lead_email, party_lead_phone, menu_link, "
    "staff_notes, is_locked, created_at"
)


def to_storage(value: Optional[datetime]) -> Optional[str]:
    """Convert a datetime to the naive UTC string kept in the database.

    Naive inputs are taken to be UTC already.
    """
    if value is None:
        return None
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value.isoformat()


def utc_now() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def _editable_values(fields: EventFields) -> tuple:
    event_name = _clean(fields.event_name)
    if not event_name:
        raise MissingFields("Event name and date/time are required")
    return (
        event_name,
        to_storage(fields.event_date_time),
        to_storage(fields.cutoff_datetime),
        _clean(fields.party_lead_name),
        _clean(fields.party_lead_email),
        _clean(fields.party_lead_phone),
        _clean(fields.menu_link),
        _clean(fields.staff_notes),
    )


def fetch_owned_event(conn: sqlite3.Connection, account_id: int, event_id: int) -> sqlite3.Row:
    """Return the event row if ``account_id`` owns it.

    Raises ``NotFound`` when no such event exists and ``Forbidden`` when
    it belongs to another account.
    """
    row = conn.execute(f"SELECT {_EVENT_COLUMNS} FROM events WHERE id = ?", (event_id,)).fetchone()
    if not row:
        raise NotFound("Event not found")
    if row["owner_account_id"] != account_id:
        logger.warning("Account %s denied access to event %s", account_id, event_id)
        raise Forbidden()
    return row


def _event_from_row(row: sqlite3.Row) -> EventRead:
    return EventRead(**{key: row[key] for key in row.keys()})


class EventService:
    """Owner-scoped event management and the public event view."""

    @classmethod
    def create_event(cls, db: Database, account_id: int, data: EventCreate) -> EventRead:
        """Create an event owned by ``account_id``.

        The event row and any ``seed_guests`` are written in a single
        transaction; if any insert fails nothing is committed.
        """
        values = _editable_values(data)
        seed_names = [name.strip() for name in data.seed_guests]
        if any(not name for name in seed_names):
            raise MissingFields("Guest names must not be blank")

        with db.connection() as conn:
            owner = conn.execute("SELECT display_name FROM accounts WHERE id = ?", (account_id,)).fetchone()
        if not owner:
            raise Unauthorized("Account not found")

        link_token = secrets.token_hex(LINK_TOKEN_BYTES)

        def unit_of_work(conn: sqlite3.Connection) -> sqlite3.Row:
            cursor = conn.execute(
                """
                INSERT INTO events (
                    owner_account_id, link_token, restaurant_name, event_name, event_date_time,
                    cutoff_datetime, party_lead_name, party_lead_email, party_lead_phone,
                    menu_link, staff_notes
                )
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (account_id, link_token, owner["display_name"], *values),
            )
            event_id = cursor.lastrowid
            for name in seed_names:
                conn.execute("INSERT INTO guests (event_id, name) VALUES (?, ?)", (event_id, name))
            return conn.execute(f"SELECT {_EVENT_COLUMNS} FROM events WHERE id = ?", (event_id,)).fetchone()

        row = db.run_in_transaction(unit_of_work)
        logger.info("Account %s created event %s with %d seed guests", account_id, row["id"], len(seed_names))
        return _event_from_row(row)

    @classmethod
    def get_event_by_owner(cls, db: Database, account_id: int, event_id: int) -> EventRead:
        with db.connection() as conn:
            row = fetch_owned_event(conn, account_id, event_id)
        return _event_from_row(row)

    @classmethod
    def list_events_by_owner(cls, db: Database, account_id: int) -> List[EventSummary]:
        """Return the account's events, most recently created first."""
        with db.connection() as conn:
            rows = conn.execute(
                """
                SELECT e.id, e.event_name, e.event_date_time, e.cutoff_datetime, e.link_token,
                       e.is_locked, e.created_at, COUNT(g.id) AS guest_count
                FROM events e
                LEFT JOIN guests g ON g.event_id = e.id
                WHERE e.owner_account_id = ?
                GROUP BY e.id
                ORDER BY e.created_at DESC, e.id DESC
                """,
                (account_id,),
            ).fetchall()
        return [EventSummary(**{key: row[key] for key in row.keys()}) for row in rows]

    @classmethod
    def get_event_by_link_token(cls, db: Database, link_token: str) -> PublicEventRead:
        """Public projection of an event, for anyone holding its link token."""
        with db.connection() as conn:
            row = conn.execute(
                """
                SELECT e.id, e.event_name, e.event_date_time, e.cutoff_datetime, e.restaurant_name,
                       e.menu_link, e.is_locked, a.logo_url, a.hero_image_url, a.terms_link,
                       (SELECT COUNT(*) FROM guests g WHERE g.event_id = e.id) AS guest_count
                FROM events e
                JOIN accounts a ON a.id = e.owner_account_id
                WHERE e.link_token = ?
                """,
                (link_token,),
            ).fetchone()
        if not row:
            raise NotFound("Event not found")
        return PublicEventRead(
            id=row["id"],
            event_name=row["event_name"],
            event_date_time=row["event_date_time"],
            cutoff_datetime=row["cutoff_datetime"],
            restaurant_name=row["restaurant_name"],
            menu_link=row["menu_link"],
            is_locked=bool(row["is_locked"]),
            guest_count=row["guest_count"],
            branding=Branding(
                logo_url=row["logo_url"],
                hero_image_url=row["hero_image_url"],
                terms_link=row["terms_link"],
            ),
        )

    @classmethod
    def update_event(cls, db: Database, account_id: int, event_id: int, data: EventFields) -> EventRead:
        """Replace the editable fields of an owned event."""
        values = _editable_values(data)
        with db.transaction() as conn:
            fetch_owned_event(conn, account_id, event_id)
            conn.execute(
                """
                UPDATE events SET
                    event_name = ?, event_date_time = ?, cutoff_datetime = ?,
                    party_lead_name = ?, party_lead_email = ?, party_lead_phone = ?,
                    menu_link = ?, staff_notes = ?
                WHERE id = ?
                """,
                (*values, event_id),
            )
            row = conn.execute(f"SELECT {_EVENT_COLUMNS} FROM events WHERE id = ?", (event_id,)).fetchone()
        logger.info("Account %s updated event %s", account_id, event_id)
        return _event_from_row(row)

    @classmethod
    def set_event_lock(cls, db: Database, account_id: int, event_id: int, is_locked: bool) -> EventRead:
        """Open or close guest self-service for an owned event."""
        with db.transaction() as conn:
            fetch_owned_event(conn, account_id, event_id)
            conn.execute("UPDATE events SET is_locked = ? WHERE id = ?", (int(is_locked), event_id))
            row = conn.execute(f"SELECT {_EVENT_COLUMNS} FROM events WHERE id = ?", (event_id,)).fetchone()
        logger.info("Account %s set lock=%s on event %s", account_id, is_locked, event_id)
        return _event_from_row(row)

    @classmethod
    def delete_event(cls, db: Database, account_id: int, event_id: int) -> None:
        """Delete an owned event together with its guests."""

        def unit_of_work(conn: sqlite3.Connection) -> None:
            fetch_owned_event(conn, account_id, event_id)
            conn.execute("DELETE FROM guests WHERE event_id = ?", (event_id,))
            conn.execute("DELETE FROM events WHERE id = ?", (event_id,))

        db.run_in_transaction(unit_of_work)
        logger.info("Account %s deleted event %s", account_id, event_id)
