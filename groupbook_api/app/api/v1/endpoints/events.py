"""
Owner endpoints for events.

Every route requires a bearer token.  The services compare the event's
owner with the token's account after fetching the row, so another
owner's event answers ``FORBIDDEN`` and a missing one ``NOT_FOUND``.
"""

from fastapi import APIRouter, Depends

from groupbook_api.app.core.db import Database, get_database
from groupbook_api.app.core.logging_config import log_api_call
from groupbook_api.app.core.security import get_current_account_id
from groupbook_api.app.schemas.common import MessageEnvelope
from groupbook_api.app.schemas.event import (
    EventCreate,
    EventEnvelope,
    EventListEnvelope,
    EventLock,
    EventUpdate,
)
from groupbook_api.app.services.event_service import EventService


router = APIRouter()


@router.post("", response_model=EventEnvelope)
def create_event(
    payload: EventCreate,
    account_id: int = Depends(get_current_account_id),
    db: Database = Depends(get_database),
) -> EventEnvelope:
    """Create an event with a fresh public link token.

    Names in ``seed_guests`` are added in the same transaction.  Return
    codes: ``SUCCESS``, ``MISSING_FIELDS``, ``INVALID_DATE``,
    ``UNAUTHORIZED``, ``SERVER_ERROR``.
    """
    log_api_call("create_event")
    event = EventService.create_event(db, account_id, payload)
    return EventEnvelope(event=event)


@router.get("", response_model=EventListEnvelope)
def list_events(
    account_id: int = Depends(get_current_account_id),
    db: Database = Depends(get_database),
) -> EventListEnvelope:
    """List the caller's events, most recently created first."""
    log_api_call("list_events")
    events = EventService.list_events_by_owner(db, account_id)
    return EventListEnvelope(events=events)


@router.get("/{event_id}", response_model=EventEnvelope)
def get_event(
    event_id: int,
    account_id: int = Depends(get_current_account_id),
    db: Database = Depends(get_database),
) -> EventEnvelope:
    log_api_call("get_event")
    event = EventService.get_event_by_owner(db, account_id, event_id)
    return EventEnvelope(event=event)


@router.put("/{event_id}", response_model=EventEnvelope)
def update_event(
    event_id: int,
    payload: EventUpdate,
    account_id: int = Depends(get_current_account_id),
    db: Database = Depends(get_database),
) -> EventEnvelope:
    """Replace the editable fields of an event.

    The owner and link token never change.
    """
    log_api_call("update_event")
    event = EventService.update_event(db, account_id, event_id, payload)
    return EventEnvelope(event=event)


@router.put("/{event_id}/lock", response_model=EventEnvelope)
def lock_event(
    event_id: int,
    payload: EventLock,
    account_id: int = Depends(get_current_account_id),
    db: Database = Depends(get_database),
) -> EventEnvelope:
    log_api_call("toggle_event_lock")
    event = EventService.set_event_lock(db, account_id, event_id, payload.is_locked)
    return EventEnvelope(event=event)


@router.delete("/{event_id}", response_model=MessageEnvelope)
def delete_event(
    event_id: int,
    account_id: int = Depends(get_current_account_id),
    db: Database = Depends(get_database),
) -> MessageEnvelope:
    """Delete an event and its guest list in one transaction."""
    log_api_call("delete_event")
    EventService.delete_event(db, account_id, event_id)
    return MessageEnvelope(message="Event deleted successfully")
