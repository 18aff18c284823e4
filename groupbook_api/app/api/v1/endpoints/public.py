"""
Public guest-facing endpoints.

These routes are addressed by an event's link token and need no
credentials: holding the token is the authority to view the event's
public page and to add oneself to its guest list.
"""

from typing import Optional

from fastapi import APIRouter, Depends

from groupbook_api.app.core.db import Database, get_database
from groupbook_api.app.core.logging_config import log_api_call
from groupbook_api.app.schemas.event import PublicEventEnvelope
from groupbook_api.app.schemas.guest import GuestCreate, GuestEnvelope
from groupbook_api.app.services.event_service import EventService
from groupbook_api.app.services.guest_service import GuestService


router = APIRouter()


@router.get("/public/{link_token}", response_model=PublicEventEnvelope)
def get_public_event(link_token: str, db: Database = Depends(get_database)) -> PublicEventEnvelope:
    """Public view of an event.  Return codes: ``SUCCESS``, ``NOT_FOUND``."""
    log_api_call("get_event_public")
    event = EventService.get_event_by_link_token(db, link_token)
    return PublicEventEnvelope(event=event)


@router.post("/public/{link_token}/guests", response_model=GuestEnvelope)
def add_guest(
    link_token: str,
    payload: Optional[GuestCreate] = None,
    db: Database = Depends(get_database),
) -> GuestEnvelope:
    """Sign up for an event.

    Return codes: ``SUCCESS``, ``MISSING_FIELDS``, ``NOT_FOUND``,
    ``REGISTRATION_LOCKED``, ``REGISTRATION_CLOSED``, ``SERVER_ERROR``.
    """
    log_api_call("add_guest")
    guest = GuestService.add_guest(db, link_token, payload or GuestCreate())
    return GuestEnvelope(guest=guest)
