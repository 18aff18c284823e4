"""
Owner endpoints for an event's guest list.
"""

from typing import List

from fastapi import APIRouter, Depends

from groupbook_api.app.core.db import Database, get_database
from groupbook_api.app.core.logging_config import log_api_call
from groupbook_api.app.core.security import get_current_account_id
from groupbook_api.app.schemas.common import MessageEnvelope
from groupbook_api.app.schemas.guest import GuestListEnvelope, GuestRead
from groupbook_api.app.services.guest_service import GuestService


router = APIRouter()


@router.get("/{event_id}/guests", response_model=GuestListEnvelope)
def list_guests(
    event_id: int,
    account_id: int = Depends(get_current_account_id),
    db: Database = Depends(get_database),
) -> GuestListEnvelope:
    log_api_call("list_guests")
    guests: List[GuestRead] = GuestService.list_guests_by_event(db, account_id, event_id)
    return GuestListEnvelope(guests=guests)


@router.delete("/{event_id}/guests/{guest_id}", response_model=MessageEnvelope)
def remove_guest(
    event_id: int,
    guest_id: int,
    account_id: int = Depends(get_current_account_id),
    db: Database = Depends(get_database),
) -> MessageEnvelope:
    log_api_call("remove_guest")
    GuestService.remove_guest(db, account_id, event_id, guest_id)
    return MessageEnvelope(message="Guest removed")
