"""
Pydantic models for event data.

``EventFields`` holds the fields an owner may set; ``EventCreate`` and
``EventUpdate`` extend it for requests.  Three read projections exist:
``EventRead`` (everything, owner only), ``EventSummary`` (dashboard
list rows) and ``PublicEventRead`` (what a link-token holder sees,
without owner identity, contact details or staff notes).
"""

from datetime import datetime
from typing import Annotated, Any, List, Optional

from pydantic import BaseModel, BeforeValidator, Field, StrictBool

from ..core.errors import ReturnCode
from .account import Branding
from .common import UtcDatetime


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


# An empty string from a cleared form field means "no cutoff".
OptionalDatetime = Annotated[Optional[datetime], BeforeValidator(_blank_to_none)]


class EventFields(BaseModel):
    event_name: str = Field(..., examples=["Christmas party"])
    event_date_time: datetime = Field(..., examples=["2025-12-19T19:30:00"])
    # Guests cannot sign up after this moment.  ``None`` means no cutoff.
    cutoff_datetime: OptionalDatetime = None
    party_lead_name: Optional[str] = None
    party_lead_email: Optional[str] = None
    party_lead_phone: Optional[str] = None
    menu_link: Optional[str] = None
    staff_notes: Optional[str] = None


class EventCreate(EventFields):
    """Schema for creating an event.

    ``seed_guests`` names are added as guests in the same transaction
    as the event itself.
    """

    seed_guests: List[str] = Field(default_factory=list)


class EventUpdate(EventFields):
    """Schema for updating an event.  All editable fields are replaced."""


class EventLock(BaseModel):
    is_locked: StrictBool


class EventRead(BaseModel):
    id: int
    owner_account_id: int
    link_token: str
    restaurant_name: str
    event_name: str
    event_date_time: UtcDatetime
    cutoff_datetime: Optional[UtcDatetime] = None
    party_lead_name: Optional[str] = None
    party_lead_email: Optional[str] = None
    party_lead_phone: Optional[str] = None
    menu_link: Optional[str] = None
    staff_notes: Optional[str] = None
    is_locked: bool = False
    created_at: UtcDatetime

    model_config = {
        "from_attributes": True,
    }


class EventSummary(BaseModel):
    id: int
    event_name: str
    event_date_time: UtcDatetime
    cutoff_datetime: Optional[UtcDatetime] = None
    link_token: str
    is_locked: bool = False
    created_at: UtcDatetime
    guest_count: int = 0


class PublicEventRead(BaseModel):
    id: int
    event_name: str
    event_date_time: UtcDatetime
    cutoff_datetime: Optional[UtcDatetime] = None
    restaurant_name: str
    menu_link: Optional[str] = None
    is_locked: bool = False
    guest_count: int = 0
    branding: Branding


class EventEnvelope(BaseModel):
    return_code: ReturnCode = ReturnCode.SUCCESS
    event: EventRead


class EventListEnvelope(BaseModel):
    return_code: ReturnCode = ReturnCode.SUCCESS
    events: List[EventSummary]


class PublicEventEnvelope(BaseModel):
    return_code: ReturnCode = ReturnCode.SUCCESS
    event: PublicEventRead
