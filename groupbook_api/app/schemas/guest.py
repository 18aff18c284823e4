"""
Pydantic models for guest entries.
"""

from typing import Annotated, Any, List, Optional

from pydantic import BaseModel, BeforeValidator, Field

from ..core.errors import ReturnCode
from .common import UtcDatetime


def _text_or_none(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


class GuestCreate(BaseModel):
    """Guest sign-up fields.

    ``name`` is not required here: the service resolves the link token
    before it rejects a missing or blank name, so an unknown link is
    always ``NOT_FOUND``.
    """

    name: Annotated[Optional[str], BeforeValidator(_text_or_none)] = Field(None, examples=["Sam"])
    food_order: Optional[str] = None
    dietary_notes: Optional[str] = None


class GuestRead(BaseModel):
    id: int
    event_id: int
    name: str
    food_order: Optional[str] = None
    dietary_notes: Optional[str] = None
    created_at: UtcDatetime

    model_config = {
        "from_attributes": True,
    }


class GuestEnvelope(BaseModel):
    return_code: ReturnCode = ReturnCode.SUCCESS
    guest: GuestRead


class GuestListEnvelope(BaseModel):
    return_code: ReturnCode = ReturnCode.SUCCESS
    guests: List[GuestRead]
