"""
Common response schemas and field types.
"""

from datetime import datetime, timezone
from typing import Annotated, Optional

from pydantic import AfterValidator, BaseModel

from ..core.errors import ReturnCode


def _as_utc(value: datetime) -> datetime:
    """Mark a stored (naive UTC) datetime as UTC; convert aware ones."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


# Datetimes in responses always carry an explicit UTC offset so that
# clients do not read them as local time.
UtcDatetime = Annotated[datetime, AfterValidator(_as_utc)]


class MessageEnvelope(BaseModel):
    """Envelope for responses that carry only a message."""

    return_code: ReturnCode = ReturnCode.SUCCESS
    message: Optional[str] = None


class ErrorEnvelope(BaseModel):
    """Envelope for every failed request."""

    return_code: ReturnCode
    message: str
