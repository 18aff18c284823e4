"""
Health check endpoint.
"""

from fastapi import APIRouter

from groupbook_api.app.schemas.common import MessageEnvelope


router = APIRouter()


@router.get("/health", response_model=MessageEnvelope)
def health() -> MessageEnvelope:
    return MessageEnvelope(message="Server is running")
