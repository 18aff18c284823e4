"""
Profile and branding endpoints for the authenticated account.
"""

from fastapi import APIRouter, Depends

from groupbook_api.app.core.db import Database, get_database
from groupbook_api.app.core.logging_config import log_api_call
from groupbook_api.app.core.security import get_current_account_id
from groupbook_api.app.schemas.account import AccountEnvelope, Branding, BrandingEnvelope, ProfileUpdate
from groupbook_api.app.services.account_service import AccountService


router = APIRouter()


@router.put("/user/profile", response_model=AccountEnvelope)
def update_profile(
    payload: ProfileUpdate,
    account_id: int = Depends(get_current_account_id),
    db: Database = Depends(get_database),
) -> AccountEnvelope:
    """Change the account's display (restaurant) name.

    Events keep the restaurant name they were created with.
    """
    log_api_call("update_profile")
    account = AccountService.update_profile(db, account_id, payload.display_name)
    return AccountEnvelope(account=account)


@router.get("/branding", response_model=BrandingEnvelope)
def get_branding(
    account_id: int = Depends(get_current_account_id),
    db: Database = Depends(get_database),
) -> BrandingEnvelope:
    log_api_call("get_branding")
    branding = AccountService.get_branding(db, account_id)
    return BrandingEnvelope(branding=branding)


@router.put("/branding", response_model=BrandingEnvelope)
def update_branding(
    payload: Branding,
    account_id: int = Depends(get_current_account_id),
    db: Database = Depends(get_database),
) -> BrandingEnvelope:
    """Replace logo, hero image and terms link.  ``null`` removes a value."""
    log_api_call("update_branding")
    branding = AccountService.update_branding(db, account_id, payload)
    return BrandingEnvelope(branding=branding)
