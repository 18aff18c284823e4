"""
Pydantic models for account data.

Request models only declare which fields must be present; the
content rules (email shape, password length, blank names) are applied
by ``AccountService`` so that they are enforced for every caller, not
only HTTP clients.  ``password_hash`` never appears in any model.
"""

from typing import Optional

from pydantic import AliasChoices, BaseModel, Field

from ..core.errors import ReturnCode


class RegisterRequest(BaseModel):
    email: str = Field(..., examples=["owner@goodfork.com"])
    password: str = Field(..., examples=["secret1"])
    # The web frontend historically sends ``restaurant_name``.
    display_name: str = Field(
        ...,
        validation_alias=AliasChoices("display_name", "restaurant_name"),
        examples=["The Good Fork"],
    )


class LoginRequest(BaseModel):
    email: str
    password: str


class AccountRead(BaseModel):
    """Public fields of an account."""

    id: int
    email: str
    display_name: str

    model_config = {
        "from_attributes": True,
    }


class ProfileUpdate(BaseModel):
    display_name: str = Field(
        ...,
        validation_alias=AliasChoices("display_name", "restaurant_name"),
    )


class Branding(BaseModel):
    """Images and links shown on an account's public guest pages.

    ``None`` removes a value.
    """

    logo_url: Optional[str] = None
    hero_image_url: Optional[str] = None
    terms_link: Optional[str] = None


class AuthEnvelope(BaseModel):
    return_code: ReturnCode = ReturnCode.SUCCESS
    token: str
    account: AccountRead


class AccountEnvelope(BaseModel):
    return_code: ReturnCode = ReturnCode.SUCCESS
    account: AccountRead


class BrandingEnvelope(BaseModel):
    return_code: ReturnCode = ReturnCode.SUCCESS
    branding: Branding
