"""
Account endpoints: registration, login and the current account.

Registration and login both answer with a fresh access token.  The
token carries only the account id; ``/auth/me`` re-reads everything
else from the database.
"""

from fastapi import APIRouter, Depends

from groupbook_api.app.core.config import Settings, get_settings
from groupbook_api.app.core.db import Database, get_database
from groupbook_api.app.core.logging_config import log_api_call
from groupbook_api.app.core.security import TokenService, get_current_account_id, get_token_service
from groupbook_api.app.schemas.account import AccountEnvelope, AuthEnvelope, LoginRequest, RegisterRequest
from groupbook_api.app.services.account_service import AccountService


router = APIRouter()


@router.post("/register", response_model=AuthEnvelope)
def register(
    payload: RegisterRequest,
    db: Database = Depends(get_database),
    tokens: TokenService = Depends(get_token_service),
    settings: Settings = Depends(get_settings),
) -> AuthEnvelope:
    """Register a restaurant account.

    Return codes: ``SUCCESS``, ``MISSING_FIELDS``, ``INVALID_EMAIL``,
    ``INVALID_PASSWORD``, ``EMAIL_EXISTS``, ``SERVER_ERROR``.
    """
    log_api_call("register")
    account, token = AccountService.register(
        db,
        tokens,
        payload.email,
        payload.password,
        payload.display_name,
        password_iterations=settings.password_iterations,
    )
    return AuthEnvelope(token=token, account=account)


@router.post("/login", response_model=AuthEnvelope)
def login(
    payload: LoginRequest,
    db: Database = Depends(get_database),
    tokens: TokenService = Depends(get_token_service),
) -> AuthEnvelope:
    """Authenticate with email and password.

    Return codes: ``SUCCESS``, ``MISSING_FIELDS``,
    ``INVALID_CREDENTIALS``, ``SERVER_ERROR``.
    """
    log_api_call("login")
    account, token = AccountService.login(db, tokens, payload.email, payload.password)
    return AuthEnvelope(token=token, account=account)


@router.get("/me", response_model=AccountEnvelope)
def current_account(
    account_id: int = Depends(get_current_account_id),
    db: Database = Depends(get_database),
) -> AccountEnvelope:
    log_api_call("get_current_account")
    account = AccountService.get_account(db, account_id)
    return AccountEnvelope(account=account)
