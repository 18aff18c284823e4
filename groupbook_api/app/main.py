"""
Main entrypoint for the Group Book API.

This module assembles the FastAPI application: it sets up logging,
creates the process-scoped database pool and token service, registers
the handlers that produce the response envelope, and includes the
versioned routers.  ``create_app`` builds and configures the app; an
instance built from environment settings is exposed as ``app`` so that
uvicorn can discover it::

    uvicorn groupbook_api.app.main:app --reload

Every response is HTTP 200 with a JSON body carrying ``return_code``.
Clients branch on that field, never on the transport status.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .api.v1.router import router as v1_router
from .core.config import Settings
from .core.db import Database
from .core.errors import GroupbookError, ReturnCode
from .core.logging_config import setup_logging
from .core.security import TokenService
from .schemas.common import ErrorEnvelope

logger = logging.getLogger(__name__)

# Request fields holding date/times; a malformed value is INVALID_DATE
# rather than MISSING_FIELDS.
DATE_FIELDS = {"event_date_time", "cutoff_datetime"}


def _envelope(return_code: ReturnCode, message: str) -> JSONResponse:
    body = ErrorEnvelope(return_code=return_code, message=message)
    return JSONResponse(status_code=200, content=body.model_dump(mode="json"))


async def handle_groupbook_error(request: Request, exc: GroupbookError) -> JSONResponse:
    logger.info("%s %s -> %s", request.method, request.url.path, exc.return_code.value)
    return _envelope(exc.return_code, exc.message)


async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Map request validation failures onto the return code vocabulary."""
    for error in exc.errors():
        loc = error.get("loc", ())
        if loc and loc[0] == "path":
            return _envelope(ReturnCode.NOT_FOUND, "Not found")
        if (
            error.get("type") != "missing"
            and error.get("input") is not None
            and any(part in DATE_FIELDS for part in loc)
        ):
            return _envelope(ReturnCode.INVALID_DATE, "Invalid date/time format")
    return _envelope(ReturnCode.MISSING_FIELDS, "Required fields are missing or malformed")


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unexpected error on %s %s", request.method, request.url.path)
    return _envelope(ReturnCode.SERVER_ERROR, "An unexpected error occurred")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Create and configure a FastAPI application.

    Parameters
    ----------
    settings : Optional[Settings]
        Configuration to build the app with.  Read from the environment
        when omitted.

    Returns
    -------
    FastAPI
        A configured application.  The database pool is opened when the
        app starts and closed when it shuts down.
    """
    settings = settings or Settings.from_env()
    # Initialise logging before anything else so that startup can log.
    setup_logging(settings.log_level, settings.log_file or None)

    db = Database(
        settings.database_url,
        pool_size=settings.db_pool_size,
        pool_timeout=settings.db_pool_timeout,
        query_timeout=settings.db_query_timeout,
    )
    tokens = TokenService(settings.secret_key, settings.access_token_expire_minutes)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        db.open()
        logger.info("%s %s started", settings.project_name, settings.api_version)
        try:
            yield
        finally:
            db.close()
            logger.info("%s shut down", settings.project_name)

    app = FastAPI(
        title=settings.project_name,
        version=settings.api_version,
        debug=settings.debug,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.db = db
    app.state.tokens = tokens

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.client_urls,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(GroupbookError, handle_groupbook_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)

    app.include_router(v1_router, prefix="/api")
    return app


# Create the application instance at import time so that tools such as
# uvicorn can discover it without calling create_app manually.
app = create_app()
