"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from environment
variables.  Defaults are provided for all fields so that the API can be
started locally without any setup; in production at least ``SECRET_KEY``
and ``DATABASE_URL`` should be overridden.

Settings are built once at process start (``Settings.from_env()``) and
passed explicitly to ``create_app``.  Tests construct ``Settings``
directly with their own values.
"""

import os
from dataclasses import dataclass, field
from typing import List

from fastapi import Request


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in {"1", "true", "yes"}


@dataclass
class Settings:
    """Application settings."""

    project_name: str = "Group Book API"
    api_version: str = "1.0.0"
    debug: bool = False
    log_level: str = "INFO"
    log_file: str = ""

    # Signing key for access tokens.  Loaded once and never rotated while
    # the process is running.
    secret_key: str = "change_me"
    access_token_expire_minutes: int = 60 * 24
    password_iterations: int = 100_000

    # Path to the SQLite database file.  Relative paths are resolved
    # against the current working directory by ``core.db``.
    database_url: str = "groupbook.db"
    db_pool_size: int = 5
    # Seconds to wait for a free pooled connection.
    db_pool_timeout: float = 5.0
    # Upper bound in seconds for the work done on one checked-out connection.
    db_query_timeout: float = 10.0

    # Origins allowed by CORS (the web frontend).
    client_urls: List[str] = field(default_factory=lambda: ["http://localhost:3000"])

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from environment variables.

        Environment variables should be set before this is called; the
        values are read exactly once.
        """
        client_url = os.getenv("CLIENT_URL", "http://localhost:3000")
        return cls(
            project_name=os.getenv("PROJECT_NAME", "Group Book API"),
            api_version=os.getenv("API_VERSION", "1.0.0"),
            debug=_env_bool("DEBUG"),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_file=os.getenv("LOG_FILE", ""),
            secret_key=os.getenv("SECRET_KEY", "change_me"),
            access_token_expire_minutes=int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", str(60 * 24))),
            password_iterations=int(os.getenv("PASSWORD_ITERATIONS", "100000")),
            database_url=os.getenv("DATABASE_URL", "groupbook.db"),
            db_pool_size=int(os.getenv("DB_POOL_SIZE", "5")),
            db_pool_timeout=float(os.getenv("DB_POOL_TIMEOUT", "5")),
            db_query_timeout=float(os.getenv("DB_QUERY_TIMEOUT", "10")),
            client_urls=[u.strip() for u in client_url.split(",") if u.strip()],
        )


def get_settings(request: Request) -> Settings:
    """FastAPI dependency returning the settings the app was built with."""
    return request.app.state.settings
