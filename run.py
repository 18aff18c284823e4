"""Entry point for serving the Group Book API.

Configuration such as SECRET_KEY, DATABASE_URL and CLIENT_URL is read
from environment variables (see ``groupbook_api/app/core/config.py``).
Host and port come from ``API_HOST`` and ``API_PORT``.

Usage:
    python run.py
"""
import asyncio
import logging
import os

from uvicorn import Config, Server

from groupbook_api.app.core.config import Settings
from groupbook_api.app.main import create_app


async def run_api() -> None:
    """Start the API using Uvicorn.

    Defaults are ``0.0.0.0`` and ``3016``.
    """
    host = os.getenv("API_HOST", "0.0.0.0")
    port = int(os.getenv("API_PORT", "3016"))
    settings = Settings.from_env()
    config = Config(
        app=create_app(settings),
        host=host,
        port=port,
        reload=False,
        log_level=settings.log_level.lower(),
    )
    server = Server(config)
    await server.serve()


def main() -> None:
    try:
        asyncio.run(run_api())
    except (KeyboardInterrupt, SystemExit):
        logging.getLogger(__name__).info("Stopped")


if __name__ == "__main__":
    main()
