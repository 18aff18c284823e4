"""
Logging setup for the Group Book API.

Everything the application logs goes through loggers below
``groupbook_api``.  ``setup_logging`` gives that hierarchy a console
handler and, when ``LOG_FILE`` is set, a file handler; it is called by
``create_app`` and only configures the hierarchy the first time.

``log_api_call`` writes one INFO line per handled API operation to
``groupbook_api.calls``.  It never receives request bodies, so
passwords and tokens cannot end up in the log.
"""

import logging
from pathlib import Path
from typing import List, Optional

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_calls_logger = logging.getLogger("groupbook_api.calls")


def setup_logging(level: str = "INFO", logfile: Optional[str] = None) -> None:
    """Attach handlers to the ``groupbook_api`` logger.

    Parameters
    ----------
    level : str
        Level name such as ``"DEBUG"`` or ``"info"``.  Unknown names
        fall back to INFO.
    logfile : Optional[str]
        File to append log lines to.  Missing parent directories are
        created.
    """
    app_logger = logging.getLogger("groupbook_api")
    if app_logger.handlers:
        return

    app_logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    handlers: List[logging.Handler] = [logging.StreamHandler()]
    if logfile:
        log_path = Path(logfile).resolve()
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path, encoding="utf-8"))

    for handler in handlers:
        handler.setFormatter(formatter)
        app_logger.addHandler(handler)


def log_api_call(operation: str) -> None:
    """Record that an API operation was invoked."""
    _calls_logger.info("API call: %s", operation)
