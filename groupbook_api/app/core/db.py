"""
SQLite database integration, connection pool and migrations.

``Database`` owns a bounded pool of SQLite connections for the lifetime
of the application.  It is created by ``create_app``, opened on startup
(which also applies pending migrations) and closed on shutdown.  Route
handlers receive it through the ``get_database`` dependency.

Connections run in autocommit mode; single statements commit on their
own and multi-statement writes go through ``Database.transaction`` or
``Database.run_in_transaction``, which wrap the work in an explicit
``BEGIN``/``COMMIT`` and roll back on any error.

The migration mechanism stores applied migration versions in the
``migrations`` table and executes new migrations in order.
"""

import logging
import os
import queue
import sqlite3
import threading
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Callable, Iterator, List, Optional, Tuple, TypeVar

from fastapi import Request

logger = logging.getLogger(__name__)

T = TypeVar("T")


MIGRATIONS: List[Tuple[int, str]] = [
    # Migration 1: initial schema
    (
        1,
        """
        CREATE TABLE IF NOT EXISTS accounts (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            email TEXT NOT NULL UNIQUE COLLATE NOCASE,
            password_hash TEXT NOT NULL,
            display_name TEXT NOT NULL,
            created_at TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%fZ', 'now'))
        );

        CREATE TABLE IF NOT EXISTS events (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            owner_account_id INTEGER NOT NULL REFERENCES accounts(id),
            link_token TEXT NOT NULL UNIQUE,
            restaurant_name TEXT NOT NULL,
            event_name TEXT NOT NULL,
            event_date_time TEXT NOT NULL,
            cutoff_datetime TEXT,
            party_lead_name TEXT,
            party_lead_email TEXT,
            party_lead_phone TEXT,
            menu_link TEXT,
            staff_notes TEXT,
            is_locked INTEGER NOT NULL DEFAULT 0,
            created_at TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%fZ', 'now'))
        );

        CREATE INDEX IF NOT EXISTS idx_events_owner_account_id ON events(owner_account_id);

        CREATE TABLE IF NOT EXISTS guests (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            event_id INTEGER NOT NULL REFERENCES events(id),
            name TEXT NOT NULL,
            food_order TEXT,
            dietary_notes TEXT,
            created_at TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%fZ', 'now'))
        );

        CREATE INDEX IF NOT EXISTS idx_guests_event_id ON guests(event_id);
        """,
    ),
    # Migration 2: branding shown on the public guest page
    (
        2,
        """
        ALTER TABLE accounts ADD COLUMN logo_url TEXT;
        ALTER TABLE accounts ADD COLUMN hero_image_url TEXT;
        ALTER TABLE accounts ADD COLUMN terms_link TEXT;
        """,
    ),
]


class PoolTimeout(RuntimeError):
    """No pooled connection became free within the configured wait."""


def resolve_database_path(database_url: str) -> str:
    """Compute the path to the SQLite database file.

    A ``sqlite:///`` prefix is accepted and stripped.  ``:memory:`` is
    passed through untouched; relative paths are resolved against the
    current working directory.
    """
    path = database_url
    if path.startswith("sqlite:///"):
        path = path[len("sqlite:///"):]
    if path == ":memory:" or os.path.isabs(path):
        return path
    return str(Path(path).resolve())


class Database:
    """Bounded pool of SQLite connections plus transaction helpers.

    Parameters
    ----------
    path : str
        SQLite database file.
    pool_size : int
        Number of connections kept open; bounds concurrent queries.
    pool_timeout : float
        Seconds to wait for a free connection before ``PoolTimeout``.
    query_timeout : float
        Seconds a checked-out connection may spend executing statements
        before SQLite interrupts them.  Also used as SQLite's busy
        timeout when waiting on another writer's lock.
    """

    def __init__(
        self,
        path: str,
        pool_size: int = 5,
        pool_timeout: float = 5.0,
        query_timeout: float = 10.0,
    ) -> None:
        if pool_size < 1:
            raise ValueError("pool_size must be at least 1")
        self.path = resolve_database_path(path)
        self.pool_size = pool_size
        self.pool_timeout = pool_timeout
        self.query_timeout = query_timeout
        self._pool: "queue.Queue[sqlite3.Connection]" = queue.Queue(maxsize=pool_size)
        self._all: List[sqlite3.Connection] = []
        self._lock = threading.Lock()
        self._closed = True

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(
            self.path,
            timeout=self.query_timeout,
            isolation_level=None,
            check_same_thread=False,
        )
        conn.row_factory = sqlite3.Row
        # Foreign keys are off by default in SQLite and must be enabled
        # for every connection.
        conn.execute("PRAGMA foreign_keys = ON")
        return conn

    def open(self) -> None:
        """Create the pooled connections and apply pending migrations."""
        with self._lock:
            if not self._closed:
                return
            for _ in range(self.pool_size):
                conn = self._connect()
                self._all.append(conn)
                self._pool.put(conn)
            self._closed = False
        logger.info("Opened database %s with %d connections", self.path, self.pool_size)
        self.migrate()

    def close(self) -> None:
        """Close every pooled connection."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            while not self._pool.empty():
                self._pool.get_nowait()
            for conn in self._all:
                conn.close()
            self._all.clear()
        logger.info("Closed database %s", self.path)

    @contextmanager
    def connection(self) -> Iterator[sqlite3.Connection]:
        """Check out a pooled connection for the duration of the block."""
        if self._closed:
            raise RuntimeError("Database is not open")
        try:
            conn = self._pool.get(timeout=self.pool_timeout)
        except queue.Empty:
            raise PoolTimeout(
                f"No database connection available after {self.pool_timeout} seconds"
            ) from None
        deadline = time.monotonic() + self.query_timeout
        conn.set_progress_handler(lambda: 1 if time.monotonic() > deadline else 0, 1000)
        try:
            yield conn
        finally:
            # Connections closed by close() never go back into the pool.
            if conn in self._all:
                conn.set_progress_handler(None, 0)
                if conn.in_transaction:
                    conn.rollback()
                self._pool.put(conn)

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Connection]:
        """Run the block inside ``BEGIN``/``COMMIT`` on a dedicated connection.

        Any exception rolls the transaction back and is re-raised
        unchanged, so no partial multi-row write is ever committed.
        """
        with self.connection() as conn:
            conn.execute("BEGIN")
            try:
                yield conn
            except BaseException:
                conn.rollback()
                raise
            conn.commit()

    def run_in_transaction(self, unit_of_work: Callable[[sqlite3.Connection], T]) -> T:
        """Call ``unit_of_work(conn)`` in a transaction and return its result."""
        with self.transaction() as conn:
            return unit_of_work(conn)

    def migrate(self) -> None:
        """Apply migrations newer than the recorded schema version.

        Each migration runs as one script together with the insert of its
        version row, so a failing migration leaves the version unchanged.
        """
        with self.connection() as conn:
            conn.execute("CREATE TABLE IF NOT EXISTS migrations (version INTEGER PRIMARY KEY)")
            row = conn.execute("SELECT MAX(version) AS version FROM migrations").fetchone()
            current_version = row["version"] if row and row["version"] is not None else 0
            for version, sql in MIGRATIONS:
                if version <= current_version:
                    continue
                logger.info("Applying migration %d", version)
                try:
                    conn.executescript(
                        f"BEGIN;\n{sql}\nINSERT INTO migrations (version) VALUES ({version});\nCOMMIT;"
                    )
                except sqlite3.Error:
                    if conn.in_transaction:
                        conn.rollback()
                    raise
                current_version = version

    def schema_version(self) -> Optional[int]:
        with self.connection() as conn:
            row = conn.execute("SELECT MAX(version) AS version FROM migrations").fetchone()
            return row["version"] if row else None


def get_database(request: Request) -> Database:
    """FastAPI dependency returning the application's ``Database``."""
    return request.app.state.db
