"""Database engine factory and helpers.

This module centralizes creation of SQLAlchemy Engines and applies
backend-specific tuning:

- **SQLite**: adds connection PRAGMAs to enforce foreign keys, enable WAL,
  tune durability/temporary storage and wait for the write lock instead of
  failing immediately when another transaction holds it.
- **Other backends**: no tuning applied here; lock timeouts on PostgreSQL are
  set per transaction by the SQLAlchemy unit of work.

Use this module whenever you need an Engine so that all connections are
consistently configured.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import create_engine, event
from sqlalchemy.engine import URL, make_url

if TYPE_CHECKING:
    from sqlite3 import Connection as SQLiteConnection

    from sqlalchemy.engine import Engine

SQLITE_NAMES = {"sqlite", "sqlite+pysqlite"}
DEFAULT_SQLITE_BUSY_TIMEOUT_MS = 5000


def is_sqlite(url: str | URL) -> bool:
    """Return True if the given SQLAlchemy URL or string corresponds to SQLite.

    Args:
        url: A database URL string or SQLAlchemy :class:`URL`.

    Returns:
        bool: True if the backend is SQLite, otherwise False.
    """
    u = make_url(str(url))
    return u.get_backend_name() in SQLITE_NAMES


def make_engine(
    url: str | URL,
    *,
    echo: bool = False,
    sqlite_busy_timeout_ms: int = DEFAULT_SQLITE_BUSY_TIMEOUT_MS,
) -> Engine:
    """Create a SQLAlchemy Engine for the given URL.

    If the backend is SQLite, applies a set of PRAGMAs on every connection:
        - ``foreign_keys=ON`` (enforce referential integrity)
        - ``journal_mode=WAL`` (readers don't block the single writer)
        - ``synchronous=NORMAL`` (balanced durability)
        - ``temp_store=MEMORY`` (reduce temp file I/O)
        - ``busy_timeout`` (how long a writer waits for the write lock)

    Args:
        url: Database connection URL (str or :class:`URL`).
        echo: If True, log SQL statements.
        sqlite_busy_timeout_ms: SQLite write-lock wait, in milliseconds.

    Returns:
        Engine: Configured SQLAlchemy Engine.
    """

    engine = create_engine(url, echo=echo)

    if is_sqlite(url):

        @event.listens_for(engine, "connect")
        def _sqlite_pragmas(dbapi_conn: SQLiteConnection, conn_record):  # type: ignore #pylint: disable=W0613
            cur = dbapi_conn.cursor()
            cur.execute("PRAGMA foreign_keys=ON;")
            cur.execute("PRAGMA journal_mode=WAL;")
            cur.execute("PRAGMA synchronous=NORMAL;")
            cur.execute("PRAGMA temp_store=MEMORY;")
            cur.execute(f"PRAGMA busy_timeout={int(sqlite_busy_timeout_ms)};")
            cur.close()

    return engine
