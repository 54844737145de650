"""Translate SQLAlchemy/DBAPI errors into PLAUDIT storage errors.

Adapters catch ``DBAPIError`` at their boundary and re-raise through
`translate_dbapi_error` so the service layer only ever sees
`TransientStorageError` (worth retrying the whole unit) or `StorageError`.
"""

from __future__ import annotations

from sqlalchemy.exc import DBAPIError

from plaudit.interfaces.errors import StorageError, TransientStorageError

# SQLSTATEs that mean "try the whole transaction again"
RETRYABLE_PGCODES = frozenset(
    {
        "40001",  # serialization_failure
        "40P01",  # deadlock_detected
        "55P03",  # lock_not_available (lock_timeout)
        "57014",  # query_canceled (statement_timeout)
    }
)

RETRYABLE_MESSAGES = (
    "database is locked",
    "database table is locked",
    "could not serialize access",
    "deadlock detected",
    "lock timeout",
)

EMPTY_STRING = ""  # pragma: no mutate


def error_message(error: DBAPIError) -> str:
    """Return the driver's message if there is one, else SQLAlchemy's."""
    return (
        str(error.orig) if error.orig not in (None, EMPTY_STRING) else str(error)
    )


def pgcode(error: DBAPIError) -> str | None:
    """Return the PostgreSQL SQLSTATE of the underlying driver error, if any.

    psycopg 3 exposes it as ``sqlstate``; psycopg2 as ``pgcode``.
    """
    orig = error.orig
    return getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)


def is_retryable(error: DBAPIError) -> bool:
    """Whether the error indicates transient contention.

    Args:
        error: A SQLAlchemy ``DBAPIError`` (``OperationalError`` etc.).

    Returns:
        bool: True for lock timeouts, serialization failures and deadlocks.
    """
    if pgcode(error) in RETRYABLE_PGCODES:
        return True
    msg = error_message(error).lower()
    return any(fragment in msg for fragment in RETRYABLE_MESSAGES)


def translate_dbapi_error(error: DBAPIError) -> StorageError:
    """Map a ``DBAPIError`` to the storage error the caller should raise.

    Usage:
        ```py
        except DBAPIError as e:
            raise translate_dbapi_error(e) from e
        ```
    """
    msg = error_message(error)
    if is_retryable(error):
        return TransientStorageError(msg)
    return StorageError(msg)
