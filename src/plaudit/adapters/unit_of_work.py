"""Units of Work for PLAUDIT.

Provides a SQLAlchemy-backed unit of work (one Connection and one transaction
per ``with`` block) and an in-memory one over `InMemoryReviewData`.

A single unit-of-work object is shared by every handler the message bus
dispatches to, and the bus may be driven from several threads at once. The
open transaction therefore lives in thread-local state: each thread entering
``with uow:`` gets its own connection (or staged changes) and its own stores.
"""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING

from sqlalchemy import text
from sqlalchemy.exc import DBAPIError

from plaudit.adapters.db.dialects import DialectName
from plaudit.adapters.db.errors import translate_dbapi_error
from plaudit.adapters.persistence.in_memory_adapters import (
    InMemoryBookingReader,
    InMemoryReviewData,
    InMemoryReviewStore,
    InMemoryTutorProfileStore,
    PendingChanges,
)
from plaudit.adapters.persistence.sqlalchemy_adapters import (
    SqlAlchemyBookingReader,
    SqlAlchemyReviewStore,
    SqlAlchemyTutorProfileStore,
)
from plaudit.interfaces.unit_of_work import AbstractUnitOfWork

if TYPE_CHECKING:
    from sqlalchemy.engine import Connection, Engine

    from plaudit.interfaces.bookings import BookingReader
    from plaudit.interfaces.reviews import ReviewStore
    from plaudit.interfaces.tutor_profiles import TutorProfileStore


class NoActiveUnitOfWork(RuntimeError):
    """Raised when stores are used outside of a ``with uow:`` block."""

    def __init__(self) -> None:
        super().__init__("unit of work used outside of a 'with' block")


class _ThreadBoundUnitOfWork(AbstractUnitOfWork):
    """Keeps the open unit's stores in thread-local storage."""

    def __init__(self) -> None:
        self._local = threading.local()

    def _get(self, name: str):
        try:
            return getattr(self._local, name)
        except AttributeError as e:
            raise NoActiveUnitOfWork() from e

    @property
    def bookings(self) -> BookingReader:  # type: ignore[override]
        return self._get("bookings")

    @property
    def reviews(self) -> ReviewStore:  # type: ignore[override]
        return self._get("reviews")

    @property
    def tutor_profiles(self) -> TutorProfileStore:  # type: ignore[override]
        return self._get("tutor_profiles")

    def _bind(self, **stores) -> None:
        for name, store in stores.items():
            setattr(self._local, name, store)

    def _unbind(self) -> None:
        self._local.__dict__.clear()


class SqlAlchemyUnitOfWork(_ThreadBoundUnitOfWork):
    """SQLAlchemy-backed Unit of Work.

    Args:
        engine: Engine to draw connections from.
        lock_timeout_ms: Bound on any lock wait inside a unit (PostgreSQL
            ``lock_timeout``). ``None`` waits indefinitely.
    """

    def __init__(self, engine: Engine, lock_timeout_ms: int | None = None):
        super().__init__()
        self.engine = engine
        self.lock_timeout_ms = lock_timeout_ms

    @property
    def connection(self) -> Connection:
        """Connection of the unit open in the calling thread."""
        return self._get("connection")

    def __enter__(self):
        try:
            connection = self.engine.connect()
        except DBAPIError as e:
            raise translate_dbapi_error(e) from e
        try:
            self._begin(connection)
        except DBAPIError as e:
            connection.close()
            raise translate_dbapi_error(e) from e

        self._bind(
            connection=connection,
            bookings=SqlAlchemyBookingReader(connection),
            reviews=SqlAlchemyReviewStore(connection),
            tutor_profiles=SqlAlchemyTutorProfileStore(connection),
        )
        return super().__enter__()

    def __exit__(self, *args):
        try:
            super().__exit__(*args)
        finally:
            self.connection.close()
            self._unbind()

    def _begin(self, connection: Connection) -> None:
        # Bounds every lock wait of the transaction: the tutor row lock as
        # well as the insert's foreign key and unique index checks.
        if (
            self.lock_timeout_ms is not None
            and DialectName.from_sqlalchemy(connection) is DialectName.POSTGRES
        ):
            # SET does not take bind parameters
            connection.execute(
                text(f"SET LOCAL lock_timeout = {int(self.lock_timeout_ms)}")
            )

    def commit(self):
        try:
            self.connection.commit()
        except DBAPIError as e:
            raise translate_dbapi_error(e) from e

    def rollback(self):
        self.connection.rollback()


class InMemoryUnitOfWork(_ThreadBoundUnitOfWork):
    """In-memory Unit of Work.

    Writes are staged in a `PendingChanges` and applied to the shared data on
    commit. Rollback discards them, frees reserved booking ids and releases
    tutor locks.

    Args:
        data: Shared state; several units (or threads) may use the same one.
        lock_timeout_s: Bound on waiting for a tutor's aggregate lock.
    """

    def __init__(
        self, data: InMemoryReviewData | None = None, lock_timeout_s: float = 5.0
    ):
        super().__init__()
        self.data = data if data is not None else InMemoryReviewData()
        self.lock_timeout_s = lock_timeout_s

    @property
    def pending(self) -> PendingChanges:
        """Staged changes of the unit open in the calling thread."""
        return self._get("pending")

    def __enter__(self):
        pending = PendingChanges()
        self._bind(
            pending=pending,
            bookings=InMemoryBookingReader(self.data, pending),
            reviews=InMemoryReviewStore(self.data, pending),
            tutor_profiles=InMemoryTutorProfileStore(
                self.data, pending, lock_timeout_s=self.lock_timeout_s
            ),
        )
        return super().__enter__()

    def __exit__(self, *args):
        try:
            super().__exit__(*args)
        finally:
            self._unbind()

    def commit(self):
        pending = self.pending
        with self.data.lock:
            for review in pending.reviews:
                self.data.reviews[review.booking_id] = review
                self.data.reserved_booking_ids.discard(review.booking_id)
            self.data.tutor_profiles.update(pending.aggregates)
        self._reset(pending)

    def rollback(self):
        pending = self.pending
        with self.data.lock:
            for review in pending.reviews:
                self.data.reserved_booking_ids.discard(review.booking_id)
        self._reset(pending)

    @staticmethod
    def _reset(pending: PendingChanges) -> None:
        pending.reviews.clear()
        pending.aggregates.clear()
        for tutor_lock in pending.held_locks.values():
            tutor_lock.release()
        pending.held_locks.clear()
