"""SQLAlchemy implementation of the composed booking read."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import select
from sqlalchemy.exc import DBAPIError

from plaudit.adapters.db.errors import translate_dbapi_error
from plaudit.adapters.persistence.schema import bookings, reviews
from plaudit.domain.model import BookingSnapshot, BookingStatus
from plaudit.interfaces.bookings import BookingReader

if TYPE_CHECKING:
    from sqlalchemy.engine import Connection

# pylint: disable=too-few-public-methods


class SqlAlchemyBookingReader(BookingReader):
    """Reads a booking and its review in one statement (LEFT OUTER JOIN)."""

    def __init__(self, connection: Connection):
        self.connection = connection

    def get_with_tutor_and_review(self, booking_id: str) -> BookingSnapshot | None:
        stmt = (
            select(
                bookings.c.id,
                bookings.c.student_id,
                bookings.c.tutor_profile_id,
                bookings.c.status,
                reviews.c.id.label("review_id"),
            )
            .select_from(
                bookings.outerjoin(reviews, reviews.c.booking_id == bookings.c.id)
            )
            .where(bookings.c.id == booking_id)
        )
        try:
            row = self.connection.execute(stmt).fetchone()
        except DBAPIError as e:
            raise translate_dbapi_error(e) from e

        if row is None:
            return None
        return BookingSnapshot(
            booking_id=row.id,
            student_id=row.student_id,
            tutor_profile_id=row.tutor_profile_id,
            status=BookingStatus(row.status),
            review_id=row.review_id,
        )
