"""SQLAlchemy-backed ReviewStore.

Inserts rely on the database to arbitrate races: two units inserting a review
for the same booking both pass the application-level check, but only one
insert survives the unique constraint on ``reviews.booking_id``. On PostgreSQL
the loser blocks until the winner commits and then fails; on SQLite the loser
waits for the database write lock and then fails. Either way the loser sees an
``IntegrityError``, which is mapped to `AlreadyReviewedError`.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import insert, select
from sqlalchemy.exc import DBAPIError, IntegrityError

from plaudit.adapters.db.errors import error_message, translate_dbapi_error
from plaudit.adapters.persistence.schema import bookings, reviews
from plaudit.domain.errors import AlreadyReviewedError
from plaudit.domain.model import Review
from plaudit.interfaces.errors import StorageError
from plaudit.interfaces.reviews import ReviewStore

if TYPE_CHECKING:
    from sqlalchemy import RowMapping
    from sqlalchemy.engine import Connection

# PostgreSQL names the constraint; SQLite names the column
UNIQUE_BOOKING_ID_MARKERS = ("uq_reviews_booking_id", "reviews.booking_id")


class SqlAlchemyReviewStore(ReviewStore):
    """ReviewStore on the canonical ``reviews`` table."""

    def __init__(self, connection: Connection):
        self.connection = connection

    # --------------------------------------------------------------------- #
    # Interface implementation
    # --------------------------------------------------------------------- #

    def add(self, review: Review) -> Review:
        stmt = (
            insert(reviews)
            .values(
                id=review.review_id,
                booking_id=review.booking_id,
                user_id=review.user_id,
                rating=review.rating,
                comment=review.comment,
            )
            .returning(reviews)
        )
        try:
            row = self.connection.execute(stmt).mappings().one()
        except IntegrityError as e:
            self._raise_from_integrity_error(e, review.booking_id)
        except DBAPIError as e:
            raise translate_dbapi_error(e) from e
        return self._to_review(row)

    def ratings_for_tutor(self, tutor_profile_id: str) -> list[int]:
        stmt = (
            select(reviews.c.rating)
            .select_from(reviews.join(bookings, reviews.c.booking_id == bookings.c.id))
            .where(bookings.c.tutor_profile_id == tutor_profile_id)
        )
        try:
            return [int(rating) for rating in self.connection.execute(stmt).scalars()]
        except DBAPIError as e:
            raise translate_dbapi_error(e) from e

    def list_for_tutor(
        self, tutor_profile_id: str, limit: int | None = None
    ) -> list[Review]:
        if limit is not None and limit < 1:
            raise ValueError("limit cannot be <= 0")

        stmt = (
            select(reviews)
            .select_from(reviews.join(bookings, reviews.c.booking_id == bookings.c.id))
            .where(bookings.c.tutor_profile_id == tutor_profile_id)
            .order_by(reviews.c.created_at.desc(), reviews.c.id.desc())
        )
        if limit is not None:
            stmt = stmt.limit(limit)

        try:
            rows = self.connection.execute(stmt).mappings().all()
        except DBAPIError as e:
            raise translate_dbapi_error(e) from e
        return [self._to_review(row) for row in rows]

    # --------------------------------------------------------------------- #
    # Internals
    # --------------------------------------------------------------------- #

    @staticmethod
    def _to_review(row: RowMapping) -> Review:
        return Review(
            review_id=row["id"],
            booking_id=row["booking_id"],
            user_id=row["user_id"],
            rating=int(row["rating"]),
            comment=row["comment"],
            created_at=row["created_at"],
        )

    @staticmethod
    def _raise_from_integrity_error(
        integrity_error: IntegrityError, booking_id: str
    ) -> None:
        """Raise the domain error matching an IntegrityError from an insert.

        Raises:
            AlreadyReviewedError: If the booking_id uniqueness was violated.
            StorageError: For any other integrity error (unknown booking,
                check constraint, etc.).
        """
        msg = error_message(integrity_error)
        if any(marker in msg for marker in UNIQUE_BOOKING_ID_MARKERS):
            raise AlreadyReviewedError(booking_id) from integrity_error
        raise StorageError(msg) from integrity_error
