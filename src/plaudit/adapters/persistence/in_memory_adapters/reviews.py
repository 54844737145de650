"""In-memory ReviewStore.

A booking id is reserved the moment a unit inserts a review for it, so a
concurrent unit inserting for the same booking fails immediately with
`AlreadyReviewedError`, just as it would on a unique index. The reservation is
released if the inserting unit rolls back.
"""

from dataclasses import replace
from datetime import datetime, timezone

from plaudit.domain.errors import AlreadyReviewedError
from plaudit.domain.model import Review
from plaudit.interfaces.errors import StorageError
from plaudit.interfaces.reviews import ReviewStore

from .data import InMemoryReviewData, PendingChanges


class InMemoryReviewStore(ReviewStore):
    """In-memory ReviewStore for tests and non-durable use."""

    def __init__(self, data: InMemoryReviewData, pending: PendingChanges):
        self._data = data
        self._pending = pending

    def add(self, review: Review) -> Review:
        with self._data.lock:
            if (
                review.booking_id in self._data.reviews
                or review.booking_id in self._data.reserved_booking_ids
            ):
                raise AlreadyReviewedError(review.booking_id)
            if review.booking_id not in self._data.bookings:
                # mirrors the foreign key on reviews.booking_id
                raise StorageError(f"unknown booking {review.booking_id!r}")

            persisted = replace(review, created_at=datetime.now(timezone.utc))
            self._data.reserved_booking_ids.add(review.booking_id)
            self._pending.reviews.append(persisted)
        return persisted

    def ratings_for_tutor(self, tutor_profile_id: str) -> list[int]:
        return [review.rating for review in self._visible_reviews(tutor_profile_id)]

    def list_for_tutor(
        self, tutor_profile_id: str, limit: int | None = None
    ) -> list[Review]:
        if limit is not None and limit < 1:
            raise ValueError("limit cannot be <= 0")

        newest_first = sorted(
            self._visible_reviews(tutor_profile_id),
            key=lambda r: (r.created_at, r.review_id),
            reverse=True,
        )
        return newest_first if limit is None else newest_first[:limit]

    def _visible_reviews(self, tutor_profile_id: str) -> list[Review]:
        """Committed reviews plus this unit's staged ones, for one tutor."""
        with self._data.lock:
            candidates = [*self._data.reviews.values(), *self._pending.reviews]
            return [
                review
                for review in candidates
                if self._data.bookings[review.booking_id].tutor_profile_id
                == tutor_profile_id
            ]
