"""In-memory composed booking read."""

from dataclasses import replace

from plaudit.domain.model import BookingSnapshot
from plaudit.interfaces.bookings import BookingReader

from .data import InMemoryReviewData, PendingChanges

# pylint: disable=too-few-public-methods


class InMemoryBookingReader(BookingReader):
    """Reads a booking and its review (committed or staged by this unit)."""

    def __init__(self, data: InMemoryReviewData, pending: PendingChanges):
        self._data = data
        self._pending = pending

    def get_with_tutor_and_review(self, booking_id: str) -> BookingSnapshot | None:
        with self._data.lock:
            if (booking := self._data.bookings.get(booking_id)) is None:
                return None
            review = self._data.reviews.get(booking_id) or self._pending.review_for(
                booking_id
            )
        return replace(booking, review_id=review.review_id if review else None)
