"""Eligibility checks for reviewing a booking.

The checks run against one `BookingSnapshot`, in a fixed order: existence,
ownership, state, then duplicates. A requester who is not the booking's
student therefore learns nothing about its state or review.

The duplicate check is advisory. Two concurrent submissions can both pass it;
the store's uniqueness guarantee decides which one wins.
"""

from __future__ import annotations

from dataclasses import dataclass

from plaudit.domain.errors import (
    AlreadyReviewedError,
    BookingNotCompletedError,
    BookingNotFoundError,
    NotBookingStudentError,
)
from plaudit.domain.model import BookingSnapshot, BookingStatus


@dataclass(frozen=True)
class ReviewableBooking:
    """A booking the requester may review now."""

    booking_id: str
    tutor_profile_id: str


def ensure_reviewable(
    snapshot: BookingSnapshot | None, booking_id: str, requester_id: str
) -> ReviewableBooking:
    """Check that `requester_id` may review the booking described by `snapshot`.

    Args:
        snapshot: Result of the composed booking read, None if not found.
        booking_id: The booking id the request referred to.
        requester_id: The authenticated user submitting the review.

    Returns:
        ReviewableBooking: The booking id and the tutor profile to aggregate.

    Raises:
        BookingNotFoundError: If there is no such booking.
        NotBookingStudentError: If the requester is not the booking's student.
        BookingNotCompletedError: If the booking is not COMPLETED.
        AlreadyReviewedError: If the booking already has a review.
    """
    if snapshot is None:
        raise BookingNotFoundError(booking_id)
    if snapshot.student_id != requester_id:
        raise NotBookingStudentError(booking_id, requester_id)
    if snapshot.status is not BookingStatus.COMPLETED:
        raise BookingNotCompletedError(booking_id, snapshot.status.value)
    if snapshot.is_reviewed:
        raise AlreadyReviewedError(booking_id)

    return ReviewableBooking(
        booking_id=snapshot.booking_id, tutor_profile_id=snapshot.tutor_profile_id
    )
