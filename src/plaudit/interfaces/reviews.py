"""Review store port.

Contract overview
-----------------
Insert:
- `add(review)` persists a new review and returns it with `created_at` set by
  the store (UTC, tz-aware).
- At most one review per booking. The store enforces this with a uniqueness
  guarantee on `booking_id` that holds across concurrent units of work; a
  violation raises `AlreadyReviewedError` and the unit must be abandoned.

Reads:
- `ratings_for_tutor(tutor_profile_id)` returns every rating of the tutor
  visible to the current unit of work, including its own uncommitted insert.
- `list_for_tutor(tutor_profile_id, limit=None)` returns reviews newest first.

Reviews are never updated or deleted through this port.
"""

from __future__ import annotations

import abc
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from plaudit.domain.model import Review


class ReviewStore(abc.ABC):
    """Append-only store of reviews."""

    @abc.abstractmethod
    def add(self, review: Review) -> Review:
        """Insert a review.

        Args:
            review: The review to insert. `created_at` is ignored.

        Returns:
            Review: The persisted review with `created_at` populated.

        Raises:
            AlreadyReviewedError: If a review for `review.booking_id` exists,
                including one inserted by a concurrent, already committed unit.
            TransientStorageError: On contention; the unit may be retried.
            StorageError: For any other storage failure.
        """

    @abc.abstractmethod
    def ratings_for_tutor(self, tutor_profile_id: str) -> list[int]:
        """Return every rating recorded for the tutor's bookings.

        Args:
            tutor_profile_id: The tutor profile identifier.

        Returns:
            list[int]: One entry per review; empty if the tutor has none.
        """

    @abc.abstractmethod
    def list_for_tutor(
        self, tutor_profile_id: str, limit: int | None = None
    ) -> list[Review]:
        """Return the tutor's reviews, newest first.

        Args:
            tutor_profile_id: The tutor profile identifier.
            limit: Maximum number of reviews to return. If None, returns all.

        Returns:
            list[Review]: The reviews; empty if the tutor has none.

        Raises:
            ValueError: If limit is not None and limit < 1.
        """
