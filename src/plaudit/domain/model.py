"""Value objects used across the review workflow."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum

MIN_RATING = 1
MAX_RATING = 5
MAX_COMMENT_LENGTH = 5000

ONE_DECIMAL = Decimal("0.1")
ZERO_RATING = Decimal("0.0")


class BookingStatus(str, Enum):
    """Lifecycle states of a booking. Only COMPLETED bookings can be reviewed."""

    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


@dataclass(frozen=True)
class BookingSnapshot:
    """A booking read together with its tutor profile and existing review.

    Produced by a single composed read so that the ownership, state and
    duplicate checks all see the same moment in time.
    """

    booking_id: str
    student_id: str
    tutor_profile_id: str
    status: BookingStatus
    review_id: str | None = None

    @property
    def is_reviewed(self) -> bool:
        """Whether a review already exists for this booking."""
        return self.review_id is not None


@dataclass(frozen=True)
class Review:
    """A persisted review. Immutable once created.

    `created_at` is None only before the store has persisted the review.
    """

    review_id: str
    booking_id: str
    user_id: str
    rating: int
    comment: str | None
    created_at: datetime | None = None


@dataclass(frozen=True)
class TutorAggregate:
    """Derived rating summary stored on a tutor profile."""

    rating: Decimal
    total_reviews: int

    def __post_init__(self) -> None:
        if self.total_reviews < 0:
            raise ValueError("total_reviews must be >= 0")

    @classmethod
    def empty(cls) -> TutorAggregate:
        """The aggregate of a tutor with no reviews."""
        return cls(rating=ZERO_RATING, total_reviews=0)

    @classmethod
    def from_ratings(cls, ratings: Iterable[int]) -> TutorAggregate:
        """Summarize a complete set of ratings.

        The mean is computed exactly and rounded half-up to one decimal, so
        `[4, 4, 4, 5]` (mean 4.25) yields 4.3. Always recompute from the full
        set; never fold a new rating into a previous aggregate.

        Args:
            ratings: Every rating currently recorded for the tutor.

        Returns:
            The aggregate for those ratings, or `empty()` if there are none.
        """
        values = list(ratings)
        if not values:
            return cls.empty()
        mean = Decimal(sum(values)) / Decimal(len(values))
        return cls(
            rating=mean.quantize(ONE_DECIMAL, rounding=ROUND_HALF_UP),
            total_reviews=len(values),
        )
