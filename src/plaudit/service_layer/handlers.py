"""Service layer handlers."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

from plaudit.domain.model import Review, TutorAggregate

from . import commands
from .booking_guard import ensure_reviewable
from .rating_aggregator import recompute_tutor_rating
from .retry import RetryPolicy, run_with_retry
from .validation import validate_create_review

if TYPE_CHECKING:
    from plaudit.interfaces.id_generator import IdGenerator
    from plaudit.interfaces.sanitizer import Sanitizer
    from plaudit.interfaces.unit_of_work import AbstractUnitOfWork

logger = logging.getLogger(__name__)


def create_review(
    cmd: commands.CreateReview,
    uow: AbstractUnitOfWork,
    sanitizer: Sanitizer,
    id_generator: IdGenerator,
    retry_policy: RetryPolicy | None = None,
) -> Review:
    """Record a review and refresh the tutor's aggregate in one unit of work.

    Validation happens once, up front. Everything that touches storage (the
    booking read, eligibility checks, insert and recompute) runs as one unit
    that is retried from scratch on transient storage errors, so a retry that
    lost a race reports "already reviewed" rather than writing twice.
    """
    draft = validate_create_review(cmd, sanitizer)

    def attempt() -> Review:
        with uow:
            snapshot = uow.bookings.get_with_tutor_and_review(draft.booking_id)
            booking = ensure_reviewable(snapshot, draft.booking_id, cmd.requester_id)

            review = uow.reviews.add(
                Review(
                    review_id=id_generator.new_id(),
                    booking_id=booking.booking_id,
                    user_id=cmd.requester_id,
                    rating=draft.rating,
                    comment=draft.comment,
                )
            )
            recompute_tutor_rating(uow, booking.tutor_profile_id)
            uow.commit()

        logger.info(
            "Review %s recorded for booking %s (tutor %s)",
            review.review_id,
            booking.booking_id,
            booking.tutor_profile_id,
        )
        return review

    return run_with_retry(
        attempt, retry_policy or RetryPolicy(), f"CreateReview {draft.booking_id}"
    )


def recalculate_tutor_rating(
    cmd: commands.RecalculateTutorRating,
    uow: AbstractUnitOfWork,
    retry_policy: RetryPolicy | None = None,
) -> TutorAggregate:
    """Rebuild a tutor's aggregate from their reviews (idempotent repair)."""

    def attempt() -> TutorAggregate:
        with uow:
            uow.tutor_profiles.lock(cmd.tutor_profile_id)
            before = uow.tutor_profiles.get_aggregate(cmd.tutor_profile_id)
            aggregate = recompute_tutor_rating(uow, cmd.tutor_profile_id)
            uow.commit()

        if before != aggregate:
            logger.info(
                "Tutor %s aggregate repaired: %s -> %s",
                cmd.tutor_profile_id,
                before,
                aggregate,
            )
        return aggregate

    return run_with_retry(
        attempt,
        retry_policy or RetryPolicy(),
        f"RecalculateTutorRating {cmd.tutor_profile_id}",
    )


COMMAND_HANDLERS: dict[type[commands.Command], Callable[..., object]] = {
    commands.CreateReview: create_review,
    commands.RecalculateTutorRating: recalculate_tutor_rating,
}
