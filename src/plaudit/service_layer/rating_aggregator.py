"""Recompute a tutor's rating aggregate inside an open unit of work."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from plaudit.domain.model import TutorAggregate

if TYPE_CHECKING:
    from plaudit.interfaces.unit_of_work import AbstractUnitOfWork

logger = logging.getLogger(__name__)


def recompute_tutor_rating(
    uow: AbstractUnitOfWork, tutor_profile_id: str
) -> TutorAggregate:
    """Lock the tutor's aggregate, rebuild it from every rating, and stage it.

    Must be called inside ``with uow:``; the caller commits. Because the lock
    is taken before the ratings are read, a concurrent unit for the same tutor
    either committed before the read (and its rating is counted) or waits
    until this unit finishes.

    Raises:
        TutorProfileNotFoundError: If the tutor profile does not exist.
        TransientStorageError: If the lock could not be acquired in time.
    """
    uow.tutor_profiles.lock(tutor_profile_id)
    ratings = uow.reviews.ratings_for_tutor(tutor_profile_id)
    aggregate = TutorAggregate.from_ratings(ratings)
    uow.tutor_profiles.save_aggregate(tutor_profile_id, aggregate)
    logger.debug(
        "Tutor %s aggregate recomputed: rating=%s total_reviews=%d",
        tutor_profile_id,
        aggregate.rating,
        aggregate.total_reviews,
    )
    return aggregate
