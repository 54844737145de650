"""Read-side queries for tutor pages.

Queries open their own unit of work and never commit; nothing here writes.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from plaudit.domain.errors import TutorProfileNotFoundError

if TYPE_CHECKING:
    from plaudit.domain.model import Review, TutorAggregate
    from plaudit.interfaces.unit_of_work import AbstractUnitOfWork


def get_tutor_rating(tutor_profile_id: str, uow: AbstractUnitOfWork) -> TutorAggregate:
    """Return the stored rating aggregate of a tutor.

    Raises:
        TutorProfileNotFoundError: If the tutor profile does not exist.
    """
    with uow:
        aggregate = uow.tutor_profiles.get_aggregate(tutor_profile_id)
    if aggregate is None:
        raise TutorProfileNotFoundError(tutor_profile_id)
    return aggregate


def list_tutor_reviews(
    tutor_profile_id: str, uow: AbstractUnitOfWork, limit: int | None = None
) -> list[Review]:
    """Return a tutor's reviews, newest first.

    Raises:
        TutorProfileNotFoundError: If the tutor profile does not exist.
        ValueError: If limit is given and < 1.
    """
    with uow:
        if uow.tutor_profiles.get_aggregate(tutor_profile_id) is None:
            raise TutorProfileNotFoundError(tutor_profile_id)
        return uow.reviews.list_for_tutor(tutor_profile_id, limit=limit)
