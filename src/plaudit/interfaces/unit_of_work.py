"""Unit of Work interface for PLAUDIT.

Defines the AbstractUnitOfWork contract: a context-managed unit of work
exposing the booking, review and tutor-profile ports, with abstract
commit/rollback methods. Everything done inside one `with uow:` block commits
or rolls back together.
"""

from __future__ import annotations

import abc

from .bookings import BookingReader
from .reviews import ReviewStore
from .tutor_profiles import TutorProfileStore


class AbstractUnitOfWork(abc.ABC):
    """Contract for a transactional unit of work."""

    bookings: BookingReader
    reviews: ReviewStore
    tutor_profiles: TutorProfileStore

    def __enter__(self) -> AbstractUnitOfWork:
        """Enter the unit of work context and return the unit.

        Implementations may acquire transactional resources here.
        """
        return self

    def __exit__(self, *args):
        """Exit the unit of work context.

        Default behavior is to roll back on exit; after a commit there is
        nothing left to roll back.
        """
        self.rollback()

    @abc.abstractmethod
    def commit(self):
        """Persist changes and finalize the transaction."""

    @abc.abstractmethod
    def rollback(self):
        """Revert changes and clean up transactional resources."""
