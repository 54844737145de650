"""Read-only port onto bookings owned by the booking lifecycle.

The review workflow never creates or mutates bookings; it only needs one
composed read that returns the booking, its tutor profile reference and any
existing review together.
"""

from __future__ import annotations

import abc
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from plaudit.domain.model import BookingSnapshot

# pylint: disable=too-few-public-methods


class BookingReader(abc.ABC):
    """Composed booking lookup."""

    @abc.abstractmethod
    def get_with_tutor_and_review(self, booking_id: str) -> BookingSnapshot | None:
        """Fetch a booking with its tutor profile id and existing review id.

        Args:
            booking_id: The booking identifier.

        Returns:
            BookingSnapshot | None: The snapshot, or ``None`` if no such booking.

        Raises:
            StorageError: If the store cannot be read.
        """
