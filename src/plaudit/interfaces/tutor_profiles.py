"""Port onto the rating aggregate stored on tutor profiles.

The aggregate row is the only contended resource in the review workflow.
Writers must call `lock()` before reading ratings and saving a new aggregate;
the lock is held until the unit of work commits or rolls back, so two
recomputes for the same tutor never interleave their read and write.
"""

from __future__ import annotations

import abc
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from plaudit.domain.model import TutorAggregate


class TutorProfileStore(abc.ABC):
    """Aggregate fields of tutor profiles."""

    @abc.abstractmethod
    def lock(self, tutor_profile_id: str) -> None:
        """Acquire exclusive access to the tutor's aggregate for this unit.

        Blocks while another unit holds the lock, up to the configured
        timeout. Re-locking within the same unit is a no-op.

        Args:
            tutor_profile_id: The tutor profile identifier.

        Raises:
            TutorProfileNotFoundError: If the profile does not exist.
            TransientStorageError: If the lock could not be acquired in time.
        """

    @abc.abstractmethod
    def get_aggregate(self, tutor_profile_id: str) -> TutorAggregate | None:
        """Return the stored aggregate, or None if the profile does not exist."""

    @abc.abstractmethod
    def save_aggregate(self, tutor_profile_id: str, aggregate: TutorAggregate) -> None:
        """Overwrite the stored aggregate.

        Callers must hold the lock from `lock()`.

        Raises:
            TutorProfileNotFoundError: If the profile does not exist.
            StorageError: If the write fails.
        """
