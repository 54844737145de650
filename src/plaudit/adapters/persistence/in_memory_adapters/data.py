"""Shared state behind the in-memory stores.

`InMemoryReviewData` plays the part of the database: it holds committed rows
and the locks that arbitrate concurrent units of work. `PendingChanges` plays
the part of one open transaction: writes staged by a unit of work that become
visible to others only when the unit commits.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field

from plaudit.domain.model import BookingSnapshot, BookingStatus, Review, TutorAggregate


@dataclass
class InMemoryReviewData:
    """Committed state plus the locks guarding it.

    `lock` guards every dict and set here. Per-tutor locks are handed out by
    `tutor_lock()` and held by a unit of work from `TutorProfileStore.lock()`
    until it commits or rolls back.
    """

    bookings: dict[str, BookingSnapshot] = field(default_factory=dict)
    tutor_profiles: dict[str, TutorAggregate] = field(default_factory=dict)
    reviews: dict[str, Review] = field(default_factory=dict)  # keyed by booking_id
    reserved_booking_ids: set[str] = field(default_factory=set)
    lock: threading.RLock = field(default_factory=threading.RLock)
    _tutor_locks: dict[str, threading.Lock] = field(default_factory=dict)

    def tutor_lock(self, tutor_profile_id: str) -> threading.Lock:
        """Return the lock serializing aggregate writers for one tutor."""
        with self.lock:
            return self._tutor_locks.setdefault(tutor_profile_id, threading.Lock())

    # --- seeding (the booking lifecycle owns these rows in production) ---

    def add_tutor_profile(
        self, tutor_profile_id: str, aggregate: TutorAggregate | None = None
    ) -> None:
        """Register a tutor profile, with an empty aggregate by default."""
        with self.lock:
            self.tutor_profiles[tutor_profile_id] = aggregate or TutorAggregate.empty()

    def add_booking(
        self,
        booking_id: str,
        *,
        student_id: str,
        tutor_profile_id: str,
        status: BookingStatus = BookingStatus.COMPLETED,
    ) -> None:
        """Register a booking for an existing tutor profile."""
        with self.lock:
            if tutor_profile_id not in self.tutor_profiles:
                raise KeyError(f"unknown tutor profile {tutor_profile_id!r}")
            self.bookings[booking_id] = BookingSnapshot(
                booking_id=booking_id,
                student_id=student_id,
                tutor_profile_id=tutor_profile_id,
                status=status,
            )


@dataclass
class PendingChanges:
    """Writes and locks of one open in-memory unit of work."""

    reviews: list[Review] = field(default_factory=list)
    aggregates: dict[str, TutorAggregate] = field(default_factory=dict)
    held_locks: dict[str, threading.Lock] = field(default_factory=dict)

    def review_for(self, booking_id: str) -> Review | None:
        """Return the staged review for a booking, if any."""
        for review in self.reviews:
            if review.booking_id == booking_id:
                return review
        return None
