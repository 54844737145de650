"""In-memory stores for the review workflow.

Non-durable: all data is lost when the `InMemoryReviewData` is discarded.
Unlike a plain fake, these stores are thread-safe and reproduce the database's
concurrency semantics (unique booking reservation, per-tutor locks, staged
writes visible only after commit), so they can back concurrency tests and
single-process deployments.
"""

from .bookings import InMemoryBookingReader
from .data import InMemoryReviewData, PendingChanges
from .reviews import InMemoryReviewStore
from .tutor_profiles import InMemoryTutorProfileStore

__all__ = [
    "InMemoryBookingReader",
    "InMemoryReviewData",
    "InMemoryReviewStore",
    "InMemoryTutorProfileStore",
    "PendingChanges",
]
